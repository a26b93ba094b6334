"""Savings goals and spending-reduction goals.

Revision ID: 0002_goals
Revises: 0001_initial_schema
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0002_goals"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    goal_status = sa.Enum("IN_PROGRESS", "COMPLETED", name="goalstatus")
    op.create_table(
        "goals",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("goal_name", sa.String(length=255), nullable=False),
        sa.Column("target_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("current_value", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("status", goal_status, nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("target_value > 0", name="chk_goals_target_value_positive"),
    )
    op.create_index("ix_goals_user_id", "goals", ["user_id"])

    period_type = sa.Enum("MONTHLY", "WEEKLY", name="periodtype")
    reduction_status = sa.Enum("ACTIVE", "COMPLETED", name="reductiongoalstatus")
    op.create_table(
        "reduction_goals",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("period_type", period_type, nullable=False),
        sa.Column("target_value", sa.Numeric(12, 2), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("status", reduction_status, nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.CheckConstraint("target_value > 0", name="chk_reduction_goals_target_value_positive"),
    )
    op.create_index("ix_reduction_goals_user_id", "reduction_goals", ["user_id"])


def downgrade() -> None:
    op.drop_table("reduction_goals")
    op.drop_table("goals")
    for enum_name in ("reductiongoalstatus", "periodtype", "goalstatus"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
