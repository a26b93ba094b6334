"""Initial schema: profiles, points ledger, achievements, rewards, notifications, finances.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("profession", sa.String(length=255), nullable=True),
        sa.Column("avatar_url", sa.String(length=255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    op.create_table(
        "user_logins",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        _timestamp("login_at"),
    )
    op.create_index("ix_user_logins_user_id", "user_logins", ["user_id"])

    op.create_table(
        "user_points",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("action_type", sa.String(length=64), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_user_points_user_id", "user_points", ["user_id"])

    op.create_table(
        "user_achievements",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("achievement_key", sa.String(length=64), nullable=False),
        _timestamp("unlocked_at"),
        sa.UniqueConstraint("user_id", "achievement_key", name="unique_user_achievement"),
    )
    op.create_index("ix_user_achievements_user_id", "user_achievements", ["user_id"])

    op.create_table(
        "rewards",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("points_required", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(length=255), nullable=True),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="-1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        sa.CheckConstraint("points_required > 0", name="chk_rewards_points_required_positive"),
    )

    claim_status = sa.Enum("PENDING", "APPROVED", "DELIVERED", "REJECTED", name="claimstatus")
    op.create_table(
        "user_reward_claims",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("reward_id", sa.Uuid(), sa.ForeignKey("rewards.id"), nullable=False),
        sa.Column("status", claim_status, nullable=False),
        _timestamp("claimed_at"),
    )
    op.create_index("ix_user_reward_claims_user_id", "user_reward_claims", ["user_id"])
    op.create_index("ix_user_reward_claims_reward_id", "user_reward_claims", ["reward_id"])

    notification_type = sa.Enum("INFO", "SUCCESS", "WARNING", name="notificationtype")
    op.create_table(
        "notifications",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=True),
        sa.Column("type", notification_type, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        _timestamp("created_at"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    finance_type = sa.Enum(
        "INCOME", "FIXED_EXPENSE", "VARIABLE_EXPENSE", "RECEIVABLE", "DEBT", name="financetype"
    )
    op.create_table(
        "finances",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("type", finance_type, nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("value", sa.Numeric(12, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _timestamp("created_at"),
        sa.CheckConstraint("value > 0", name="chk_finances_value_positive"),
    )
    op.create_index("ix_finances_user_id", "finances", ["user_id"])
    op.create_index("ix_finances_date", "finances", ["date"])


def downgrade() -> None:
    op.drop_table("finances")
    op.drop_table("notifications")
    op.drop_table("user_reward_claims")
    op.drop_table("rewards")
    op.drop_table("user_achievements")
    op.drop_table("user_points")
    op.drop_table("user_logins")
    op.drop_table("profiles")
    for enum_name in ("financetype", "notificationtype", "claimstatus"):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
