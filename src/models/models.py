import uuid
import enum

from sqlalchemy import (
    Boolean, Column, Date, ForeignKey, Integer, Numeric, String, Text, DateTime, Uuid,
    Enum as SAEnum, UniqueConstraint, CheckConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship, backref, Mapped

Base = declarative_base()

class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the identity provider's user (JWT "sub")
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    profession = Column(String(255), nullable=True)
    avatar_url = Column(String(255), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Profile(id={self.id}, email={self.email}, is_admin={self.is_admin})>"

class UserLogin(Base):
    __tablename__ = "user_logins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    login_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user: Mapped[Profile] = relationship("Profile", backref=backref("logins", cascade="all, delete-orphan"))

    def __repr__(self):
        return f"<UserLogin(id={self.id}, user_id={self.user_id}, login_at={self.login_at})>"

class PointEntry(Base):
    """Append-only XP ledger row. Negative points are deductions."""
    __tablename__ = "user_points"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    action_type = Column(String(64), nullable=False)
    points = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<PointEntry(id={self.id}, user_id={self.user_id}, action_type={self.action_type}, points={self.points})>"

class UnlockedAchievement(Base):
    __tablename__ = "user_achievements"

    __table_args__ = (
        UniqueConstraint('user_id', 'achievement_key', name='unique_user_achievement'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    achievement_key = Column(String(64), nullable=False)
    unlocked_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<UnlockedAchievement(user_id={self.user_id}, achievement_key={self.achievement_key})>"

class Reward(Base):
    __tablename__ = "rewards"

    __table_args__ = (
        CheckConstraint('points_required > 0', name='chk_rewards_points_required_positive'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    points_required = Column(Integer, nullable=False)
    image_url = Column(String(255), nullable=True)
    stock = Column(Integer, nullable=False, default=-1)  # -1 means unlimited
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Reward(id={self.id}, name={self.name}, points_required={self.points_required})>"

class ClaimStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DELIVERED = "delivered"
    REJECTED = "rejected"

class RewardClaim(Base):
    __tablename__ = "user_reward_claims"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    reward_id = Column(Uuid, ForeignKey("rewards.id"), nullable=False, index=True)
    status = Column(SAEnum(ClaimStatus), nullable=False, default=ClaimStatus.PENDING)
    claimed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    reward: Mapped[Reward] = relationship("Reward", backref=backref("claims", cascade="all, delete-orphan"))

    def __repr__(self):
        return f"<RewardClaim(id={self.id}, user_id={self.user_id}, reward_id={self.reward_id}, status={self.status.value})>"

class NotificationType(enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    # NULL user_id means the notification is broadcast to everybody
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=True, index=True)
    type = Column(SAEnum(NotificationType), nullable=False, default=NotificationType.INFO)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Notification(id={self.id}, user_id={self.user_id}, title={self.title}, read={self.read})>"

class FinanceType(enum.Enum):
    INCOME = "income"
    FIXED_EXPENSE = "fixed_expense"
    VARIABLE_EXPENSE = "variable_expense"
    RECEIVABLE = "receivable"
    DEBT = "debt"

EXPENSE_TYPES = (FinanceType.FIXED_EXPENSE, FinanceType.VARIABLE_EXPENSE)

class FinanceEntry(Base):
    __tablename__ = "finances"

    __table_args__ = (
        CheckConstraint('value > 0', name='chk_finances_value_positive'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    type = Column(SAEnum(FinanceType), nullable=False)
    category = Column(String(100), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<FinanceEntry(id={self.id}, type={self.type.value}, category={self.category}, value={self.value})>"

class GoalStatus(enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

class Goal(Base):
    """A savings goal: reach target_value by the optional deadline."""
    __tablename__ = "goals"

    __table_args__ = (
        CheckConstraint('target_value > 0', name='chk_goals_target_value_positive'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    goal_name = Column(String(255), nullable=False)
    target_value = Column(Numeric(12, 2), nullable=False)
    current_value = Column(Numeric(12, 2), nullable=False, default=0)
    deadline = Column(Date, nullable=True)
    status = Column(SAEnum(GoalStatus), nullable=False, default=GoalStatus.IN_PROGRESS)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Goal(id={self.id}, goal_name={self.goal_name}, status={self.status.value})>"

class PeriodType(enum.Enum):
    MONTHLY = "mensal"
    WEEKLY = "semanal"

class ReductionGoalStatus(enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"

class ReductionGoal(Base):
    """A spending cap for one expense category per week or month."""
    __tablename__ = "reduction_goals"

    __table_args__ = (
        CheckConstraint('target_value > 0', name='chk_reduction_goals_target_value_positive'),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    category = Column(String(100), nullable=False)
    period_type = Column(SAEnum(PeriodType), nullable=False, default=PeriodType.MONTHLY)
    target_value = Column(Numeric(12, 2), nullable=False)
    deadline = Column(Date, nullable=True)
    status = Column(SAEnum(ReductionGoalStatus), nullable=False, default=ReductionGoalStatus.ACTIVE)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ReductionGoal(id={self.id}, category={self.category}, status={self.status.value})>"
