# src/modules/gamification/ledger.py

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from src.common.exceptions import DataAccessError, DuplicateUnlock, UnknownAchievement, UnknownActionType
from src.events.dispatcher import EventDispatcher, dispatcher
from src.models.models import PointEntry, UnlockedAchievement
from src.modules.gamification import catalog
from src.modules.gamification.catalog import (
    AchievementDefinition, ActionDefinition, LevelDefinition,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

@dataclass
class LedgerState:
    total_xp: int = 0
    achievement_keys: Set[str] = field(default_factory=set)

def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return sqlstate == UNIQUE_VIOLATION
    return "unique" in str(orig).lower()

def _key_value(key) -> str:
    return key.value if isinstance(key, catalog.AchievementKey) else str(key)

class GamificationLedger:
    """
    XP and achievement bookkeeping for a single user.

    Total XP is always derived from the append-only ``user_points`` ledger.
    The in-memory total and achievement set are a per-request snapshot:
    ``load_state``/``refresh`` are the only reads, and successful writes
    update the snapshot by the same delta instead of re-reading.
    """

    def __init__(self, user_id: UUID, db: AsyncSession, events: Optional[EventDispatcher] = None):
        self.user_id = user_id
        self.db = db
        self.events = events if events is not None else dispatcher
        self.total_xp = 0
        self.achievement_keys: Set[str] = set()
        self._staged_points = 0

    @classmethod
    async def for_user(cls, user_id: UUID, db: AsyncSession, events: Optional[EventDispatcher] = None) -> "GamificationLedger":
        ledger = cls(user_id, db, events)
        await ledger.load_state()
        return ledger

    async def load_state(self) -> LedgerState:
        try:
            total = await self.db.scalar(
                select(func.coalesce(func.sum(PointEntry.points), 0)).where(PointEntry.user_id == self.user_id)
            )
            res = await self.db.execute(
                select(UnlockedAchievement.achievement_key).where(UnlockedAchievement.user_id == self.user_id)
            )
            keys = set(res.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error loading gamification data for user {self.user_id}: {e}")
            raise DataAccessError("Could not load gamification state") from e

        self.total_xp = int(total or 0)
        self.achievement_keys = keys
        return LedgerState(total_xp=self.total_xp, achievement_keys=set(keys))

    refresh = load_state

    # Level helpers over the in-memory total

    def get_current_level(self, total_xp: Optional[int] = None) -> LevelDefinition:
        return catalog.get_current_level(self.total_xp if total_xp is None else total_xp)

    def get_next_level(self, current: Optional[LevelDefinition] = None) -> Optional[LevelDefinition]:
        return catalog.get_next_level(current or self.get_current_level())

    def get_xp_progress(self, total_xp: Optional[int] = None) -> float:
        return catalog.get_xp_progress(self.total_xp if total_xp is None else total_xp)

    def has_achievement(self, key) -> bool:
        return _key_value(key) in self.achievement_keys

    # Mutations

    def _resolve_action(self, action_type) -> ActionDefinition:
        action = catalog.get_action(action_type)
        if action is None:
            raise UnknownActionType(str(action_type))
        return action

    def _resolve_achievement(self, key: str) -> AchievementDefinition:
        if key in self.achievement_keys:
            raise DuplicateUnlock(key)
        achievement = catalog.get_achievement(key)
        if achievement is None:
            raise UnknownAchievement(key)
        return achievement

    async def award_points(self, action_type, description: Optional[str] = None) -> bool:
        """
        Append one ledger entry for a known action. Returns False (and
        writes nothing) for unknown actions or when the insert fails.
        """
        try:
            action = self._resolve_action(action_type)
        except UnknownActionType as e:
            logger.warning(f"Not awarding points to user {self.user_id}: {e}")
            return False

        action_value = catalog.ActionType(action_type).value
        self.db.add(PointEntry(
            user_id=self.user_id,
            action_type=action_value,
            points=action.points,
            description=description or action.description,
        ))
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error awarding points ({action_value}) to user {self.user_id}: {e}")
            return False

        self.total_xp += action.points
        logger.info(f"Awarded {action.points} XP ({action_value}) to user {self.user_id}")
        await self._emit(
            "points_awarded",
            points=action.points,
            description=action.description,
        )
        return True

    async def unlock_achievement(self, achievement_key) -> bool:
        """
        Unlock an achievement and grant its XP in a single transaction.

        Returns False when the key is unknown, already unlocked, or the write
        fails. A unique-constraint violation means a concurrent session won
        the race; it is treated as already unlocked.
        """
        key = _key_value(achievement_key)
        try:
            achievement = self._resolve_achievement(key)
        except DuplicateUnlock:
            logger.debug(f"User {self.user_id} already has achievement '{key}'")
            return False
        except UnknownAchievement as e:
            logger.warning(f"Not unlocking for user {self.user_id}: {e}")
            return False

        try:
            self.db.add(UnlockedAchievement(user_id=self.user_id, achievement_key=key))
            await self.db.flush()
            self.db.add(PointEntry(
                user_id=self.user_id,
                action_type=catalog.achievement_action_type(key),
                points=achievement.xp_reward,
                description=f"Conquista: {achievement.name}",
            ))
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if _is_unique_violation(e):
                logger.info(f"Achievement '{key}' was already unlocked for user {self.user_id} by another session")
                self.achievement_keys.add(key)
            else:
                logger.error(f"Error unlocking achievement '{key}' for user {self.user_id}: {e}")
            return False
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error unlocking achievement '{key}' for user {self.user_id}: {e}")
            return False

        self.achievement_keys.add(key)
        self.total_xp += achievement.xp_reward
        logger.info(f"Achievement '{key}' unlocked for user {self.user_id} (+{achievement.xp_reward} XP)")
        await self._emit(
            "achievement_unlocked",
            achievement_key=key,
            achievement_name=achievement.name,
            icon=achievement.icon,
            xp=achievement.xp_reward,
        )
        return True

    def stage_entry(self, action_type: str, points: int, description: Optional[str] = None) -> PointEntry:
        """
        Add a ledger row to the caller's transaction without committing.
        The in-memory total moves only once ``commit`` succeeds.
        """
        entry = PointEntry(user_id=self.user_id, action_type=action_type, points=points, description=description)
        self.db.add(entry)
        self._staged_points += points
        return entry

    async def commit(self) -> None:
        staged, self._staged_points = self._staged_points, 0
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error committing ledger entries for user {self.user_id}: {e}")
            raise DataAccessError("Could not write ledger entries") from e
        self.total_xp += staged

    async def _emit(self, event_name: str, **payload) -> None:
        try:
            await self.events.dispatch(event_name, user_id=str(self.user_id), **payload)
        except Exception as e:
            # The XP change already happened; a lost notification is acceptable
            logger.error(f"Failed to emit '{event_name}' for user {self.user_id}: {e}")

async def get_point_history(user_id: UUID, db: AsyncSession, limit: int = 50, offset: int = 0) -> List[PointEntry]:
    res = await db.execute(
        select(PointEntry)
        .where(PointEntry.user_id == user_id)
        .order_by(PointEntry.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return res.scalars().all()
