# src/common/exceptions.py

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.common.utils.global_messages import GlobalMessages

logger = logging.getLogger(__name__)

class EconomizaError(Exception):
    """Base class for domain errors raised by the service layer."""

class DataAccessError(EconomizaError):
    """A read or write against the database failed."""

class UnknownActionType(EconomizaError):
    def __init__(self, action_type: str):
        super().__init__(f"Unknown action type: {action_type}")
        self.action_type = action_type

class UnknownAchievement(EconomizaError):
    def __init__(self, achievement_key: str):
        super().__init__(f"Unknown achievement: {achievement_key}")
        self.achievement_key = achievement_key

class DuplicateUnlock(EconomizaError):
    """The achievement is already unlocked for this user. Never surfaced to clients."""

class InsufficientPoints(EconomizaError):
    def __init__(self, available: int, required: int):
        super().__init__(f"Insufficient points: {available} < {required}")
        self.available = available
        self.required = required

class RewardUnavailable(EconomizaError):
    """The reward is inactive, missing, or out of stock."""

class InvalidClaimTransition(EconomizaError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Claim cannot move from {current} to {requested}")
        self.current = current
        self.requested = requested

async def data_access_error_handler(request: Request, exc: DataAccessError):
    logger.error(f"Data access failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": GlobalMessages.DATA_ACCESS_FAILED},
    )

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DataAccessError, data_access_error_handler)
