import asyncio
import logging
from typing import Callable, Dict, List, Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.common.database import database

logger = logging.getLogger(__name__)

# Type alias for event handlers
EventHandler = Callable[..., Any]

class EventDispatcher:
    """
    A lightweight internal Pub/Sub system.
    Listeners subscribe to string-based events and receive the event kwargs
    plus a fresh AsyncSession as `db`. Listener failures are logged and never
    reach the code that dispatched the event.
    """
    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self._listeners: Dict[str, List[EventHandler]] = {}
        self._session_factory = session_factory

    def subscribe(self, event_name: str, handler: EventHandler):
        if handler in self._listeners.setdefault(event_name, []):
            return
        self._listeners[event_name].append(handler)
        logger.info(f"Subscribed {handler.__name__} to '{event_name}'")

    def listeners(self, event_name: str) -> List[EventHandler]:
        return list(self._listeners.get(event_name, []))

    def _new_session(self) -> AsyncSession:
        factory = self._session_factory or database.async_session
        return factory()

    async def dispatch(self, event_name: str, **kwargs):
        """
        Dispatches an event to all subscribed listeners concurrently and
        commits whatever they added to the shared session.
        """
        handlers = self.listeners(event_name)
        if not handlers:
            logger.debug(f"Event '{event_name}' dispatched, but no listeners attached.")
            return

        logger.info(f"Dispatching event '{event_name}' to {len(handlers)} listeners.")

        async with self._new_session() as session:
            kwargs["db"] = session
            try:
                results = await asyncio.gather(*(handler(**kwargs) for handler in handlers), return_exceptions=True)
                for res in results:
                    if isinstance(res, Exception):
                        logger.error(f"Error in listener for '{event_name}': {res}", exc_info=res)

                await session.commit()
            except Exception as e:
                logger.error(f"Failed to complete event dispatch for '{event_name}': {e}")
                await session.rollback()

# Singleton instance
dispatcher = EventDispatcher()
