import asyncio
import json
import logging
from typing import AsyncIterator, Dict, Set

logger = logging.getLogger(__name__)

KEEPALIVE_SECONDS = 25

class SSEManager:
    """Fan-out of notification payloads to each user's open event streams."""

    def __init__(self):
        # One user may have several tabs or devices connected
        self.connections: Dict[str, Set[asyncio.Queue]] = {}

    def connect(self, user_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self.connections.setdefault(user_id, set()).add(queue)
        logger.debug(f"SSE client connected for user {user_id}. Active sessions: {len(self.connections[user_id])}")
        return queue

    def disconnect(self, user_id: str, queue: asyncio.Queue):
        queues = self.connections.get(user_id)
        if not queues or queue not in queues:
            return
        queues.remove(queue)
        logger.debug(f"SSE client disconnected for user {user_id}. Active sessions: {len(queues)}")
        if not queues:
            del self.connections[user_id]

    def is_connected(self, user_id: str) -> bool:
        return user_id in self.connections

    async def send_to_user(self, user_id: str, data: dict):
        queues = self.connections.get(user_id)
        if not queues:
            return
        try:
            message = f"data: {json.dumps(data, ensure_ascii=False)}\n\n"
        except TypeError as e:
            logger.error(f"Failed to serialize SSE payload: {e}")
            return
        for queue in queues:
            await queue.put(message)

    async def broadcast(self, data: dict):
        for user_id in list(self.connections.keys()):
            await self.send_to_user(user_id, data)

    async def stream(self, user_id: str) -> AsyncIterator[str]:
        """Yield SSE frames for one connection until the client goes away."""
        queue = self.connect(user_id)
        try:
            while True:
                try:
                    yield await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
        finally:
            self.disconnect(user_id, queue)

# Global instance
sse_manager = SSEManager()
