"""Publish/subscribe progress tracking for running jobs."""

import asyncio
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Track and broadcast translation progress per session."""

    def __init__(self):
        self._subscribers: Dict[str, List[asyncio.Queue]] = {}

    def subscribe(self, session_id: str) -> asyncio.Queue:
        """Subscribe to progress updates of one session."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.setdefault(session_id, []).append(queue)
        return queue

    def unsubscribe(self, session_id: str, queue: asyncio.Queue) -> None:
        """Unsubscribe from progress updates."""
        queues = self._subscribers.get(session_id, [])
        if queue in queues:
            queues.remove(queue)
        if not queues:
            self._subscribers.pop(session_id, None)

    async def broadcast(self, session_id: str, event: dict) -> None:
        """Broadcast an event to all subscribers of a session."""
        for queue in self._subscribers.get(session_id, []):
            await queue.put(event)
        logger.debug("[Progress] %s: %s", session_id, event)
