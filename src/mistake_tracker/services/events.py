# src/mistake_tracker/services/events.py
"""In-process fan-out of report and vote events to WebSocket subscribers.

Delivery is at-most-once: a subscriber whose queue is full misses the event,
and publishing never raises into the caller's write path.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mistake_tracker.core.settings import settings

logger = logging.getLogger(__name__)

NEW_REPORT = "new-mistake-report"
VOTE_UPDATE = "vote-update"
REPORT_MODERATED = "report-moderated"


class EventBroadcaster:
    """Hold one bounded queue per connected subscriber."""

    def __init__(self, queue_size: int | None = None) -> None:
        self.queue_size = queue_size or settings.event_queue_size
        self._subscribers: set[asyncio.Queue[dict[str, Any]]] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[dict[str, Any]]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict[str, Any]]) -> None:
        self._subscribers.discard(queue)

    def publish(self, event: str, payload: dict[str, Any]) -> int:
        """Queue ``{"event", "data"}`` for every subscriber; returns deliveries."""
        message = {"event": event, "data": payload}
        delivered = 0
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Dropping %s event for a slow subscriber", event)
        return delivered


_broadcaster: EventBroadcaster | None = None


def get_broadcaster() -> EventBroadcaster:
    """Return the process-wide broadcaster, creating it on first use."""
    global _broadcaster
    if _broadcaster is None:
        _broadcaster = EventBroadcaster()
    return _broadcaster
