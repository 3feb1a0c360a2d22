# src/mistake_tracker/api/v1/endpoints/events.py
"""WebSocket stream of report and vote events."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from mistake_tracker.services.events import get_broadcaster

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


@router.websocket("/ws")
async def event_stream(websocket: WebSocket) -> None:
    """Forward every broadcast as a ``{"event", "data"}`` JSON message."""
    broadcaster = get_broadcaster()
    await websocket.accept()
    queue = broadcaster.subscribe()
    try:
        while True:
            message = await queue.get()
            await websocket.send_json(message)
    except WebSocketDisconnect:
        logger.debug("Event subscriber disconnected")
    finally:
        broadcaster.unsubscribe(queue)
