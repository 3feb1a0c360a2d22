# src/mistake_tracker/services/__init__.py
"""Business logic services for the Mistake Tracker application."""

from .events import EventBroadcaster, get_broadcaster
from .moderation import ModerationService

__all__ = [
    "EventBroadcaster",
    "ModerationService",
    "get_broadcaster",
]
