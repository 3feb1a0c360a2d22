# src/mistake_tracker/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    ai_tools_router,
    analytics_router,
    auth_router,
    events_router,
    moderation_router,
    reports_router,
    users_router,
    votes_router,
)

__all__ = [
    "ai_tools_router",
    "analytics_router",
    "auth_router",
    "events_router",
    "moderation_router",
    "reports_router",
    "users_router",
    "votes_router",
]
