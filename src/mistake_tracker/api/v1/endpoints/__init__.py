# src/mistake_tracker/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .ai_tools import router as ai_tools_router
from .analytics import router as analytics_router
from .auth import router as auth_router
from .events import router as events_router
from .moderation import router as moderation_router
from .reports import router as reports_router
from .users import router as users_router
from .votes import router as votes_router

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
