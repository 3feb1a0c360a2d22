# src/mistake_tracker/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .ai_tool import PerformanceUpdate, StatsUpdate, ToolCreate, ToolResponse, ToolUpdate
from .moderation import RejectRequest
from .report import ReportCreate, ReportPage, ReportResponse
from .user import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from .vote import VoteCreate, VoteResult

__all__ = [
    "PerformanceUpdate", "StatsUpdate", "ToolCreate", "ToolResponse", "ToolUpdate",
    "RejectRequest",
    "ReportCreate", "ReportPage", "ReportResponse",
    "LoginRequest", "RegisterRequest", "TokenResponse", "UserResponse",
    "VoteCreate", "VoteResult",
]
