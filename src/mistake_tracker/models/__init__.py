# src/mistake_tracker/models/__init__.py
"""SQLAlchemy models for the Mistake Tracker application."""

from .ai_tool import AITool, AIToolPerformance
from .report import MistakeReport, ReportVote
from .user import User

__all__ = [
    "AITool", "AIToolPerformance",
    "MistakeReport", "ReportVote",
    "User",
]
