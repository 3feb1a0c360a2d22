"""SQLAlchemy models for registered users."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mistake_tracker.db.session import Base
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.enums import UserRole, check_in


class User(Base):
    """Registered account that can submit reports, vote, and moderate."""

    __tablename__ = "user_account"
    __table_args__ = (
        CheckConstraint(check_in("role", UserRole), name="ck_user_account_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=UserRole.user.value)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # {"theme": "light|dark|auto", "preferred_ai": "<AIToolName>"}
    preferences: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Per-user activity counters.
    reports_submitted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reports_verified: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
