"""Models for AI tools and their performance history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from mistake_tracker.db.session import Base
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.enums import ToolCategory, ToolStatus, check_in
from mistake_tracker.utils.slug import slugify


class AITool(Base):
    """An AI product whose accuracy and mistakes are tracked.

    The ``performance_*`` columns hold the current snapshot; past snapshots
    live in :class:`AIToolPerformance`. ``mistake_rate`` is derived from
    ``total_mistakes`` and ``total_queries`` and is rewritten by the service
    layer whenever either counter changes.
    """

    __tablename__ = "ai_tool"
    __table_args__ = (
        CheckConstraint(check_in("category", ToolCategory), name="ck_ai_tool_category"),
        CheckConstraint(check_in("status", ToolStatus), name="ck_ai_tool_status"),
        CheckConstraint("mistake_rate >= 0 AND mistake_rate <= 100", name="ck_ai_tool_mistake_rate"),
        Index("ix_ai_tool_status", "status"),
        Index("ix_ai_tool_accuracy", "accuracy"),
        Index("ix_ai_tool_mistake_rate", "mistake_rate"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[str] = mapped_column(String(32), nullable=False, default="1.0.0")
    provider: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str] = mapped_column(
        String(32), nullable=False, default=ToolCategory.language_model.value
    )
    capabilities: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    limitations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    website: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    pricing_input: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pricing_output: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    pricing_currency: Mapped[str] = mapped_column(String(8), nullable=False, default="USD")
    pricing_unit: Mapped[str] = mapped_column(String(32), nullable=False, default="per-1k-tokens")

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=ToolStatus.active.value)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Current performance snapshot.
    accuracy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    response_time: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    reliability: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    user_satisfaction: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    performance_last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Cumulative stats.
    total_queries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_queries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_queries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_mistakes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    mistake_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    average_response_time: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    active_users: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    row_version: Mapped[int] = mapped_column(Integer, nullable=False)

    historical: Mapped[list[AIToolPerformance]] = relationship(
        "AIToolPerformance",
        back_populates="tool",
        cascade="all, delete-orphan",
        order_by="AIToolPerformance.recorded_at",
    )

    __mapper_args__ = {"version_id_col": row_version}

    @validates("name")
    def _derive_slug(self, _key: str, value: str) -> str:
        name = value.strip()
        self.slug = slugify(name)
        return name


class AIToolPerformance(Base):
    """Point-in-time capture of an AI tool's performance metrics."""

    __tablename__ = "ai_tool_performance"
    __table_args__ = (
        Index("ix_ai_tool_performance_tool_recorded", "tool_id", "recorded_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tool_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ai_tool.id", ondelete="CASCADE"),
        nullable=False,
    )
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    accuracy: Mapped[float] = mapped_column(Float, nullable=False)
    response_time: Mapped[float] = mapped_column(Float, nullable=False)
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    reliability: Mapped[float] = mapped_column(Float, nullable=False)
    user_satisfaction: Mapped[float] = mapped_column(Float, nullable=False)
    total_queries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_queries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_queries: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tool: Mapped[AITool] = relationship("AITool", back_populates="historical")
