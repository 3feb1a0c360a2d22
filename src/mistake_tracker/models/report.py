"""Models for mistake reports and their vote ledger."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mistake_tracker.db.session import Base
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.enums import (
    AIToolName,
    MistakeCategory,
    ReportStatus,
    Severity,
    VoteDirection,
    check_in,
)


class MistakeReport(Base):
    """User-submitted claim that an AI tool produced an incorrect response.

    ``upvotes``, ``downvotes``, ``total_votes`` and ``vote_score`` are cached
    tallies of ``votes``; they are only ever written together with the ledger
    in the same transaction (see ``services.votes``).
    """

    __tablename__ = "mistake_report"
    __table_args__ = (
        CheckConstraint(check_in("ai_tool", AIToolName), name="ck_mistake_report_ai_tool"),
        CheckConstraint(check_in("category", MistakeCategory), name="ck_mistake_report_category"),
        CheckConstraint(check_in("severity", Severity), name="ck_mistake_report_severity"),
        CheckConstraint(check_in("status", ReportStatus), name="ck_mistake_report_status"),
        Index("ix_mistake_report_ai_tool_created", "ai_tool", "created_at"),
        Index("ix_mistake_report_category_created", "category", "created_at"),
        Index("ix_mistake_report_status_created", "status", "created_at"),
        Index("ix_mistake_report_score_created", "vote_score", "created_at"),
        Index("ix_mistake_report_reporter_created", "reporter_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Null for anonymous reports and for reporters whose account was deleted.
    reporter_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    ai_tool: Mapped[str] = mapped_column(String(32), nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    severity: Mapped[str] = mapped_column(String(8), nullable=False)
    user_query: Mapped[str] = mapped_column(Text, nullable=False)
    ai_response: Mapped[str] = mapped_column(Text, nullable=False)
    corrected_answer: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    impact: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Moderation state machine: pending -> investigating -> verified | rejected.
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=ReportStatus.pending.value
    )
    verified_by_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    vote_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shares: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Optimistic concurrency: every UPDATE checks and bumps this counter.
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    votes: Mapped[list[ReportVote]] = relationship(
        "ReportVote",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportVote.created_at",
    )

    __mapper_args__ = {"version_id_col": version}


class ReportVote(Base):
    """One entry in a report's vote ledger.

    The composite primary key prevents more than one vote per user per report.
    """

    __tablename__ = "report_vote"
    __table_args__ = (
        CheckConstraint(check_in("direction", VoteDirection), name="ck_report_vote_direction"),
        Index("ix_report_vote_user_id", "user_id"),
    )

    report_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("mistake_report.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    direction: Mapped[str] = mapped_column(String(8), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    report: Mapped[MistakeReport] = relationship("MistakeReport", back_populates="votes")
