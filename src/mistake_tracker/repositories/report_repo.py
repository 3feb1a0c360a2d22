"""Data access helpers for working with mistake reports."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import Session

from mistake_tracker.models.enums import ReportStatus
from mistake_tracker.models.report import MistakeReport, ReportVote

__all__ = ["ReportRepository", "ReportSort", "TRENDING_ORDER"]

ReportSort = Literal["newest", "oldest", "most-voted", "least-voted"]

# Total order: score, then recency, then id so no two reports compare equal.
TRENDING_ORDER = (
    MistakeReport.vote_score.desc(),
    MistakeReport.created_at.desc(),
    MistakeReport.id.desc(),
)

_SORTS = {
    "newest": (MistakeReport.created_at.desc(), MistakeReport.id.desc()),
    "oldest": (MistakeReport.created_at.asc(), MistakeReport.id.asc()),
    "most-voted": TRENDING_ORDER,
    "least-voted": (
        MistakeReport.vote_score.asc(),
        MistakeReport.created_at.desc(),
        MistakeReport.id.desc(),
    ),
}


class ReportRepository:
    """Thin wrapper around database access for report entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, report_id: int) -> MistakeReport | None:
        """Return a report by identifier."""
        return self.session.get(MistakeReport, report_id)

    def add(self, report: MistakeReport) -> MistakeReport:
        self.session.add(report)
        self.session.flush()
        return report

    def get_vote(self, report_id: int, user_id: int) -> ReportVote | None:
        return self.session.get(ReportVote, (report_id, user_id))

    def count_directions(self, report_id: int) -> dict[str, int]:
        """Return ``{direction: count}`` straight from the ledger table."""
        rows = self.session.execute(
            select(ReportVote.direction, func.count())
            .where(ReportVote.report_id == report_id)
            .group_by(ReportVote.direction)
        ).all()
        return {direction: int(count) for direction, count in rows}

    def _filtered(
        self,
        *,
        ai_tool: str | None = None,
        category: str | None = None,
        severity: str | None = None,
        status: str | None = None,
        public_only: bool = True,
        since: datetime | None = None,
    ) -> Select[tuple[MistakeReport]]:
        stmt = select(MistakeReport)
        if public_only:
            stmt = stmt.where(MistakeReport.is_public.is_(True))
        if ai_tool:
            stmt = stmt.where(MistakeReport.ai_tool == ai_tool)
        if category:
            stmt = stmt.where(MistakeReport.category == category)
        if severity:
            stmt = stmt.where(MistakeReport.severity == severity)
        if status:
            stmt = stmt.where(MistakeReport.status == status)
        if since is not None:
            stmt = stmt.where(MistakeReport.created_at >= since)
        return stmt

    def search(
        self,
        *,
        sort: ReportSort = "newest",
        offset: int = 0,
        limit: int = 20,
        **filters: object,
    ) -> tuple[list[MistakeReport], int]:
        """Return one page of filtered reports and the total match count."""
        stmt = self._filtered(**filters)  # type: ignore[arg-type]
        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        page = self.session.scalars(
            stmt.order_by(*_SORTS[sort]).offset(offset).limit(limit)
        ).all()
        return list(page), int(total)

    def trending(self, limit: int = 10, since: datetime | None = None) -> list[MistakeReport]:
        """Verified public reports ordered by vote score."""
        stmt = self._filtered(status=ReportStatus.verified.value, since=since)
        return list(self.session.scalars(stmt.order_by(*TRENDING_ORDER).limit(limit)))

    def recent(
        self,
        *,
        limit: int = 20,
        ai_tool: str | None = None,
        category: str | None = None,
        status: str | None = None,
        since: datetime | None = None,
    ) -> list[MistakeReport]:
        stmt = self._filtered(ai_tool=ai_tool, category=category, status=status, since=since)
        stmt = stmt.order_by(MistakeReport.created_at.desc(), MistakeReport.id.desc())
        return list(self.session.scalars(stmt.limit(limit)))

    def moderation_queue(self, limit: int = 50) -> list[MistakeReport]:
        """Reports awaiting a moderation decision, oldest first."""
        stmt = (
            select(MistakeReport)
            .where(
                MistakeReport.status.in_(
                    [ReportStatus.pending.value, ReportStatus.investigating.value]
                )
            )
            .order_by(MistakeReport.created_at.asc(), MistakeReport.id.asc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def by_reporter(
        self,
        reporter_id: int,
        *,
        status: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[MistakeReport], int]:
        stmt = select(MistakeReport).where(MistakeReport.reporter_id == reporter_id)
        if status:
            stmt = stmt.where(MistakeReport.status == status)
        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        page = self.session.scalars(
            stmt.order_by(MistakeReport.created_at.desc(), MistakeReport.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(page), int(total)

    def voted_by(self, user_id: int, *, offset: int = 0, limit: int = 20) -> list[MistakeReport]:
        """Reports the user currently has a vote on, newest report first."""
        stmt = (
            select(MistakeReport)
            .join(ReportVote, ReportVote.report_id == MistakeReport.id)
            .where(ReportVote.user_id == user_id)
            .order_by(MistakeReport.created_at.desc(), MistakeReport.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def votes_by_user(self, user_id: int) -> list[ReportVote]:
        return list(self.session.scalars(select(ReportVote).where(ReportVote.user_id == user_id)))

    def user_votes_for(self, user_id: int, report_ids: list[int]) -> dict[int, str]:
        """Map report id to the user's vote direction for the given reports."""
        if not report_ids:
            return {}
        rows = self.session.execute(
            select(ReportVote.report_id, ReportVote.direction).where(
                ReportVote.user_id == user_id,
                ReportVote.report_id.in_(report_ids),
            )
        ).all()
        return {report_id: direction for report_id, direction in rows}

    def increment_counter(self, report_id: int, column: Literal["views", "shares"]) -> bool:
        """Atomically add one to ``views`` or ``shares``; False if the id is unknown."""
        col = getattr(MistakeReport, column)
        result = self.session.execute(
            update(MistakeReport)
            .where(MistakeReport.id == report_id)
            .values({column: col + 1})
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    def anonymize_reporter(self, reporter_id: int) -> int:
        """Detach a reporter from all their reports; returns the affected count."""
        result = self.session.execute(
            update(MistakeReport)
            .where(MistakeReport.reporter_id == reporter_id)
            .values(reporter_id=None, is_anonymous=True)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def clear_verifier(self, moderator_id: int) -> int:
        """Drop the verifier stamp from reports a deleted moderator handled."""
        result = self.session.execute(
            update(MistakeReport)
            .where(MistakeReport.verified_by_id == moderator_id)
            .values(verified_by_id=None)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)
