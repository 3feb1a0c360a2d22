# src/mistake_tracker/services/analytics.py
"""Group-by aggregates behind the dashboard and comparison views."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import InvalidArgumentError
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.ai_tool import AITool
from mistake_tracker.models.enums import ReportStatus, ToolStatus, VoteDirection
from mistake_tracker.models.report import MistakeReport, ReportVote
from mistake_tracker.models.user import User
from mistake_tracker.repositories.report_repo import ReportRepository
from mistake_tracker.repositories.tool_repo import ToolRepository

PERIODS: dict[str, int | None] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "1y": 365,
    "all": None,
}

_VERIFIED = ReportStatus.verified.value
REALTIME_WINDOW = timedelta(hours=24)


def period_start(period: str, now: datetime | None = None) -> datetime | None:
    """Return the start of ``period`` relative to ``now``; None for ``all``."""
    if period not in PERIODS:
        raise InvalidArgumentError(f"Unknown period {period!r}")
    days = PERIODS[period]
    if days is None:
        return None
    return (now or utcnow()) - timedelta(days=days)


def _since(stmt: Select[Any], since: datetime | None) -> Select[Any]:
    if since is not None:
        stmt = stmt.where(MistakeReport.created_at >= since)
    return stmt


def _count(db: Session, stmt: Select[Any]) -> int:
    return int(db.scalar(stmt) or 0)


def dashboard(db: Session, period: str = "30d", *, now: datetime | None = None) -> dict[str, Any]:
    """Build the dashboard payload for reports created within ``period``."""
    since = period_start(period, now)
    verified = MistakeReport.status == _VERIFIED

    overview = {
        "total_reports": _count(db, _since(select(func.count(MistakeReport.id)), since)),
        "verified_reports": _count(
            db, _since(select(func.count(MistakeReport.id)).where(verified), since)
        ),
        "total_users": _count(db, select(func.count(User.id))),
        "active_tools": _count(
            db, select(func.count(AITool.id)).where(AITool.status == ToolStatus.active.value)
        ),
        "total_votes": int(
            db.scalar(_since(select(func.coalesce(func.sum(MistakeReport.total_votes), 0)), since))
            or 0
        ),
    }

    by_category = db.execute(
        _since(
            select(MistakeReport.category, func.count(MistakeReport.id))
            .where(verified)
            .group_by(MistakeReport.category),
            since,
        ).order_by(func.count(MistakeReport.id).desc(), MistakeReport.category)
    ).all()
    by_tool = db.execute(
        _since(
            select(
                MistakeReport.ai_tool,
                func.count(MistakeReport.id),
                func.avg(MistakeReport.vote_score),
            )
            .where(verified)
            .group_by(MistakeReport.ai_tool),
            since,
        ).order_by(func.count(MistakeReport.id).desc(), MistakeReport.ai_tool)
    ).all()
    by_severity = db.execute(
        _since(
            select(MistakeReport.severity, func.count(MistakeReport.id))
            .where(verified)
            .group_by(MistakeReport.severity),
            since,
        ).order_by(func.count(MistakeReport.id).desc(), MistakeReport.severity)
    ).all()

    reports = ReportRepository(db)
    return {
        "period": period,
        "overview": overview,
        "reports_by_category": [
            {"category": category, "count": count} for category, count in by_category
        ],
        "reports_by_tool": [
            {"ai_tool": tool, "count": count, "avg_vote_score": round(float(avg or 0), 2)}
            for tool, count, avg in by_tool
        ],
        "reports_by_severity": [
            {"severity": severity, "count": count} for severity, count in by_severity
        ],
        "trending_reports": reports.trending(limit=5, since=since),
        "top_tools": ToolRepository(db).top_performers(limit=5),
        "recent_reports": reports.recent(limit=10, status=_VERIFIED, since=since),
    }


def user_analytics(db: Session, user_id: int) -> dict[str, Any]:
    """Aggregate the reports a user filed and the votes they cast."""
    mine = MistakeReport.reporter_id == user_id
    by_status = db.execute(
        select(MistakeReport.status, func.count(MistakeReport.id))
        .where(mine)
        .group_by(MistakeReport.status)
        .order_by(MistakeReport.status)
    ).all()
    by_category = db.execute(
        select(MistakeReport.category, func.count(MistakeReport.id))
        .where(mine)
        .group_by(MistakeReport.category)
        .order_by(func.count(MistakeReport.id).desc(), MistakeReport.category)
    ).all()
    votes = dict(
        db.execute(
            select(ReportVote.direction, func.count())
            .where(ReportVote.user_id == user_id)
            .group_by(ReportVote.direction)
        ).all()
    )

    status_counts = {status: int(count) for status, count in by_status}
    total_reports = sum(status_counts.values())
    verified_count = status_counts.get(_VERIFIED, 0)
    upvotes = int(votes.get(VoteDirection.upvote.value, 0))
    downvotes = int(votes.get(VoteDirection.downvote.value, 0))
    return {
        "total_reports": total_reports,
        "reports_by_status": [
            {"status": status, "count": count} for status, count in status_counts.items()
        ],
        "reports_by_category": [
            {"category": category, "count": count} for category, count in by_category
        ],
        "total_votes": upvotes + downvotes,
        "upvotes_cast": upvotes,
        "downvotes_cast": downvotes,
        "verification_rate": (
            round(verified_count / total_reports * 100, 2) if total_reports else 0.0
        ),
    }


def compare(
    db: Session,
    tools: list[str],
    period: str = "30d",
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Side-by-side verified report aggregates for the named AI tools."""
    if not tools:
        raise InvalidArgumentError("At least one AI tool is required for comparison")
    since = period_start(period, now)
    scope = (MistakeReport.status == _VERIFIED, MistakeReport.ai_tool.in_(tools))

    totals = {
        tool: (int(count), float(avg or 0))
        for tool, count, avg in db.execute(
            _since(
                select(
                    MistakeReport.ai_tool,
                    func.count(MistakeReport.id),
                    func.avg(MistakeReport.vote_score),
                )
                .where(*scope)
                .group_by(MistakeReport.ai_tool),
                since,
            )
        ).all()
    }
    by_category: dict[str, dict[str, int]] = defaultdict(dict)
    for tool, category, count in db.execute(
        _since(
            select(MistakeReport.ai_tool, MistakeReport.category, func.count(MistakeReport.id))
            .where(*scope)
            .group_by(MistakeReport.ai_tool, MistakeReport.category),
            since,
        )
    ).all():
        by_category[tool][category] = int(count)
    by_severity: dict[str, dict[str, int]] = defaultdict(dict)
    for tool, severity, count in db.execute(
        _since(
            select(MistakeReport.ai_tool, MistakeReport.severity, func.count(MistakeReport.id))
            .where(*scope)
            .group_by(MistakeReport.ai_tool, MistakeReport.severity),
            since,
        )
    ).all():
        by_severity[tool][severity] = int(count)

    return {
        "period": period,
        "tools": [
            {
                "ai_tool": tool,
                "total_reports": totals.get(tool, (0, 0.0))[0],
                "avg_vote_score": round(totals.get(tool, (0, 0.0))[1], 2),
                "by_category": by_category.get(tool, {}),
                "by_severity": by_severity.get(tool, {}),
            }
            for tool in tools
        ],
    }


def trending(db: Session, limit: int = 10) -> dict[str, Any]:
    return {
        "reports": ReportRepository(db).trending(limit=limit),
        "tools": ToolRepository(db).trending(limit=limit),
    }


def realtime(db: Session, *, now: datetime | None = None) -> dict[str, Any]:
    """Activity within the last 24 hours."""
    since = (now or utcnow()) - REALTIME_WINDOW
    return {
        "last_24_hours": {
            "reports": _count(db, _since(select(func.count(MistakeReport.id)), since)),
            "votes": _count(
                db, select(func.count()).select_from(ReportVote).where(ReportVote.created_at >= since)
            ),
            "new_users": _count(db, select(func.count(User.id)).where(User.created_at >= since)),
        },
        "recent_reports": ReportRepository(db).recent(limit=20, since=since),
        "recent_tool_updates": ToolRepository(db).recently_updated(since, limit=10),
    }
