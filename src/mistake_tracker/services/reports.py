# src/mistake_tracker/services/reports.py
"""Submission, lookup, and listing of mistake reports."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import NotFoundError
from mistake_tracker.core.principal import Principal
from mistake_tracker.db.concurrency import run_with_retry
from mistake_tracker.models.enums import ReportStatus
from mistake_tracker.models.report import MistakeReport
from mistake_tracker.models.user import User
from mistake_tracker.repositories.report_repo import ReportRepository, ReportSort
from mistake_tracker.schemas.report import ReportCreate

logger = logging.getLogger(__name__)

__all__ = [
    "ReportPageResult",
    "get_report",
    "list_reports",
    "reports_by_user",
    "share_report",
    "submit_report",
    "trending_reports",
    "user_votes_for",
    "view_report",
]


@dataclass
class ReportPageResult:
    items: list[MistakeReport]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def submit_report(db: Session, data: ReportCreate, principal: Principal | None) -> MistakeReport:
    """Create a pending report, attributed to ``principal`` when given."""
    repo = ReportRepository(db)

    def _apply() -> MistakeReport:
        report = MistakeReport(
            reporter_id=principal.user_id if principal else None,
            is_anonymous=principal is None,
            ai_tool=data.ai_tool.value,
            category=data.category.value,
            severity=data.severity.value,
            user_query=data.user_query,
            ai_response=data.ai_response,
            corrected_answer=data.corrected_answer,
            description=data.description,
            impact=data.impact or None,
            tags=list(data.tags),
            status=ReportStatus.pending.value,
        )
        repo.add(report)
        if principal is not None:
            db.execute(
                update(User)
                .where(User.id == principal.user_id)
                .values(reports_submitted=User.reports_submitted + 1)
                .execution_options(synchronize_session=False)
            )
        return report

    report = run_with_retry(db, _apply, label="report submit")
    logger.info("Report %s submitted against %s", report.id, report.ai_tool)
    return report


def get_report(db: Session, report_id: int) -> MistakeReport:
    report = ReportRepository(db).get_by_id(report_id)
    if report is None:
        raise NotFoundError(f"Report {report_id} not found")
    return report


def view_report(db: Session, report_id: int) -> MistakeReport:
    """Return a report after counting one view."""
    if not ReportRepository(db).increment_counter(report_id, "views"):
        db.rollback()
        raise NotFoundError(f"Report {report_id} not found")
    db.commit()
    return get_report(db, report_id)


def share_report(db: Session, report_id: int) -> MistakeReport:
    if not ReportRepository(db).increment_counter(report_id, "shares"):
        db.rollback()
        raise NotFoundError(f"Report {report_id} not found")
    db.commit()
    return get_report(db, report_id)


def list_reports(
    db: Session,
    *,
    ai_tool: str | None = None,
    category: str | None = None,
    severity: str | None = None,
    status: str | None = ReportStatus.verified.value,
    sort: ReportSort = "newest",
    page: int = 1,
    limit: int = 20,
) -> ReportPageResult:
    """Return one page of public reports matching the filters."""
    items, total = ReportRepository(db).search(
        ai_tool=ai_tool,
        category=category,
        severity=severity,
        status=status,
        sort=sort,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return ReportPageResult(items=items, page=page, limit=limit, total=total)


def trending_reports(db: Session, limit: int = 10) -> list[MistakeReport]:
    """Verified public reports, highest score first."""
    return ReportRepository(db).trending(limit)


def reports_by_user(
    db: Session,
    user_id: int,
    *,
    status: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> ReportPageResult:
    items, total = ReportRepository(db).by_reporter(
        user_id, status=status, offset=(page - 1) * limit, limit=limit
    )
    return ReportPageResult(items=items, page=page, limit=limit, total=total)


def user_votes_for(db: Session, user_id: int, reports: list[MistakeReport]) -> dict[int, str]:
    return ReportRepository(db).user_votes_for(user_id, [report.id for report in reports])
