# src/mistake_tracker/services/moderation.py
"""Moderation services for mistake reports."""

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import InvalidArgumentError, InvalidTransitionError, NotFoundError
from mistake_tracker.core.principal import Principal
from mistake_tracker.db.concurrency import run_with_retry
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.enums import ReportStatus
from mistake_tracker.models.report import MistakeReport
from mistake_tracker.models.user import User
from mistake_tracker.repositories.report_repo import ReportRepository

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.pending: frozenset(
        {ReportStatus.investigating, ReportStatus.verified, ReportStatus.rejected}
    ),
    ReportStatus.investigating: frozenset({ReportStatus.verified, ReportStatus.rejected}),
    ReportStatus.verified: frozenset(),
    ReportStatus.rejected: frozenset(),
}

REASON_MIN_LENGTH = 10
REASON_MAX_LENGTH = 500


class ModerationService:
    """Service handling the report moderation state machine.

    Callers are trusted to have checked the principal's role; the transitions
    here only enforce which status changes are legal.
    """

    @staticmethod
    def can_transition(current: str, target: ReportStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[ReportStatus(current)]

    @staticmethod
    def _transition(
        db: Session,
        report_id: int,
        principal: Principal,
        target: ReportStatus,
        reason: str | None = None,
    ) -> MistakeReport:
        repo = ReportRepository(db)

        def _apply() -> MistakeReport:
            report = repo.get_by_id(report_id)
            if report is None:
                raise NotFoundError(f"Report {report_id} not found")
            if not ModerationService.can_transition(report.status, target):
                raise InvalidTransitionError(report.status, target.value)

            report.status = target.value
            if target in (ReportStatus.verified, ReportStatus.rejected):
                report.verified_by_id = principal.user_id
                report.verified_at = utcnow()
            if target == ReportStatus.rejected:
                report.rejection_reason = reason
            if target == ReportStatus.verified and report.reporter_id is not None:
                db.execute(
                    update(User)
                    .where(User.id == report.reporter_id)
                    .values(reports_verified=User.reports_verified + 1)
                    .execution_options(synchronize_session=False)
                )
            return report

        report = run_with_retry(db, _apply, label=f"report {report_id} moderation")
        logger.info(
            "Report %s moved to %s by user %s", report_id, target.value, principal.user_id
        )
        return report

    @staticmethod
    def start_investigation(db: Session, report_id: int, principal: Principal) -> MistakeReport:
        """Move a pending report under investigation."""
        return ModerationService._transition(db, report_id, principal, ReportStatus.investigating)

    @staticmethod
    def verify(db: Session, report_id: int, principal: Principal) -> MistakeReport:
        """Confirm a report and stamp the verifier.

        Raises:
            NotFoundError: If the report does not exist.
            InvalidTransitionError: If the report is already verified or rejected.
        """
        return ModerationService._transition(db, report_id, principal, ReportStatus.verified)

    @staticmethod
    def reject(db: Session, report_id: int, principal: Principal, reason: str) -> MistakeReport:
        """Reject a report with a 10-500 character reason.

        Raises:
            InvalidArgumentError: If the trimmed reason is out of range.
            NotFoundError: If the report does not exist.
            InvalidTransitionError: If the report is already verified or rejected.
        """
        reason = (reason or "").strip()
        if not REASON_MIN_LENGTH <= len(reason) <= REASON_MAX_LENGTH:
            raise InvalidArgumentError(
                f"Rejection reason must be {REASON_MIN_LENGTH}-{REASON_MAX_LENGTH} characters"
            )
        return ModerationService._transition(
            db, report_id, principal, ReportStatus.rejected, reason=reason
        )

    @staticmethod
    def queue(db: Session, limit: int = 50) -> list[MistakeReport]:
        """Reports still awaiting a decision, oldest first."""
        return ReportRepository(db).moderation_queue(limit)
