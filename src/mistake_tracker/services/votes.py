# src/mistake_tracker/services/votes.py
"""Vote ledger maintenance and score recomputation for mistake reports."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import InvalidArgumentError, NotFoundError
from mistake_tracker.core.principal import Principal
from mistake_tracker.db.concurrency import run_with_retry
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.enums import VoteDirection
from mistake_tracker.models.report import MistakeReport, ReportVote
from mistake_tracker.models.user import User
from mistake_tracker.repositories.report_repo import ReportRepository

logger = logging.getLogger(__name__)

__all__ = ["NO_VOTE", "add_vote", "get_user_vote", "recompute_tallies", "remove_vote"]

NO_VOTE = "none"


def _parse_direction(direction: str | VoteDirection) -> VoteDirection:
    try:
        return VoteDirection(direction)
    except ValueError as err:
        raise InvalidArgumentError(
            f"Vote must be 'upvote' or 'downvote', got {direction!r}"
        ) from err


def _load_report(repo: ReportRepository, report_id: int) -> MistakeReport:
    report = repo.get_by_id(report_id)
    if report is None:
        raise NotFoundError(f"Report {report_id} not found")
    return report


def recompute_tallies(db: Session, report: MistakeReport) -> None:
    """Rewrite the cached tallies on ``report`` from its ledger rows.

    Pending ledger changes must already be flushed. ``updated_at`` is always
    touched so the versioned UPDATE is emitted even when the counts are unchanged.
    """
    counts = ReportRepository(db).count_directions(report.id)
    up = counts.get(VoteDirection.upvote.value, 0)
    down = counts.get(VoteDirection.downvote.value, 0)
    report.upvotes = up
    report.downvotes = down
    report.total_votes = up + down
    report.vote_score = up - down
    report.updated_at = utcnow()
    db.expire(report, ["votes"])


def add_vote(
    db: Session,
    report_id: int,
    principal: Principal,
    direction: str | VoteDirection,
) -> MistakeReport:
    """Record ``principal``'s vote on a report, replacing any earlier vote.

    Raises:
        InvalidArgumentError: If ``direction`` is not upvote or downvote.
        NotFoundError: If the report does not exist.
        ConflictError: If concurrent writers kept winning the race.
    """
    vote = _parse_direction(direction)
    repo = ReportRepository(db)

    def _apply() -> MistakeReport:
        report = _load_report(repo, report_id)
        existing = repo.get_vote(report_id, principal.user_id)
        if existing is not None:
            db.delete(existing)
            db.flush()
        else:
            db.execute(
                update(User)
                .where(User.id == principal.user_id)
                .values(total_votes=User.total_votes + 1)
                .execution_options(synchronize_session=False)
            )
        db.add(ReportVote(report_id=report_id, user_id=principal.user_id, direction=vote.value))
        db.flush()
        recompute_tallies(db, report)
        return report

    report = run_with_retry(db, _apply, label=f"report {report_id} vote")
    logger.debug(
        "User %s voted %s on report %s (score=%s)",
        principal.user_id,
        vote.value,
        report_id,
        report.vote_score,
    )
    return report


def remove_vote(db: Session, report_id: int, principal: Principal) -> MistakeReport:
    """Withdraw ``principal``'s vote; a no-op when they have not voted.

    Raises:
        NotFoundError: If the report does not exist.
    """
    repo = ReportRepository(db)

    def _apply() -> MistakeReport:
        report = _load_report(repo, report_id)
        existing = repo.get_vote(report_id, principal.user_id)
        if existing is not None:
            db.delete(existing)
            db.flush()
        recompute_tallies(db, report)
        return report

    report = run_with_retry(db, _apply, label=f"report {report_id} unvote")
    logger.debug("User %s cleared vote on report %s", principal.user_id, report_id)
    return report


def get_user_vote(db: Session, report_id: int, user_id: int) -> str:
    """Return ``"upvote"``, ``"downvote"`` or ``"none"`` for the user's vote."""
    repo = ReportRepository(db)
    _load_report(repo, report_id)
    vote = repo.get_vote(report_id, user_id)
    return vote.direction if vote is not None else NO_VOTE
