# src/mistake_tracker/api/v1/endpoints/moderation.py
"""Moderation endpoints for the Mistake Tracker API."""

from typing import Annotated

from fastapi import APIRouter, Query

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.models import MistakeReport
from mistake_tracker.schemas.moderation import RejectRequest
from mistake_tracker.schemas.report import ReportResponse
from mistake_tracker.services.events import REPORT_MODERATED
from mistake_tracker.services.moderation import ModerationService

from ..dependencies import ModeratorDep, SessionDep, to_http_error
from .reports import BroadcasterDep

router = APIRouter(prefix="/moderation", tags=["moderation"])


def _announce(broadcaster: BroadcasterDep, report: MistakeReport) -> ReportResponse:
    response = ReportResponse.model_validate(report)
    broadcaster.publish(
        REPORT_MODERATED,
        {"report_id": report.id, "status": report.status},
    )
    return response


@router.get("/queue", response_model=list[ReportResponse])
async def moderation_queue(
    principal: ModeratorDep,
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
) -> list[MistakeReport]:
    """Pending and investigating reports, oldest first."""
    return ModerationService.queue(db, limit)


@router.put("/{report_id}/investigate", response_model=ReportResponse)
async def investigate(
    report_id: int,
    principal: ModeratorDep,
    db: SessionDep,
    broadcaster: BroadcasterDep,
) -> ReportResponse:
    try:
        report = ModerationService.start_investigation(db, report_id, principal)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return _announce(broadcaster, report)


@router.put("/{report_id}/verify", response_model=ReportResponse)
async def verify(
    report_id: int,
    principal: ModeratorDep,
    db: SessionDep,
    broadcaster: BroadcasterDep,
) -> ReportResponse:
    """Mark a report as a confirmed mistake."""
    try:
        report = ModerationService.verify(db, report_id, principal)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return _announce(broadcaster, report)


@router.put("/{report_id}/reject", response_model=ReportResponse)
async def reject(
    report_id: int,
    payload: RejectRequest,
    principal: ModeratorDep,
    db: SessionDep,
    broadcaster: BroadcasterDep,
) -> ReportResponse:
    try:
        report = ModerationService.reject(db, report_id, principal, payload.reason)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return _announce(broadcaster, report)
