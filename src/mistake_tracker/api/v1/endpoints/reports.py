# src/mistake_tracker/api/v1/endpoints/reports.py
"""Mistake report endpoints for the Mistake Tracker API."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.models import MistakeReport, User
from mistake_tracker.models.enums import AIToolName, MistakeCategory, ReportStatus, Severity
from mistake_tracker.repositories.report_repo import ReportSort
from mistake_tracker.schemas.report import Pagination, ReportCreate, ReportPage, ReportResponse
from mistake_tracker.services import reports as report_service
from mistake_tracker.services.events import NEW_REPORT, EventBroadcaster, get_broadcaster
from mistake_tracker.services.reports import ReportPageResult
from mistake_tracker.services.votes import NO_VOTE

from ..dependencies import OptionalUserDep, SessionDep, principal_for, to_http_error

router = APIRouter(prefix="/reports", tags=["reports"])

BroadcasterDep = Annotated[EventBroadcaster, Depends(get_broadcaster)]


def serialize_reports(
    db: Session,
    reports: list[MistakeReport],
    user: User | None,
) -> list[ReportResponse]:
    """Shape reports for output, adding the caller's vote when signed in."""
    votes = report_service.user_votes_for(db, user.id, reports) if user else {}
    items = []
    for report in reports:
        item = ReportResponse.model_validate(report)
        if user is not None:
            item.user_vote = votes.get(report.id, NO_VOTE)
        items.append(item)
    return items


def _page(db: Session, result: ReportPageResult, user: User | None) -> ReportPage:
    return ReportPage(
        data=serialize_reports(db, result.items, user),
        pagination=Pagination(
            page=result.page, limit=result.limit, total=result.total, pages=result.pages
        ),
    )


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(
    payload: ReportCreate,
    db: SessionDep,
    user: OptionalUserDep,
    broadcaster: BroadcasterDep,
) -> ReportResponse:
    """Submit a report; signed-in callers are recorded as the reporter."""
    principal = principal_for(user) if user else None
    try:
        report = report_service.submit_report(db, payload, principal)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err

    response = ReportResponse.model_validate(report)
    broadcaster.publish(NEW_REPORT, response.model_dump(mode="json"))
    return response


@router.get("", response_model=ReportPage)
async def list_reports(
    db: SessionDep,
    user: OptionalUserDep,
    ai_tool: AIToolName | None = None,
    category: MistakeCategory | None = None,
    severity: Severity | None = None,
    report_status: Annotated[ReportStatus | None, Query(alias="status")] = ReportStatus.verified,
    sort: ReportSort = "newest",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ReportPage:
    """List public reports with filtering, sorting and pagination."""
    result = report_service.list_reports(
        db,
        ai_tool=ai_tool.value if ai_tool else None,
        category=category.value if category else None,
        severity=severity.value if severity else None,
        status=report_status.value if report_status else None,
        sort=sort,
        page=page,
        limit=limit,
    )
    return _page(db, result, user)


@router.get("/trending", response_model=list[ReportResponse])
async def trending_reports(
    db: SessionDep,
    user: OptionalUserDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[ReportResponse]:
    return serialize_reports(db, report_service.trending_reports(db, limit), user)


@router.get("/tool/{ai_tool}", response_model=ReportPage)
async def reports_by_tool(
    ai_tool: AIToolName,
    db: SessionDep,
    user: OptionalUserDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ReportPage:
    """Verified reports for one AI tool, newest first."""
    result = report_service.list_reports(db, ai_tool=ai_tool.value, page=page, limit=limit)
    return _page(db, result, user)


@router.get("/category/{category}", response_model=ReportPage)
async def reports_by_category(
    category: MistakeCategory,
    db: SessionDep,
    user: OptionalUserDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ReportPage:
    result = report_service.list_reports(db, category=category.value, page=page, limit=limit)
    return _page(db, result, user)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: int, db: SessionDep, user: OptionalUserDep) -> ReportResponse:
    """Fetch one report and count the view."""
    try:
        report = report_service.view_report(db, report_id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return serialize_reports(db, [report], user)[0]


@router.post("/{report_id}/share", response_model=ReportResponse)
async def share_report(report_id: int, db: SessionDep, user: OptionalUserDep) -> ReportResponse:
    try:
        report = report_service.share_report(db, report_id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return serialize_reports(db, [report], user)[0]
