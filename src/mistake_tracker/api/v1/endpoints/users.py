"""User-centric endpoints: own reports and votes, plus admin management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.models import User
from mistake_tracker.models.enums import ReportStatus
from mistake_tracker.repositories.report_repo import ReportRepository
from mistake_tracker.schemas.report import Pagination, ReportPage, ReportResponse
from mistake_tracker.schemas.user import (
    AccountDeleteRequest,
    RoleUpdateRequest,
    UserResponse,
    UserStatsResponse,
)
from mistake_tracker.services import reports as report_service
from mistake_tracker.services import users as user_service

from ..dependencies import AdminDep, CurrentUserDep, SessionDep, to_http_error
from .reports import serialize_reports

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me/reports", response_model=ReportPage)
async def my_reports(
    current_user: CurrentUserDep,
    db: SessionDep,
    report_status: Annotated[ReportStatus | None, Query(alias="status")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ReportPage:
    """Reports filed by the caller, in any status."""
    result = report_service.reports_by_user(
        db,
        current_user.id,
        status=report_status.value if report_status else None,
        page=page,
        limit=limit,
    )
    return ReportPage(
        data=serialize_reports(db, result.items, current_user),
        pagination=Pagination(
            page=result.page, limit=result.limit, total=result.total, pages=result.pages
        ),
    )


@router.get("/me/votes", response_model=list[ReportResponse])
async def my_votes(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[ReportResponse]:
    """Reports the caller currently has a vote on."""
    reports = ReportRepository(db).voted_by(current_user.id, offset=(page - 1) * limit, limit=limit)
    return serialize_reports(db, reports, current_user)


@router.get("/stats", response_model=UserStatsResponse)
async def my_stats(current_user: CurrentUserDep, db: SessionDep) -> UserStatsResponse:
    """Profile with the ten most recent reports and votes."""
    reports, voted = user_service.user_stats(db, current_user)
    return UserStatsResponse(
        user=UserResponse.model_validate(current_user),
        recent_reports=serialize_reports(db, reports, current_user),
        recent_votes=serialize_reports(db, voted, current_user),
    )


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    payload: AccountDeleteRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> None:
    """Delete the caller's own account after confirming the password."""
    try:
        user_service.delete_own_account(db, current_user, payload.password)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.get("", response_model=list[UserResponse])
async def list_users(
    principal: AdminDep,
    db: SessionDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
) -> list[User]:
    return list(user_service.get_users(db, skip=skip, limit=limit))


@router.put("/{user_id}/role", response_model=UserResponse)
async def set_role(
    user_id: int,
    payload: RoleUpdateRequest,
    principal: AdminDep,
    db: SessionDep,
) -> User:
    try:
        return user_service.set_role(db, principal, user_id, payload.role)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, principal: AdminDep, db: SessionDep) -> None:
    """Delete an account; its reports stay but become anonymous."""
    try:
        user_service.delete_user(db, principal, user_id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
