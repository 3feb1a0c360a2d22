# src/mistake_tracker/api/v1/endpoints/analytics.py
"""Aggregate statistics for dashboards and tool comparison."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.models.enums import AIToolName
from mistake_tracker.schemas.analytics import (
    CompareResponse,
    DashboardResponse,
    Period,
    RealtimeResponse,
    TrendingResponse,
    UserAnalyticsResponse,
)
from mistake_tracker.services import analytics as analytics_service

from ..dependencies import CurrentUserDep, SessionDep, to_http_error

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(db: SessionDep, period: Period = "30d") -> dict[str, Any]:
    """Overview counts, breakdowns, and top lists for the period."""
    return analytics_service.dashboard(db, period)


@router.get("/user", response_model=UserAnalyticsResponse)
async def user_analytics(current_user: CurrentUserDep, db: SessionDep) -> dict[str, Any]:
    return analytics_service.user_analytics(db, current_user.id)


@router.get("/compare", response_model=CompareResponse)
async def compare(
    db: SessionDep,
    tools: Annotated[list[AIToolName], Query(min_length=1)],
    period: Period = "30d",
) -> dict[str, Any]:
    """Compare verified report aggregates across AI tools."""
    try:
        return analytics_service.compare(db, [tool.value for tool in tools], period)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.get("/trending", response_model=TrendingResponse)
async def trending(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> dict[str, Any]:
    return analytics_service.trending(db, limit)


@router.get("/realtime", response_model=RealtimeResponse)
async def realtime(db: SessionDep) -> dict[str, Any]:
    """Reports, votes, and sign-ups from the last 24 hours."""
    return analytics_service.realtime(db)
