# src/mistake_tracker/api/v1/endpoints/ai_tools.py
"""AI tool registry and telemetry endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.models import AITool
from mistake_tracker.models.enums import ToolCategory, ToolStatus
from mistake_tracker.repositories.tool_repo import ToolSort
from mistake_tracker.schemas.ai_tool import (
    PerformanceUpdate,
    QueryRecord,
    StatsUpdate,
    ToolCreate,
    ToolDetailResponse,
    ToolResponse,
    ToolUpdate,
)
from mistake_tracker.services import ai_tools as tool_service

from ..dependencies import AdminDep, SessionDep, to_http_error

router = APIRouter(prefix="/ai-tools", tags=["ai-tools"])


@router.get("", response_model=list[ToolResponse])
async def list_tools(
    db: SessionDep,
    category: ToolCategory | None = None,
    tool_status: Annotated[ToolStatus | None, Query(alias="status")] = ToolStatus.active,
    sort: ToolSort = "accuracy",
) -> list[AITool]:
    return tool_service.list_tools(
        db,
        category=category.value if category else None,
        status=tool_status.value if tool_status else None,
        sort=sort,
    )


@router.get("/top", response_model=list[ToolResponse])
async def top_tools(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[AITool]:
    """Best accuracy first, lower mistake rate breaking ties."""
    return tool_service.top_performers(db, limit)


@router.get("/trending", response_model=list[ToolResponse])
async def trending_tools(
    db: SessionDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> list[AITool]:
    return tool_service.trending_tools(db, limit)


@router.get("/category/{category}", response_model=list[ToolResponse])
async def tools_by_category(category: ToolCategory, db: SessionDep) -> list[AITool]:
    return tool_service.tools_by_category(db, category.value)


@router.get("/slug/{slug}", response_model=ToolDetailResponse)
async def get_tool_by_slug(slug: str, db: SessionDep) -> AITool:
    try:
        return tool_service.get_tool_by_slug(db, slug)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.get("/{tool_id}", response_model=ToolDetailResponse)
async def get_tool(tool_id: int, db: SessionDep) -> AITool:
    try:
        return tool_service.get_tool(db, tool_id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.post("", response_model=ToolResponse, status_code=status.HTTP_201_CREATED)
async def create_tool(payload: ToolCreate, principal: AdminDep, db: SessionDep) -> AITool:
    try:
        return tool_service.create_tool(db, payload)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.put("/{tool_id}", response_model=ToolResponse)
async def update_tool(
    tool_id: int,
    payload: ToolUpdate,
    principal: AdminDep,
    db: SessionDep,
) -> AITool:
    try:
        return tool_service.update_tool(db, tool_id, payload)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.put("/{tool_id}/performance", response_model=ToolDetailResponse)
async def update_performance(
    tool_id: int,
    payload: PerformanceUpdate,
    principal: AdminDep,
    db: SessionDep,
) -> AITool:
    """Record a performance snapshot and prune old history."""
    try:
        return tool_service.record_performance_snapshot(db, tool_id, payload)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.put("/{tool_id}/stats", response_model=ToolResponse)
async def update_stats(
    tool_id: int,
    payload: StatsUpdate,
    principal: AdminDep,
    db: SessionDep,
) -> AITool:
    try:
        return tool_service.update_stats(db, tool_id, payload)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.delete("/{tool_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tool(tool_id: int, principal: AdminDep, db: SessionDep) -> None:
    try:
        tool_service.delete_tool(db, tool_id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.post("/{tool_id}/query", response_model=ToolResponse)
async def record_query(tool_id: int, payload: QueryRecord, db: SessionDep) -> AITool:
    try:
        return tool_service.record_query(db, tool_id, payload.was_successful)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err


@router.post("/{tool_id}/mistake", response_model=ToolResponse)
async def record_mistake(tool_id: int, db: SessionDep) -> AITool:
    try:
        return tool_service.record_mistake(db, tool_id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
