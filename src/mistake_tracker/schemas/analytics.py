"""Analytics response schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from .ai_tool import ToolResponse
from .report import ReportResponse

Period = Literal["7d", "30d", "90d", "1y", "all"]


class Overview(BaseModel):
    total_reports: int
    verified_reports: int
    total_users: int
    active_tools: int
    total_votes: int


class CategoryCount(BaseModel):
    category: str
    count: int


class ToolCount(BaseModel):
    ai_tool: str
    count: int
    avg_vote_score: float


class SeverityCount(BaseModel):
    severity: str
    count: int


class DashboardResponse(BaseModel):
    """Aggregates shown on the public dashboard."""

    period: Period
    overview: Overview
    reports_by_category: list[CategoryCount]
    reports_by_tool: list[ToolCount]
    reports_by_severity: list[SeverityCount]
    trending_reports: list[ReportResponse]
    top_tools: list[ToolResponse]
    recent_reports: list[ReportResponse]


class StatusCount(BaseModel):
    status: str
    count: int


class UserAnalyticsResponse(BaseModel):
    """Activity summary for the signed-in user."""

    total_reports: int
    reports_by_status: list[StatusCount]
    reports_by_category: list[CategoryCount]
    total_votes: int
    upvotes_cast: int
    downvotes_cast: int
    verification_rate: float = Field(..., description="Verified reports as a percentage")


class ToolComparison(BaseModel):
    ai_tool: str
    total_reports: int
    avg_vote_score: float
    by_category: dict[str, int]
    by_severity: dict[str, int]


class CompareResponse(BaseModel):
    period: Period
    tools: list[ToolComparison]


class TrendingResponse(BaseModel):
    reports: list[ReportResponse]
    tools: list[ToolResponse]


class RecentActivity(BaseModel):
    reports: int
    votes: int
    new_users: int


class RealtimeResponse(BaseModel):
    """Counts and latest items from the last 24 hours."""

    last_24_hours: RecentActivity
    recent_reports: list[ReportResponse]
    recent_tool_updates: list[ToolResponse]
