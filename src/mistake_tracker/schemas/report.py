# src/mistake_tracker/schemas/report.py
"""Mistake-report Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mistake_tracker.models.enums import AIToolName, MistakeCategory, ReportStatus, Severity


class ReportCreate(BaseModel):
    """Schema for submitting a new mistake report."""

    ai_tool: AIToolName
    category: MistakeCategory
    severity: Severity
    user_query: str = Field(..., min_length=10, max_length=1000)
    ai_response: str = Field(..., min_length=10, max_length=5000)
    corrected_answer: str = Field(..., min_length=10, max_length=5000)
    description: str = Field(..., min_length=20, max_length=2000)
    impact: str | None = Field(None, max_length=1000)
    tags: list[str] = Field(default_factory=list, max_length=20)

    @field_validator("user_query", "ai_response", "corrected_answer", "description", "impact",
                     mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, tags: list[str]) -> list[str]:
        return [tag.strip() for tag in tags if tag.strip()]


class ReportResponse(BaseModel):
    """Schema for report information returned by the API."""

    id: int
    reporter_id: int | None
    is_anonymous: bool
    is_public: bool
    ai_tool: str
    category: str
    severity: str
    user_query: str
    ai_response: str
    corrected_answer: str
    description: str
    impact: str | None
    tags: list[str]
    status: ReportStatus
    verified_by_id: int | None
    verified_at: datetime | None
    rejection_reason: str | None
    upvotes: int
    downvotes: int
    total_votes: int
    vote_score: int
    views: int
    shares: int
    created_at: datetime
    updated_at: datetime
    # Filled in per caller; "none" when authenticated without a vote.
    user_vote: str | None = None

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ReportPage(BaseModel):
    """One page of reports plus pagination metadata."""

    data: list[ReportResponse]
    pagination: Pagination
