"""AI tool Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from mistake_tracker.models.enums import Capability, ToolCategory, ToolStatus


class ToolBase(BaseModel):
    description: str = Field(..., min_length=10, max_length=500)
    version: str = Field("1.0.0", max_length=32)
    provider: str = Field(..., min_length=1, max_length=100)
    category: ToolCategory = ToolCategory.language_model
    capabilities: list[Capability] = Field(default_factory=list)
    limitations: list[str] = Field(default_factory=list)
    website: HttpUrl | None = None
    pricing_input: float = Field(0.0, ge=0)
    pricing_output: float = Field(0.0, ge=0)
    pricing_currency: str = Field("USD", max_length=8)
    pricing_unit: str = Field("per-1k-tokens", max_length=32)
    status: ToolStatus = ToolStatus.active
    is_public: bool = True


class ToolCreate(ToolBase):
    """Schema for registering a new AI tool."""

    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class ToolUpdate(BaseModel):
    """Partial update; only supplied fields change."""

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=10, max_length=500)
    version: str | None = Field(None, max_length=32)
    provider: str | None = Field(None, min_length=1, max_length=100)
    category: ToolCategory | None = None
    capabilities: list[Capability] | None = None
    limitations: list[str] | None = None
    website: HttpUrl | None = None
    pricing_input: float | None = Field(None, ge=0)
    pricing_output: float | None = Field(None, ge=0)
    pricing_currency: str | None = Field(None, max_length=8)
    pricing_unit: str | None = Field(None, max_length=32)
    status: ToolStatus | None = None
    is_public: bool | None = None


class PerformanceUpdate(BaseModel):
    """Metrics for a performance snapshot; omitted fields keep their value."""

    accuracy: float | None = Field(None, ge=0, le=100)
    response_time: float | None = Field(None, ge=0)
    reliability: float | None = Field(None, ge=0, le=100)
    user_satisfaction: float | None = Field(None, ge=0, le=5)
    cost: float | None = Field(None, ge=0)
    total_queries: int | None = Field(None, ge=0)
    successful_queries: int | None = Field(None, ge=0)
    failed_queries: int | None = Field(None, ge=0)


class StatsUpdate(BaseModel):
    total_queries: int | None = Field(None, ge=0)
    successful_queries: int | None = Field(None, ge=0)
    failed_queries: int | None = Field(None, ge=0)
    total_mistakes: int | None = Field(None, ge=0)
    average_response_time: float | None = Field(None, ge=0)
    total_cost: float | None = Field(None, ge=0)
    active_users: int | None = Field(None, ge=0)


class QueryRecord(BaseModel):
    was_successful: bool = True


class PerformanceSnapshot(BaseModel):
    recorded_at: datetime
    accuracy: float
    response_time: float
    cost: float
    reliability: float
    user_satisfaction: float
    total_queries: int
    successful_queries: int
    failed_queries: int

    model_config = ConfigDict(from_attributes=True)


class ToolResponse(BaseModel):
    """Schema for AI tool information returned by the API."""

    id: int
    name: str
    slug: str
    description: str
    version: str
    provider: str
    category: ToolCategory
    capabilities: list[str]
    limitations: list[str]
    website: str
    pricing_input: float
    pricing_output: float
    pricing_currency: str
    pricing_unit: str
    status: ToolStatus
    is_public: bool
    accuracy: float
    response_time: float
    reliability: float
    user_satisfaction: float
    performance_last_updated: datetime
    total_queries: int
    successful_queries: int
    failed_queries: int
    total_mistakes: int
    mistake_rate: float
    average_response_time: float
    total_cost: float
    active_users: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ToolDetailResponse(ToolResponse):
    """Tool information including the rolling performance history."""

    historical: list[PerformanceSnapshot] = Field(default_factory=list)
