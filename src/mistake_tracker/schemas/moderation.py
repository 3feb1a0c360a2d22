# src/mistake_tracker/schemas/moderation.py
"""Moderation-related Pydantic schemas."""


from pydantic import BaseModel, Field, field_validator


class RejectRequest(BaseModel):
    """Schema for rejecting a report."""

    reason: str = Field(..., min_length=10, max_length=500, description="Why the report is invalid")

    @field_validator("reason", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value
