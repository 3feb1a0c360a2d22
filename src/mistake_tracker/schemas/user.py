"""User-related Pydantic schemas."""

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from mistake_tracker.models.enums import AIToolName, UserRole

from .report import ReportResponse

_PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password(value: str) -> str:
    if not _PASSWORD_RULE.match(value):
        raise ValueError(
            "Password must contain at least one lowercase letter, one uppercase letter, "
            "and one number"
        )
    return value


class Preferences(BaseModel):
    """Display preferences stored on the account."""

    theme: Literal["light", "dark", "auto"] = "light"
    preferred_ai: AIToolName | None = None


class RegisterRequest(BaseModel):
    """Schema for creating an account."""

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        """Require mixed case and a digit."""
        return _check_password(value)


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class UserResponse(BaseModel):
    """Public account details."""

    id: int
    name: str
    email: str
    role: UserRole
    is_verified: bool
    preferences: Preferences
    reports_submitted: int
    reports_verified: int
    total_votes: int
    last_login_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Response returned after successful registration or login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type (typically 'bearer')")
    user: UserResponse


class ProfileUpdateRequest(BaseModel):
    """Schema for updating user profile information."""

    name: str | None = Field(None, min_length=2, max_length=50)
    preferences: Preferences | None = None


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)

    @field_validator("new_password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _check_password(value)


class RoleUpdateRequest(BaseModel):
    role: UserRole


class AccountDeleteRequest(BaseModel):
    """Password confirmation for deleting one's own account."""

    password: str = Field(..., min_length=1)


class UserStatsResponse(BaseModel):
    """Profile plus the caller's latest reports and voted-on reports."""

    user: UserResponse
    recent_reports: list[ReportResponse]
    recent_votes: list[ReportResponse]
