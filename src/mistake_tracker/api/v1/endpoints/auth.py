# src/mistake_tracker/api/v1/endpoints/auth.py
"""Authentication endpoints for the Mistake Tracker API."""

from fastapi import APIRouter, HTTPException, status

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.core.security import create_access_token
from mistake_tracker.models import User
from mistake_tracker.schemas.user import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from mistake_tracker.services import users as user_service

from ..dependencies import CurrentUserDep, SessionDep, to_http_error

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_for(user: User) -> TokenResponse:
    token = create_access_token(user.id, {"role": user.role})
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep) -> TokenResponse:
    """Create an account and return an access token for it."""
    try:
        user = user_service.register_user(db, payload)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return _token_for(user)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Authenticate with email and password."""
    user = user_service.authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return _token_for(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: CurrentUserDep) -> User:
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update the caller's name and preferences."""
    return user_service.update_profile(db, current_user, payload)


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    payload: PasswordChangeRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> None:
    try:
        user_service.change_password(db, current_user, payload)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
