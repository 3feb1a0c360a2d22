"""Shared API dependencies for authentication and common functionality."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import (
    ConflictError,
    InvalidArgumentError,
    MistakeTrackerError,
    NotFoundError,
    UnauthorizedError,
)
from mistake_tracker.core.principal import Principal
from mistake_tracker.core.security import decode_access_token
from mistake_tracker.db.session import get_db
from mistake_tracker.models import User

# HTTP Bearer scheme for JWT authentication; missing headers are handled below
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]

_ERROR_STATUS: tuple[tuple[type[MistakeTrackerError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def to_http_error(err: MistakeTrackerError) -> HTTPException:
    """Map a domain error onto the matching HTTP status."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(err, error_type):
            return HTTPException(status_code=status_code, detail=str(err))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(err))


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str, db: Session) -> User:
    try:
        payload = decode_access_token(token)
    except JWTError as err:
        raise _credentials_error() from err

    subject = payload.get("sub")
    if subject is None:
        raise _credentials_error()
    try:
        user_id = int(subject)
    except ValueError as err:
        raise _credentials_error() from err

    user = db.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials
        db: Database session

    Returns:
        User object for the authenticated user

    Raises:
        HTTPException: 401 if the token is missing or invalid, or the user is gone
    """
    if credentials is None:
        raise _credentials_error("Not authenticated")
    return _user_from_token(credentials.credentials, db)


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Like ``get_current_user`` but returns None for anonymous callers.

    A token that is present but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, db)


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def principal_for(user: User) -> Principal:
    return Principal(user_id=user.id, role=user.role)


def get_principal(user: CurrentUserDep) -> Principal:
    """Identity handed to state-changing service calls."""
    return principal_for(user)


PrincipalDep = Annotated[Principal, Depends(get_principal)]


def require_roles(*roles: str) -> Callable[[User], Principal]:
    """Build a dependency that admits only users holding one of ``roles``."""

    def _checker(user: CurrentUserDep) -> Principal:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return principal_for(user)

    return _checker


ModeratorDep = Annotated[Principal, Depends(require_roles("moderator", "admin"))]
AdminDep = Annotated[Principal, Depends(require_roles("admin"))]
