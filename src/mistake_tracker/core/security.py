"""Password hashing and access-token helpers."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import jwt
from passlib.hash import pbkdf2_sha256 as hasher

from mistake_tracker.core.settings import settings


def hash_password(password: str) -> str:
    return hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches ``password_hash``; False otherwise."""
    try:
        return hasher.verify(password, password_hash)
    except ValueError:
        # Malformed stored hash.
        return False


def create_access_token(subject: int | str, extra_claims: dict[str, Any] | None = None) -> str:
    """Create JWT access token for user authentication."""
    to_encode: dict[str, object] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token. Raises ``jose.JWTError`` when invalid."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
