"""Account helpers: registration, login, profile, and admin management."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from mistake_tracker.core import security
from mistake_tracker.core.errors import InvalidArgumentError, NotFoundError, UnauthorizedError
from mistake_tracker.core.principal import Principal
from mistake_tracker.db.concurrency import run_with_retry
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.enums import UserRole
from mistake_tracker.models.report import MistakeReport
from mistake_tracker.models.user import User
from mistake_tracker.repositories.report_repo import ReportRepository
from mistake_tracker.schemas.user import (
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from mistake_tracker.services.votes import recompute_tallies

logger = logging.getLogger(__name__)

__all__ = [
    "authenticate",
    "change_password",
    "delete_own_account",
    "delete_user",
    "get_user",
    "get_users",
    "register_user",
    "set_role",
    "update_profile",
    "user_stats",
]

_DEFAULT_PREFERENCES = {"theme": "light", "preferred_ai": None}


def get_user(db: Session, user_id: int) -> User:
    """Return a single user by primary key."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def get_users(db: Session, skip: int = 0, limit: int = 100) -> Sequence[User]:
    """Return users with simple offset-based pagination."""
    return db.scalars(select(User).order_by(User.id).offset(skip).limit(limit)).all()


def register_user(db: Session, data: RegisterRequest) -> User:
    """Create a verified account.

    Raises:
        InvalidArgumentError: If the email is already registered.
    """
    if db.scalars(select(User).where(User.email == data.email)).first() is not None:
        raise InvalidArgumentError("User with this email already exists")
    user = User(
        name=data.name,
        email=data.email,
        password_hash=security.hash_password(data.password),
        is_verified=True,
        preferences=dict(_DEFAULT_PREFERENCES),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    """Return the user for valid credentials and stamp ``last_login_at``."""
    user = db.scalars(select(User).where(User.email == email.lower())).first()
    if user is None or not security.verify_password(password, user.password_hash):
        return None
    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def update_profile(db: Session, user: User, data: ProfileUpdateRequest) -> User:
    """Apply partial updates to name and preferences."""
    if data.name is not None:
        user.name = data.name.strip()
    if data.preferences is not None:
        user.preferences = data.preferences.model_dump(mode="json")
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, data: PasswordChangeRequest) -> None:
    if not security.verify_password(data.current_password, user.password_hash):
        raise InvalidArgumentError("Current password is incorrect")
    user.password_hash = security.hash_password(data.new_password)
    db.commit()


def set_role(db: Session, principal: Principal, user_id: int, role: UserRole) -> User:
    if not principal.is_admin:
        raise UnauthorizedError("Only admins can change roles")
    user = get_user(db, user_id)
    user.role = role.value
    db.commit()
    db.refresh(user)
    logger.info("User %s set role of user %s to %s", principal.user_id, user_id, role.value)
    return user


def delete_user(db: Session, principal: Principal, user_id: int) -> None:
    """Remove an account, anonymizing its reports and withdrawing its votes.

    The whole deletion is one transaction: withdrawn votes recompute the
    affected reports' tallies, and nothing is written if any step fails.
    """
    if not principal.is_admin and principal.user_id != user_id:
        raise UnauthorizedError("Not allowed to delete this user")
    repo = ReportRepository(db)

    def _apply() -> int:
        user = get_user(db, user_id)
        votes = repo.votes_by_user(user.id)
        report_ids = sorted({vote.report_id for vote in votes})
        for vote in votes:
            db.delete(vote)
        db.flush()
        for report_id in report_ids:
            report = repo.get_by_id(report_id)
            if report is not None:
                recompute_tallies(db, report)
        db.flush()

        anonymized = repo.anonymize_reporter(user.id)
        repo.clear_verifier(user.id)
        db.delete(user)
        db.flush()
        return anonymized

    anonymized = run_with_retry(db, _apply, label=f"user {user_id} deletion")
    logger.info("Deleted user %s; anonymized %s reports", user_id, anonymized)


def delete_own_account(db: Session, user: User, password: str) -> None:
    """Self-service deletion, confirmed with the account password.

    Raises:
        InvalidArgumentError: If the password does not match.
    """
    if not security.verify_password(password, user.password_hash):
        raise InvalidArgumentError("Password is incorrect")
    delete_user(db, Principal(user_id=user.id, role=user.role), user.id)


def user_stats(
    db: Session, user: User, limit: int = 10
) -> tuple[list[MistakeReport], list[MistakeReport]]:
    """Return the user's latest reports and the latest reports they voted on."""
    repo = ReportRepository(db)
    reports, _ = repo.by_reporter(user.id, limit=limit)
    return reports, repo.voted_by(user.id, limit=limit)
