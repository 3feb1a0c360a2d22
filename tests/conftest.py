# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-mistake-tracker")
os.environ["AUTO_CREATE_TABLES"] = "false"

from mistake_tracker.core.principal import Principal
from mistake_tracker.core.security import create_access_token, hash_password
from mistake_tracker.db.session import Base
from mistake_tracker.db.session import get_db as app_get_session
from mistake_tracker.db.time import utcnow
from mistake_tracker.main import app as fastapi_app
from mistake_tracker.models import AITool, MistakeReport, User
from mistake_tracker.services.events import EventBroadcaster, get_broadcaster

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "Password123"

_EMAIL_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session bound to a fresh in-memory database; services commit through it."""
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def broadcaster() -> EventBroadcaster:
    return EventBroadcaster(queue_size=10)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    broadcaster: EventBroadcaster,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_broadcaster, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory that persists a user with ``TEST_PASSWORD``."""

    def _make(name: str = "Test User", role: str = "user", email: str | None = None) -> User:
        user = User(
            name=name,
            email=email or f"user{next(_EMAIL_COUNTER)}@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            role=role,
            is_verified=True,
            preferences={"theme": "light", "preferred_ai": None},
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return a persisted regular user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    return make_user("Other User")


@pytest.fixture()
def moderator(make_user: Callable[..., User]) -> User:
    return make_user("Mod User", role="moderator")


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("Admin User", role="admin")


def bearer(user: User) -> dict[str, str]:
    token = create_access_token(user.id, {"role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    return bearer(other_user)


@pytest.fixture()
def moderator_token(moderator: User) -> dict[str, str]:
    return bearer(moderator)


@pytest.fixture()
def admin_token(admin: User) -> dict[str, str]:
    return bearer(admin)


def principal(user: User) -> Principal:
    return Principal(user_id=user.id, role=user.role)


def report_payload(**overrides: Any) -> dict[str, Any]:
    """Valid submission body; keyword arguments replace individual fields."""
    payload: dict[str, Any] = {
        "ai_tool": "GPT-4",
        "category": "factual",
        "severity": "medium",
        "user_query": "What is the capital of Australia?",
        "ai_response": "The capital of Australia is Sydney.",
        "corrected_answer": "The capital of Australia is Canberra.",
        "description": "The model confused the largest city with the capital city.",
        "tags": ["geography"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def make_report(db_session: Session) -> Callable[..., MistakeReport]:
    """Factory that persists a report directly, bypassing the services."""

    def _make(
        *,
        reporter: User | None = None,
        status: str = "pending",
        vote_score: int = 0,
        age_days: float = 0,
        **fields: Any,
    ) -> MistakeReport:
        values = report_payload()
        values.update(fields)
        created = utcnow() - timedelta(days=age_days)
        report = MistakeReport(
            reporter_id=reporter.id if reporter else None,
            is_anonymous=reporter is None,
            status=status,
            vote_score=vote_score,
            created_at=created,
            updated_at=created,
            **values,
        )
        db_session.add(report)
        db_session.commit()
        db_session.refresh(report)
        return report

    return _make


@pytest.fixture()
def test_report(make_report: Callable[..., MistakeReport], test_user: User) -> MistakeReport:
    """A pending report filed by ``test_user``."""
    return make_report(reporter=test_user)


@pytest.fixture()
def make_tool(db_session: Session) -> Callable[..., AITool]:
    def _make(name: str = "Test Tool", **fields: Any) -> AITool:
        values: dict[str, Any] = {
            "description": "A tool used in tests.",
            "provider": "Test Provider",
        }
        values.update(fields)
        tool = AITool(name=name, **values)
        db_session.add(tool)
        db_session.commit()
        db_session.refresh(tool)
        return tool

    return _make


@pytest.fixture()
def test_tool(make_tool: Callable[..., AITool]) -> AITool:
    return make_tool("GPT-4", accuracy=90.0, active_users=100)
