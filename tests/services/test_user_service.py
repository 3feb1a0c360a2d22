# mypy: ignore-errors
"""Tests for account helpers."""

import pytest
from sqlalchemy import select

from mistake_tracker.core.errors import InvalidArgumentError, NotFoundError, UnauthorizedError
from mistake_tracker.models import MistakeReport, ReportVote, User
from mistake_tracker.models.enums import UserRole
from mistake_tracker.repositories.report_repo import ReportRepository
from mistake_tracker.schemas.user import PasswordChangeRequest, RegisterRequest
from mistake_tracker.services import users as user_service
from mistake_tracker.services.moderation import ModerationService
from mistake_tracker.services import votes as vote_service
from tests.conftest import TEST_PASSWORD, principal


def test_register_hashes_password(db_session) -> None:
    user = user_service.register_user(
        db_session,
        RegisterRequest(name="Ada", email="Ada@Example.com", password="Secret123"),
    )

    assert user.email == "ada@example.com"
    assert user.password_hash != "Secret123"
    assert user.is_verified is True
    assert user.role == "user"


def test_register_duplicate_email(db_session, test_user) -> None:
    with pytest.raises(InvalidArgumentError):
        user_service.register_user(
            db_session,
            RegisterRequest(name="Copy", email=test_user.email, password="Secret123"),
        )


def test_authenticate_sets_last_login(db_session, test_user) -> None:
    assert user_service.authenticate(db_session, test_user.email, "wrong-Pass1") is None

    user = user_service.authenticate(db_session, test_user.email.upper(), TEST_PASSWORD)

    assert user is not None
    assert user.id == test_user.id
    assert user.last_login_at is not None


def test_change_password_requires_current(db_session, test_user) -> None:
    with pytest.raises(InvalidArgumentError):
        user_service.change_password(
            db_session,
            test_user,
            PasswordChangeRequest(current_password="nope", new_password="NewSecret1"),
        )

    user_service.change_password(
        db_session,
        test_user,
        PasswordChangeRequest(current_password=TEST_PASSWORD, new_password="NewSecret1"),
    )
    assert user_service.authenticate(db_session, test_user.email, "NewSecret1") is not None


def test_set_role_requires_admin(db_session, test_user, other_user, admin) -> None:
    with pytest.raises(UnauthorizedError):
        user_service.set_role(db_session, principal(test_user), other_user.id, UserRole.admin)

    user = user_service.set_role(db_session, principal(admin), other_user.id, UserRole.moderator)
    assert user.role == "moderator"


def test_delete_user_anonymizes_reports_and_withdraws_votes(
    db_session, make_report, test_user, other_user, admin
) -> None:
    own = make_report(reporter=test_user, status="verified")
    target = make_report(reporter=other_user, status="verified")
    vote_service.add_vote(db_session, target.id, principal(test_user), "upvote")
    vote_service.add_vote(db_session, target.id, principal(other_user), "upvote")
    user_id = test_user.id

    user_service.delete_user(db_session, principal(admin), user_id)

    assert db_session.get(User, user_id) is None
    own = db_session.get(MistakeReport, own.id)
    assert own is not None
    assert own.reporter_id is None
    assert own.is_anonymous is True
    target = db_session.get(MistakeReport, target.id)
    assert target.vote_score == 1
    assert target.total_votes == 1
    remaining = db_session.scalars(select(ReportVote.user_id)).all()
    assert remaining == [other_user.id]


def test_delete_missing_user(db_session, admin) -> None:
    with pytest.raises(NotFoundError):
        user_service.delete_user(db_session, principal(admin), 999)


def test_delete_user_writes_nothing_when_a_step_fails(
    db_session, monkeypatch, make_report, test_user, other_user, admin
) -> None:
    report = make_report(reporter=other_user, status="verified")
    vote_service.add_vote(db_session, report.id, principal(other_user), "upvote")
    report_id, user_id = report.id, other_user.id

    def _fail(self, reporter_id):
        raise RuntimeError("database went away")

    monkeypatch.setattr(ReportRepository, "anonymize_reporter", _fail)

    with pytest.raises(RuntimeError):
        user_service.delete_user(db_session, principal(admin), user_id)

    assert db_session.get(User, user_id) is not None
    assert db_session.scalars(select(ReportVote.user_id)).all() == [user_id]
    report = db_session.get(MistakeReport, report_id)
    assert report.vote_score == 1
    assert report.reporter_id == user_id


def test_delete_moderator_clears_verifier(
    db_session, make_report, test_user, moderator, admin
) -> None:
    report = make_report(reporter=test_user)
    ModerationService.verify(db_session, report.id, principal(moderator))
    report_id = report.id

    user_service.delete_user(db_session, principal(admin), moderator.id)

    report = db_session.get(MistakeReport, report_id)
    assert report.status == "verified"
    assert report.verified_by_id is None
    assert report.verified_at is not None


def test_delete_own_account_checks_password(db_session, make_report, test_user) -> None:
    report = make_report(reporter=test_user)
    user_id = test_user.id

    with pytest.raises(InvalidArgumentError):
        user_service.delete_own_account(db_session, test_user, "Wrong1234")
    assert db_session.get(User, user_id) is not None

    user_service.delete_own_account(db_session, test_user, TEST_PASSWORD)

    assert db_session.get(User, user_id) is None
    assert db_session.get(MistakeReport, report.id).is_anonymous is True


def test_user_stats(db_session, make_report, test_user, other_user) -> None:
    mine = make_report(reporter=test_user)
    theirs = make_report(reporter=other_user, status="verified")
    vote_service.add_vote(db_session, theirs.id, principal(test_user), "downvote")

    reports, voted = user_service.user_stats(db_session, test_user)

    assert [r.id for r in reports] == [mine.id]
    assert [r.id for r in voted] == [theirs.id]
