# mypy: ignore-errors
"""Tests for user endpoints."""

from fastapi import status

from mistake_tracker.services import votes as vote_service
from tests.conftest import TEST_PASSWORD, principal

USERS = "/api/v1/users"


def test_my_reports_lists_all_statuses(client, auth_token, test_user, make_report) -> None:
    make_report(reporter=test_user, status="pending")
    make_report(reporter=test_user, status="rejected")
    make_report(status="verified")

    body = client.get(f"{USERS}/me/reports", headers=auth_token).json()

    assert body["pagination"]["total"] == 2
    assert {item["status"] for item in body["data"]} == {"pending", "rejected"}


def test_my_reports_status_filter(client, auth_token, test_user, make_report) -> None:
    make_report(reporter=test_user, status="pending")
    rejected = make_report(reporter=test_user, status="rejected")

    body = client.get(
        f"{USERS}/me/reports", params={"status": "rejected"}, headers=auth_token
    ).json()

    assert [item["id"] for item in body["data"]] == [rejected.id]


def test_my_votes(client, db_session, auth_token, test_user, make_report) -> None:
    voted = make_report(status="verified")
    make_report(status="verified")
    vote_service.add_vote(db_session, voted.id, principal(test_user), "upvote")

    data = client.get(f"{USERS}/me/votes", headers=auth_token).json()

    assert [(item["id"], item["user_vote"]) for item in data] == [(voted.id, "upvote")]


def test_list_users_admin_only(client, auth_token, admin_token) -> None:
    assert client.get(USERS, headers=auth_token).status_code == status.HTTP_403_FORBIDDEN

    response = client.get(USERS, headers=admin_token)
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 2


def test_promote_to_moderator(client, admin_token, test_user) -> None:
    response = client.put(
        f"{USERS}/{test_user.id}/role", json={"role": "moderator"}, headers=admin_token
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["role"] == "moderator"


def test_delete_user_keeps_reports(client, admin_token, test_user, make_report) -> None:
    report = make_report(reporter=test_user, status="verified")
    user_id = test_user.id

    response = client.delete(f"{USERS}/{user_id}", headers=admin_token)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    kept = client.get(f"/api/v1/reports/{report.id}").json()
    assert kept["reporter_id"] is None
    assert kept["is_anonymous"] is True


def test_delete_unknown_user(client, admin_token) -> None:
    response = client.delete(f"{USERS}/424242", headers=admin_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_own_account(client, auth_token, test_user, make_report) -> None:
    report = make_report(reporter=test_user, status="verified")

    response = client.request(
        "DELETE", f"{USERS}/me", json={"password": TEST_PASSWORD}, headers=auth_token
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get("/api/v1/auth/me", headers=auth_token).status_code == (
        status.HTTP_401_UNAUTHORIZED
    )
    assert client.get(f"/api/v1/reports/{report.id}").json()["is_anonymous"] is True


def test_delete_own_account_wrong_password(client, auth_token) -> None:
    response = client.request(
        "DELETE", f"{USERS}/me", json={"password": "Wrong1234"}, headers=auth_token
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert client.get("/api/v1/auth/me", headers=auth_token).status_code == status.HTTP_200_OK


def test_delete_own_account_requires_auth(client) -> None:
    response = client.request("DELETE", f"{USERS}/me", json={"password": TEST_PASSWORD})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_user_stats(client, db_session, auth_token, test_user, other_user, make_report) -> None:
    mine = make_report(reporter=test_user)
    theirs = make_report(reporter=other_user, status="verified")
    vote_service.add_vote(db_session, theirs.id, principal(test_user), "upvote")

    response = client.get(f"{USERS}/stats", headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["user"]["id"] == test_user.id
    assert [item["id"] for item in data["recent_reports"]] == [mine.id]
    assert [(item["id"], item["user_vote"]) for item in data["recent_votes"]] == [
        (theirs.id, "upvote")
    ]
