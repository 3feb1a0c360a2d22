# mypy: ignore-errors
"""Tests for moderation endpoints."""

from fastapi import status

MODERATION = "/api/v1/moderation"
REASON = {"reason": "The AI response was actually correct."}


def test_verify_report(client, moderator_token, moderator, test_report) -> None:
    response = client.put(f"{MODERATION}/{test_report.id}/verify", headers=moderator_token)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "verified"
    assert data["verified_by_id"] == moderator.id
    assert data["verified_at"] is not None


def test_admin_can_moderate(client, admin_token, test_report) -> None:
    response = client.put(f"{MODERATION}/{test_report.id}/investigate", headers=admin_token)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "investigating"


def test_regular_user_forbidden(client, auth_token, test_report) -> None:
    response = client.put(f"{MODERATION}/{test_report.id}/verify", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_anonymous_unauthorized(client, test_report) -> None:
    response = client.put(f"{MODERATION}/{test_report.id}/verify")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_reject_with_reason(client, moderator_token, test_report) -> None:
    response = client.put(
        f"{MODERATION}/{test_report.id}/reject", json=REASON, headers=moderator_token
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "rejected"
    assert response.json()["rejection_reason"] == REASON["reason"]


def test_reject_short_reason(client, moderator_token, test_report) -> None:
    response = client.put(
        f"{MODERATION}/{test_report.id}/reject",
        json={"reason": "nope"},
        headers=moderator_token,
    )
    assert response.status_code == 422


def test_reject_after_verify_is_bad_request(client, moderator_token, test_report) -> None:
    client.put(f"{MODERATION}/{test_report.id}/verify", headers=moderator_token)

    response = client.put(
        f"{MODERATION}/{test_report.id}/reject", json=REASON, headers=moderator_token
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "verified" in response.json()["detail"]
    report = client.get(f"/api/v1/reports/{test_report.id}").json()
    assert report["status"] == "verified"


def test_moderate_missing_report(client, moderator_token) -> None:
    response = client.put(f"{MODERATION}/9999/verify", headers=moderator_token)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_queue(client, moderator_token, make_report) -> None:
    pending = make_report(status="pending")
    make_report(status="verified")

    response = client.get(f"{MODERATION}/queue", headers=moderator_token)

    assert response.status_code == status.HTTP_200_OK
    assert [item["id"] for item in response.json()] == [pending.id]


def test_moderation_publishes_event(client, moderator_token, test_report, broadcaster) -> None:
    queue = broadcaster.subscribe()

    client.put(f"{MODERATION}/{test_report.id}/verify", headers=moderator_token)

    assert queue.get_nowait() == {
        "event": "report-moderated",
        "data": {"report_id": test_report.id, "status": "verified"},
    }
