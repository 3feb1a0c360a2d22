# tests/test_health.py
from typing import Any

from fastapi import status


def test_health_reports_ok(client: Any) -> None:
    """Health endpoint answers without touching the database."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["status"] == "ok"


def test_root_describes_api(client: Any) -> None:
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["docs"] == "/docs"
    assert "Mistake Tracker" in body["name"]
