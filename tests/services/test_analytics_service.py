# mypy: ignore-errors
"""Tests for dashboard, comparison, and per-user aggregates."""

from datetime import timedelta

import pytest

from mistake_tracker.core.errors import InvalidArgumentError
from mistake_tracker.db.time import utcnow
from mistake_tracker.services import analytics
from mistake_tracker.services import votes as vote_service
from tests.conftest import principal


def test_period_start() -> None:
    now = utcnow()

    assert analytics.period_start("7d", now) == now - timedelta(days=7)
    assert analytics.period_start("1y", now) == now - timedelta(days=365)
    assert analytics.period_start("all", now) is None
    with pytest.raises(InvalidArgumentError):
        analytics.period_start("2w", now)


def test_dashboard_counts_verified_reports(db_session, make_report, test_tool, test_user) -> None:
    make_report(status="verified", vote_score=4, category="factual", severity="high")
    make_report(status="verified", vote_score=2, category="factual", ai_tool="Claude-3")
    make_report(status="verified", category="bias", age_days=60)
    make_report(status="pending", category="logical")

    data = analytics.dashboard(db_session, "30d")

    assert data["overview"]["total_reports"] == 3
    assert data["overview"]["verified_reports"] == 2
    assert data["overview"]["total_users"] == 1
    assert data["overview"]["active_tools"] == 1
    assert data["reports_by_category"] == [{"category": "factual", "count": 2}]
    by_tool = {row["ai_tool"]: row for row in data["reports_by_tool"]}
    assert by_tool["GPT-4"]["avg_vote_score"] == 4.0
    assert by_tool["Claude-3"]["count"] == 1
    assert [report.vote_score for report in data["trending_reports"]] == [4, 2]
    assert [tool.id for tool in data["top_tools"]] == [test_tool.id]


def test_dashboard_all_time_includes_old_reports(db_session, make_report) -> None:
    make_report(status="verified", age_days=400)

    assert analytics.dashboard(db_session, "all")["overview"]["verified_reports"] == 1
    assert analytics.dashboard(db_session, "1y")["overview"]["verified_reports"] == 0


def test_user_analytics(db_session, make_report, test_user, other_user) -> None:
    make_report(reporter=test_user, status="verified")
    make_report(reporter=test_user, status="rejected")
    make_report(reporter=test_user, status="pending")
    target = make_report(reporter=other_user, status="verified")
    vote_service.add_vote(db_session, target.id, principal(test_user), "upvote")

    data = analytics.user_analytics(db_session, test_user.id)

    assert data["total_reports"] == 3
    assert data["upvotes_cast"] == 1
    assert data["downvotes_cast"] == 0
    assert data["total_votes"] == 1
    assert data["verification_rate"] == pytest.approx(33.33)


def test_user_analytics_without_reports(db_session, test_user) -> None:
    data = analytics.user_analytics(db_session, test_user.id)

    assert data["total_reports"] == 0
    assert data["verification_rate"] == 0.0


def test_compare_tools(db_session, make_report) -> None:
    make_report(status="verified", ai_tool="GPT-4", category="factual", vote_score=3)
    make_report(status="verified", ai_tool="GPT-4", category="bias", vote_score=1)
    make_report(status="verified", ai_tool="Claude-3", severity="high")

    data = analytics.compare(db_session, ["GPT-4", "Claude-3", "Llama-2"], "30d")

    rows = {row["ai_tool"]: row for row in data["tools"]}
    assert rows["GPT-4"]["total_reports"] == 2
    assert rows["GPT-4"]["avg_vote_score"] == 2.0
    assert rows["GPT-4"]["by_category"] == {"factual": 1, "bias": 1}
    assert rows["Claude-3"]["by_severity"] == {"high": 1}
    assert rows["Llama-2"]["total_reports"] == 0


def test_compare_requires_tools(db_session) -> None:
    with pytest.raises(InvalidArgumentError):
        analytics.compare(db_session, [])


def test_realtime_counts_last_day(db_session, make_report, make_tool, test_user, other_user) -> None:
    fresh = make_report(reporter=test_user)
    make_report(age_days=2)
    vote_service.add_vote(db_session, fresh.id, principal(other_user), "upvote")
    current = make_tool("Fresh Tool")
    make_tool("Stale Tool", performance_last_updated=utcnow() - timedelta(days=3))

    data = analytics.realtime(db_session)

    assert data["last_24_hours"] == {"reports": 1, "votes": 1, "new_users": 2}
    assert [report.id for report in data["recent_reports"]] == [fresh.id]
    assert [tool.id for tool in data["recent_tool_updates"]] == [current.id]
