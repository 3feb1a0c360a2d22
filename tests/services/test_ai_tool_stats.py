# mypy: ignore-errors
"""Tests for AI tool performance snapshots and stat counters."""

from datetime import timedelta

import pytest
from sqlalchemy import select

from mistake_tracker.core.errors import InvalidArgumentError, NotFoundError
from mistake_tracker.db.time import as_utc, utcnow
from mistake_tracker.models import AIToolPerformance
from mistake_tracker.schemas.ai_tool import PerformanceUpdate, StatsUpdate, ToolCreate, ToolUpdate
from mistake_tracker.services import ai_tools as tool_service


def _history(db_session, tool_id):
    return list(
        db_session.scalars(
            select(AIToolPerformance)
            .where(AIToolPerformance.tool_id == tool_id)
            .order_by(AIToolPerformance.recorded_at)
        )
    )


@pytest.mark.parametrize(
    ("mistakes", "queries", "expected"),
    [(0, 0, 0.0), (5, 0, 0.0), (5, 200, 2.5), (10, 10, 100.0), (30, 10, 100.0)],
)
def test_compute_mistake_rate(mistakes, queries, expected) -> None:
    assert tool_service.compute_mistake_rate(mistakes, queries) == expected


def test_record_query_and_mistake(db_session, test_tool) -> None:
    tool_service.record_query(db_session, test_tool.id, was_successful=True)
    tool_service.record_query(db_session, test_tool.id, was_successful=False)
    tool_service.record_query(db_session, test_tool.id, was_successful=True)
    tool_service.record_query(db_session, test_tool.id, was_successful=True)
    tool = tool_service.record_mistake(db_session, test_tool.id)

    assert tool.total_queries == 4
    assert tool.successful_queries == 3
    assert tool.failed_queries == 1
    assert tool.total_mistakes == 1
    assert tool.mistake_rate == 25.0


def test_mistake_without_queries_keeps_rate_zero(db_session, test_tool) -> None:
    tool = tool_service.record_mistake(db_session, test_tool.id)

    assert tool.total_mistakes == 1
    assert tool.mistake_rate == 0.0


def test_update_stats_clamps_rate(db_session, test_tool) -> None:
    tool = tool_service.update_stats(
        db_session, test_tool.id, StatsUpdate(total_queries=10, total_mistakes=25)
    )
    assert tool.mistake_rate == 100.0

    tool = tool_service.update_stats(db_session, test_tool.id, StatsUpdate(total_queries=0))
    assert tool.mistake_rate == 0.0
    assert tool.total_mistakes == 25


def test_snapshot_merges_supplied_fields(db_session, make_tool) -> None:
    tool = make_tool("Merge Tool", accuracy=80.0, response_time=1.5, reliability=95.0)

    tool = tool_service.record_performance_snapshot(
        db_session, tool.id, PerformanceUpdate(accuracy=0.0, user_satisfaction=4.2, cost=0.03)
    )

    assert tool.accuracy == 0.0
    assert tool.response_time == 1.5
    assert tool.reliability == 95.0
    assert tool.user_satisfaction == 4.2

    [snapshot] = _history(db_session, tool.id)
    assert snapshot.accuracy == 0.0
    assert snapshot.response_time == 1.5
    assert snapshot.cost == 0.03
    assert snapshot.total_queries == 0


def test_snapshot_prunes_history_older_than_window(db_session, test_tool) -> None:
    now = utcnow()
    for days in (45, 31, 30, 10):
        db_session.add(
            AIToolPerformance(
                tool_id=test_tool.id,
                recorded_at=now - timedelta(days=days),
                accuracy=50.0,
                response_time=1.0,
                reliability=90.0,
                user_satisfaction=3.0,
            )
        )
    db_session.commit()

    tool_service.record_performance_snapshot(
        db_session, test_tool.id, PerformanceUpdate(accuracy=91.0), now=now
    )

    history = _history(db_session, test_tool.id)
    cutoff = now - timedelta(days=30)
    assert len(history) == 2
    assert all(as_utc(row.recorded_at) > cutoff for row in history)
    assert history[-1].accuracy == 91.0


def test_snapshot_for_missing_tool(db_session) -> None:
    with pytest.raises(NotFoundError):
        tool_service.record_performance_snapshot(db_session, 123, PerformanceUpdate(accuracy=1))


def test_create_tool_derives_slug(db_session) -> None:
    tool = tool_service.create_tool(
        db_session,
        ToolCreate(
            name="GPT-4 Turbo!!",
            description="Faster GPT-4 variant.",
            provider="OpenAI",
            website="https://openai.com",
        ),
    )

    assert tool.slug == "gpt-4-turbo"
    assert tool.website.startswith("https://openai.com")
    assert tool_service.get_tool_by_slug(db_session, "gpt-4-turbo").id == tool.id


def test_create_duplicate_name_rejected(db_session, test_tool) -> None:
    with pytest.raises(InvalidArgumentError):
        tool_service.create_tool(
            db_session,
            ToolCreate(name="GPT-4", description="Another GPT-4 entry.", provider="OpenAI"),
        )


def test_rename_updates_slug_and_checks_clash(db_session, make_tool) -> None:
    tool = make_tool("Alpha Model")
    make_tool("Beta Model")

    renamed = tool_service.update_tool(db_session, tool.id, ToolUpdate(name="Alpha Model 2"))
    assert renamed.slug == "alpha-model-2"

    with pytest.raises(InvalidArgumentError):
        tool_service.update_tool(db_session, tool.id, ToolUpdate(name="beta model"))


def test_rankings(db_session, make_tool) -> None:
    accurate = make_tool("Accurate", accuracy=95.0, mistake_rate=5.0, active_users=10)
    tied = make_tool("Tied", accuracy=95.0, mistake_rate=2.0, active_users=500)
    popular = make_tool("Popular", accuracy=70.0, active_users=900, user_satisfaction=4.0)
    make_tool("Hidden", accuracy=99.0, active_users=5000, is_public=False)
    make_tool("Retired", accuracy=99.0, status="deprecated")

    top = [tool.id for tool in tool_service.top_performers(db_session, limit=10)]
    trending = [tool.id for tool in tool_service.trending_tools(db_session, limit=10)]

    assert top == [tied.id, accurate.id, popular.id]
    assert trending == [popular.id, tied.id, accurate.id]


def test_delete_tool_removes_history(db_session, test_tool) -> None:
    tool_service.record_performance_snapshot(db_session, test_tool.id, PerformanceUpdate(accuracy=1))
    tool_id = test_tool.id

    tool_service.delete_tool(db_session, tool_id)

    with pytest.raises(NotFoundError):
        tool_service.get_tool(db_session, tool_id)
    assert _history(db_session, tool_id) == []
