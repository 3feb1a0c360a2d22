# src/mistake_tracker/services/ai_tools.py
"""AI tool registry, performance snapshots, and stat counters."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from mistake_tracker.core.errors import InvalidArgumentError, NotFoundError
from mistake_tracker.core.settings import settings
from mistake_tracker.db.concurrency import run_with_retry
from mistake_tracker.db.time import utcnow
from mistake_tracker.models.ai_tool import AITool, AIToolPerformance
from mistake_tracker.repositories.tool_repo import ToolRepository, ToolSort
from mistake_tracker.schemas.ai_tool import PerformanceUpdate, StatsUpdate, ToolCreate, ToolUpdate
from mistake_tracker.utils.slug import slugify

logger = logging.getLogger(__name__)

__all__ = [
    "compute_mistake_rate",
    "create_tool",
    "delete_tool",
    "get_tool",
    "get_tool_by_slug",
    "list_tools",
    "record_mistake",
    "record_performance_snapshot",
    "record_query",
    "tools_by_category",
    "top_performers",
    "trending_tools",
    "update_stats",
    "update_tool",
]

_CURRENT_FIELDS = ("accuracy", "response_time", "reliability", "user_satisfaction")
_SNAPSHOT_COUNTERS = ("cost", "total_queries", "successful_queries", "failed_queries")


def compute_mistake_rate(total_mistakes: int, total_queries: int) -> float:
    """Mistakes per hundred queries, clamped to [0, 100]; 0 with no queries.

    >>> compute_mistake_rate(5, 200)
    2.5
    >>> compute_mistake_rate(3, 0)
    0.0
    """
    if total_queries <= 0:
        return 0.0
    rate = total_mistakes / total_queries * 100
    return min(100.0, max(0.0, rate))


def _refresh_mistake_rate(tool: AITool) -> None:
    tool.mistake_rate = compute_mistake_rate(tool.total_mistakes, tool.total_queries)


def _require(repo: ToolRepository, tool_id: int) -> AITool:
    tool = repo.get_by_id(tool_id)
    if tool is None:
        raise NotFoundError(f"AI tool {tool_id} not found")
    return tool


def _column_values(data: dict[str, object]) -> dict[str, object]:
    if data.get("website") is not None:
        data["website"] = str(data["website"])
    for key in ("category", "status"):
        if data.get(key) is not None:
            data[key] = getattr(data[key], "value", data[key])
    if data.get("capabilities") is not None:
        data["capabilities"] = [getattr(c, "value", c) for c in data["capabilities"]]  # type: ignore[attr-defined]
    return data


def get_tool(db: Session, tool_id: int) -> AITool:
    return _require(ToolRepository(db), tool_id)


def get_tool_by_slug(db: Session, slug: str) -> AITool:
    tool = ToolRepository(db).get_by_slug(slug)
    if tool is None:
        raise NotFoundError(f"AI tool '{slug}' not found")
    return tool


def list_tools(
    db: Session,
    *,
    category: str | None = None,
    status: str | None = None,
    sort: ToolSort = "accuracy",
) -> list[AITool]:
    return ToolRepository(db).search(category=category, status=status, sort=sort)


def top_performers(db: Session, limit: int = 10) -> list[AITool]:
    return ToolRepository(db).top_performers(limit)


def trending_tools(db: Session, limit: int = 10) -> list[AITool]:
    return ToolRepository(db).trending(limit)


def tools_by_category(db: Session, category: str) -> list[AITool]:
    return ToolRepository(db).by_category(category)


def create_tool(db: Session, data: ToolCreate) -> AITool:
    """Register a new tool.

    Raises:
        InvalidArgumentError: If the name or derived slug is already taken.
    """
    repo = ToolRepository(db)
    values = _column_values(data.model_dump())
    if values.get("website") is None:
        values["website"] = ""

    def _apply() -> AITool:
        name = str(values["name"])
        if repo.find_clash(name, slugify(name)) is not None:
            raise InvalidArgumentError(f"An AI tool named '{name}' already exists")
        return repo.add(AITool(**values))

    tool = run_with_retry(db, _apply, label="ai tool create")
    logger.info("Created AI tool %s (%s)", tool.id, tool.slug)
    return tool


def update_tool(db: Session, tool_id: int, data: ToolUpdate) -> AITool:
    """Apply a partial update; renaming re-derives the slug."""
    repo = ToolRepository(db)
    values = _column_values(data.model_dump(exclude_unset=True, exclude_none=True))

    def _apply() -> AITool:
        tool = _require(repo, tool_id)
        name = values.get("name")
        if name is not None:
            name = str(name).strip()
            if repo.find_clash(name, slugify(name), exclude_id=tool_id) is not None:
                raise InvalidArgumentError(f"An AI tool named '{name}' already exists")
        for key, value in values.items():
            setattr(tool, key, value)
        db.flush()
        return tool

    return run_with_retry(db, _apply, label=f"ai tool {tool_id} update")


def delete_tool(db: Session, tool_id: int) -> None:
    repo = ToolRepository(db)
    run_with_retry(db, lambda: repo.delete(_require(repo, tool_id)), label=f"ai tool {tool_id} delete")
    logger.info("Deleted AI tool %s", tool_id)


def record_performance_snapshot(
    db: Session,
    tool_id: int,
    metrics: PerformanceUpdate,
    *,
    now: datetime | None = None,
) -> AITool:
    """Merge ``metrics`` into the current performance and append a history row.

    Omitted metrics keep their previous value; an explicit zero is applied.
    History rows dated ``performance_history_days`` or more before ``now`` are
    deleted in the same transaction.
    """
    repo = ToolRepository(db)
    supplied = metrics.model_dump(exclude_none=True)
    moment = now or utcnow()
    cutoff = moment - timedelta(days=settings.performance_history_days)

    def _apply() -> AITool:
        tool = _require(repo, tool_id)
        for field in _CURRENT_FIELDS:
            if field in supplied:
                setattr(tool, field, supplied[field])
        tool.performance_last_updated = moment

        db.add(
            AIToolPerformance(
                tool_id=tool.id,
                recorded_at=moment,
                accuracy=tool.accuracy,
                response_time=tool.response_time,
                reliability=tool.reliability,
                user_satisfaction=tool.user_satisfaction,
                **{key: supplied.get(key, 0) for key in _SNAPSHOT_COUNTERS},
            )
        )
        db.flush()
        pruned = db.execute(
            delete(AIToolPerformance)
            .where(
                AIToolPerformance.tool_id == tool.id,
                AIToolPerformance.recorded_at <= cutoff,
            )
            .execution_options(synchronize_session=False)
        ).rowcount
        db.expire(tool, ["historical"])
        logger.debug("Pruned %s snapshots for AI tool %s", pruned, tool.id)
        return tool

    return run_with_retry(db, _apply, label=f"ai tool {tool_id} performance")


def record_query(db: Session, tool_id: int, was_successful: bool = True) -> AITool:
    """Count one query against the tool and refresh its mistake rate."""
    repo = ToolRepository(db)

    def _apply() -> AITool:
        tool = _require(repo, tool_id)
        tool.total_queries += 1
        if was_successful:
            tool.successful_queries += 1
        else:
            tool.failed_queries += 1
        _refresh_mistake_rate(tool)
        return tool

    return run_with_retry(db, _apply, label=f"ai tool {tool_id} query")


def record_mistake(db: Session, tool_id: int) -> AITool:
    repo = ToolRepository(db)

    def _apply() -> AITool:
        tool = _require(repo, tool_id)
        tool.total_mistakes += 1
        _refresh_mistake_rate(tool)
        return tool

    return run_with_retry(db, _apply, label=f"ai tool {tool_id} mistake")


def update_stats(db: Session, tool_id: int, stats: StatsUpdate) -> AITool:
    """Overwrite the supplied counters and recompute the mistake rate."""
    repo = ToolRepository(db)
    supplied = stats.model_dump(exclude_none=True)

    def _apply() -> AITool:
        tool = _require(repo, tool_id)
        for key, value in supplied.items():
            setattr(tool, key, value)
        _refresh_mistake_rate(tool)
        tool.updated_at = utcnow()
        return tool

    return run_with_retry(db, _apply, label=f"ai tool {tool_id} stats")
