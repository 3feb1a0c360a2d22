"""Data access helpers for working with AI tools."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from sqlalchemy import select
from sqlalchemy.orm import Session

from mistake_tracker.models.ai_tool import AITool
from mistake_tracker.models.enums import ToolStatus

__all__ = ["ToolRepository", "ToolSort"]

ToolSort = Literal["name", "accuracy", "mistake-rate", "popularity"]

_SORTS = {
    "name": (AITool.name.asc(),),
    "accuracy": (AITool.accuracy.desc(), AITool.id.asc()),
    "mistake-rate": (AITool.mistake_rate.asc(), AITool.id.asc()),
    "popularity": (AITool.active_users.desc(), AITool.id.asc()),
}


class ToolRepository:
    """Thin wrapper around database access for AI tool entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, tool_id: int) -> AITool | None:
        return self.session.get(AITool, tool_id)

    def get_by_slug(self, slug: str) -> AITool | None:
        return self.session.scalars(select(AITool).where(AITool.slug == slug)).first()

    def find_clash(self, name: str, slug: str, exclude_id: int | None = None) -> AITool | None:
        """Return another tool already using ``name`` or ``slug``."""
        stmt = select(AITool).where((AITool.name == name) | (AITool.slug == slug))
        if exclude_id is not None:
            stmt = stmt.where(AITool.id != exclude_id)
        return self.session.scalars(stmt).first()

    def add(self, tool: AITool) -> AITool:
        self.session.add(tool)
        self.session.flush()
        return tool

    def delete(self, tool: AITool) -> None:
        self.session.delete(tool)
        self.session.flush()

    def search(
        self,
        *,
        category: str | None = None,
        status: str | None = None,
        sort: ToolSort = "accuracy",
    ) -> list[AITool]:
        stmt = select(AITool)
        if category:
            stmt = stmt.where(AITool.category == category)
        if status:
            stmt = stmt.where(AITool.status == status)
        return list(self.session.scalars(stmt.order_by(*_SORTS[sort])))

    def _listed(self):
        return select(AITool).where(
            AITool.status == ToolStatus.active.value,
            AITool.is_public.is_(True),
        )

    def top_performers(self, limit: int = 10) -> list[AITool]:
        """Highest accuracy first; lower mistake rate breaks ties."""
        stmt = self._listed().order_by(
            AITool.accuracy.desc(), AITool.mistake_rate.asc(), AITool.id.asc()
        )
        return list(self.session.scalars(stmt.limit(limit)))

    def trending(self, limit: int = 10) -> list[AITool]:
        """Most active users first; user satisfaction breaks ties."""
        stmt = self._listed().order_by(
            AITool.active_users.desc(), AITool.user_satisfaction.desc(), AITool.id.asc()
        )
        return list(self.session.scalars(stmt.limit(limit)))

    def by_category(self, category: str) -> list[AITool]:
        stmt = self._listed().where(AITool.category == category)
        return list(self.session.scalars(stmt.order_by(AITool.accuracy.desc(), AITool.id.asc())))

    def recently_updated(self, since: datetime, limit: int = 10) -> list[AITool]:
        """Tools whose performance changed at or after ``since``, latest first."""
        stmt = (
            select(AITool)
            .where(AITool.performance_last_updated >= since)
            .order_by(AITool.performance_last_updated.desc(), AITool.id.desc())
        )
        return list(self.session.scalars(stmt.limit(limit)))
