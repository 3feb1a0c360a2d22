"""Typed failures raised by the service layer.

Endpoints translate these into HTTP responses; services never build
``HTTPException`` themselves.
"""

from __future__ import annotations


class MistakeTrackerError(Exception):
    """Base class for all domain errors."""


class NotFoundError(MistakeTrackerError):
    """A report, tool, or user id did not resolve."""


class InvalidArgumentError(MistakeTrackerError):
    """Malformed enum value, out-of-range field, or duplicate unique key."""


class InvalidTransitionError(InvalidArgumentError):
    """A moderation transition is not allowed from the report's current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move report from '{current}' to '{target}'")
        self.current = current
        self.target = target


class UnauthorizedError(MistakeTrackerError):
    """The caller lacks the role required for the action."""


class ConflictError(MistakeTrackerError):
    """A concurrent write won the race; the caller should retry."""
