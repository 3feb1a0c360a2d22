"""Optimistic retry helper for single-document read-modify-write operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from mistake_tracker.core.errors import ConflictError
from mistake_tracker.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_retry(
    db: Session,
    operation: Callable[[], T],
    *,
    label: str,
    max_attempts: int | None = None,
) -> T:
    """Run ``operation`` and commit, retrying when a concurrent writer wins.

    ``operation`` must re-read everything it touches, since the session is
    rolled back between attempts. Versioned rows raise ``StaleDataError`` when
    another transaction bumped them first; composite-key inserts raise
    ``IntegrityError`` on a concurrent duplicate.

    Raises:
        ConflictError: If every attempt lost the race.
    """
    attempts = max(1, max_attempts or settings.optimistic_max_retries)
    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except (StaleDataError, IntegrityError) as err:
            db.rollback()
            logger.warning(
                "Concurrent update on %s (attempt %d/%d): %s",
                label,
                attempt,
                attempts,
                err.__class__.__name__,
            )
        except Exception:
            db.rollback()
            raise
    raise ConflictError(f"Concurrent update on {label}; please retry")
