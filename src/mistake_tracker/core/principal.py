"""Authenticated identity passed explicitly into service calls."""

from __future__ import annotations

from dataclasses import dataclass

from mistake_tracker.models.enums import UserRole


@dataclass(frozen=True)
class Principal:
    """Caller identity asserted by the authorization layer.

    Services trust this value verbatim; role checks happen before a service
    is invoked.
    """

    user_id: int
    role: str = UserRole.user.value

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin.value
