from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import REVIEWER_ROLES, Role
from .exceptions import AuthorizationError, NotFoundError, ValidationError


@dataclass(frozen=True)
class Actor:
    """Pre-authenticated caller identity handed in by the auth layer."""

    user_id: int
    role: Role
    employee_id: Optional[int] = None

    @property
    def is_reviewer(self) -> bool:
        return self.role in REVIEWER_ROLES


def require_reviewer(actor: Actor) -> None:
    if not actor.is_reviewer:
        raise AuthorizationError("Only HR or admin users can perform this action")


def require_employee(actor: Actor) -> int:
    if actor.employee_id is None:
        raise NotFoundError("Employee profile not found")
    return int(actor.employee_id)


def scoped_employee_id(actor: Actor, requested=None) -> Optional[int]:
    """Reviewers may look at any employee (or all); others only at themselves."""
    if not actor.is_reviewer:
        return require_employee(actor)
    if requested in (None, ""):
        return None
    try:
        return int(requested)
    except (TypeError, ValueError):
        raise ValidationError("Employee id must be a number")


def require_owner_or_reviewer(actor: Actor, employee_id: int) -> None:
    if actor.is_reviewer:
        return
    if actor.employee_id is None or int(actor.employee_id) != int(employee_id):
        raise AuthorizationError("You can only view your own records")
