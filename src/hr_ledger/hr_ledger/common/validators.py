from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_text(value, field_name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")


def require_non_empty(value: str, field_name: str) -> str:
    require_text(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str], field_name: str = "Value") -> Optional[str]:
    require_text(value, field_name)
    return (value or "").strip() or None


def require_enum(enum_cls: type[E], value, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def require_month(month) -> int:
    try:
        month = int(month)
    except (TypeError, ValueError):
        raise ValidationError("Month must be a number between 1 and 12")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be a number between 1 and 12")
    return month


def require_year(year) -> int:
    try:
        year = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Year is not valid")
    if not 1900 <= year <= 9999:
        raise ValidationError("Year is not valid")
    return year


def require_amount(value, field_name: str) -> Decimal:
    """Parse a non-negative monetary or hour amount."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field_name} must be a non-negative number")
    return amount


def page_limit(page, limit, *, default_limit: int = DEFAULT_PAGE_SIZE) -> tuple[int, int]:
    try:
        page = max(int(page or 1), 1)
        limit = min(max(int(limit or default_limit), 1), MAX_PAGE_SIZE)
    except (TypeError, ValueError):
        page, limit = 1, default_limit
    return page, limit
