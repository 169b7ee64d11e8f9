"""Calendar arithmetic shared by the ledgers.

All functions are pure. Comparisons happen on whole local days; no timezone
conversion is performed beyond truncating to local midnight.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Callable, Union

from ..core.exceptions import InvalidRange

Clock = Callable[[], datetime]
DateLike = Union[date, datetime]

_ONE_DAY = timedelta(days=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Services receive this as their default clock; tests inject a fixed one.
    """
    return datetime.now()


def day_start(t: DateLike) -> datetime:
    """Truncate to local midnight."""
    if isinstance(t, datetime):
        return datetime.combine(t.date(), time.min, tzinfo=t.tzinfo)
    return datetime.combine(t, time.min)


def as_date(t: DateLike) -> date:
    return t.date() if isinstance(t, datetime) else t


def inclusive_day_span(a: DateLike, b: DateLike) -> int:
    """ceil((b - a) / 1 day) + 1, never below 1."""
    if isinstance(a, datetime) != isinstance(b, datetime):
        a, b = day_start(a), day_start(b)
    delta = b - a
    if delta < timedelta(0):
        raise InvalidRange("End of range precedes its start")
    whole_days, remainder = divmod(delta, _ONE_DAY)
    if remainder:
        whole_days += 1
    return max(1, whole_days + 1)


def working_days_between(a: DateLike, b: DateLike) -> int:
    """Count days in [a, b] that fall Monday to Friday."""
    start, end = as_date(a), as_date(b)
    if end < start:
        raise InvalidRange("End of range precedes its start")

    full_weeks, extra = divmod((end - start).days + 1, 7)
    count = full_weeks * 5
    weekday = start.weekday()
    for offset in range(extra):
        if (weekday + offset) % 7 < 5:
            count += 1
    return count


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant of the month."""
    first = datetime(int(year), int(month), 1)
    last_day = datetime(int(year), int(month), days_in_month(year, month))
    return first, datetime.combine(last_day.date(), time.max)


def year_bounds(year: int) -> tuple[date, date]:
    return date(int(year), 1, 1), date(int(year), 12, 31)
