from datetime import date, datetime, time

import pytest

from src.hr_ledger.hr_ledger.common.datetime_utils import (
    day_start,
    days_in_month,
    inclusive_day_span,
    month_bounds,
    parse_iso_date,
    working_days_between,
)
from src.hr_ledger.hr_ledger.core.exceptions import InvalidRange


def test_inclusive_day_span_counts_both_ends():
    assert inclusive_day_span(date(2025, 3, 10), date(2025, 3, 12)) == 3
    assert inclusive_day_span(date(2025, 3, 10), date(2025, 3, 10)) == 1


def test_inclusive_day_span_rounds_partial_days_up():
    assert inclusive_day_span(datetime(2025, 3, 10, 9, 0), datetime(2025, 3, 11, 10, 0)) == 3


def test_inclusive_day_span_rejects_reversed_range():
    with pytest.raises(InvalidRange):
        inclusive_day_span(date(2025, 3, 12), date(2025, 3, 10))


def test_working_days_in_september_2025():
    assert working_days_between(date(2025, 9, 1), date(2025, 9, 30)) == 22


def test_working_days_skip_weekends():
    # 2025-03-01 is a Saturday
    assert working_days_between(date(2025, 3, 1), date(2025, 3, 2)) == 0
    assert working_days_between(date(2025, 3, 1), date(2025, 3, 3)) == 1


def test_working_days_rejects_reversed_range():
    with pytest.raises(InvalidRange):
        working_days_between(date(2025, 9, 30), date(2025, 9, 1))


def test_month_bounds_cover_whole_month():
    first, last = month_bounds(2024, 2)
    assert first == datetime(2024, 2, 1, 0, 0)
    assert last == datetime.combine(date(2024, 2, 29), time.max)
    assert days_in_month(2025, 6) == 30


def test_day_start_and_parse():
    assert day_start(datetime(2025, 3, 10, 17, 45)) == datetime(2025, 3, 10)
    assert parse_iso_date("2025-03-10") == date(2025, 3, 10)
