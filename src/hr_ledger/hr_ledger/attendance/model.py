from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO, round2
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError

_MICROS_PER_HOUR = Decimal(3_600_000_000)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: Optional[int]
    employee_id: int
    work_date: date
    status: AttendanceStatus = AttendanceStatus.ABSENT
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    computed_hours: Decimal = ZERO
    notes: Optional[str] = None
    check_in_location: Optional[str] = None
    check_out_location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceSummary:
    """Per-month counts; total_days counts every calendar day of the month."""

    employee_id: int
    month: int
    year: int
    total_days: int
    present_days: int
    absent_days: int
    half_days: int
    late_days: int
    holidays: int
    leaves: int
    total_hours: Decimal


def worked_hours(check_in: Optional[datetime], check_out: Optional[datetime]) -> Decimal:
    """Hours between the two stamps rounded to 2 places; 0 until both are set."""
    if check_in is None or check_out is None:
        return ZERO
    if check_out < check_in:
        raise ValidationError("Check-out time cannot be earlier than check-in time")
    micros = (check_out - check_in) // timedelta(microseconds=1)
    return round2(Decimal(micros) / _MICROS_PER_HOUR)


def recompute(record: AttendanceRecord) -> AttendanceRecord:
    return replace(record, computed_hours=worked_hours(record.check_in, record.check_out))
