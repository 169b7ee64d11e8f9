from __future__ import annotations

from collections import Counter
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import Clock, as_date, day_start, days_in_month, month_bounds, now_local
from ..common.money import ZERO
from ..common.paging import Page
from ..common.validators import optional_text, page_limit, require_enum, require_month, require_year
from ..core.actor import Actor, require_reviewer
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    NoCheckInError,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord, AttendanceSummary, recompute
from .repository import AttendanceRepository


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository, *, clock: Clock = now_local):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

    @staticmethod
    def _local_stamp(value: datetime | None, field_name: str) -> datetime | None:
        if value is not None and value.tzinfo is not None:
            raise ValidationError(f"{field_name} must be a local time without a UTC offset")
        return value

    def check_in(self, employee_id: int, *, at: datetime | None = None, location: str | None = None) -> AttendanceRecord:
        at = self._local_stamp(at, "Check-in") or self._clock()
        location = optional_text(location, "Location")
        self._require_employee(employee_id)
        day = day_start(at).date()

        def mutate(current: Optional[AttendanceRecord]) -> AttendanceRecord:
            if current and current.check_in is not None:
                raise AlreadyCheckedInError("Already checked in today")
            base = current or AttendanceRecord(attendance_id=None, employee_id=int(employee_id), work_date=day)
            return recompute(replace(base, check_in=at, status=AttendanceStatus.PRESENT, check_in_location=location))

        return self._attendance.apply_to_day(employee_id=int(employee_id), work_date=day, mutate=mutate)

    def check_out(self, employee_id: int, *, at: datetime | None = None, location: str | None = None) -> AttendanceRecord:
        at = self._local_stamp(at, "Check-out") or self._clock()
        location = optional_text(location, "Location")

        def mutate(current: Optional[AttendanceRecord]) -> AttendanceRecord:
            if not current or current.check_in is None:
                raise NoCheckInError("No check-in record found for today")
            if current.check_out is not None:
                raise AlreadyCheckedOutError("Already checked out today")
            if at < current.check_in:
                raise ValidationError("Check-out time cannot be earlier than check-in time")
            return recompute(replace(current, check_out=at, check_out_location=location))

        return self._attendance.apply_to_day(employee_id=int(employee_id), work_date=day_start(at).date(), mutate=mutate)

    def mark_attendance(
        self,
        actor: Actor,
        *,
        employee_id: int,
        work_date: date | datetime,
        status,
        check_in: datetime | None = None,
        check_out: datetime | None = None,
        notes: str | None = None,
    ) -> AttendanceRecord:
        """Reviewer upsert that skips the check-in/check-out sequencing.

        Provided stamps replace the stored ones; the check-in must fall on
        ``work_date`` and the check-out may not precede it.
        """
        require_reviewer(actor)
        status = require_enum(AttendanceStatus, status, "Status")
        check_in = self._local_stamp(check_in, "Check-in")
        check_out = self._local_stamp(check_out, "Check-out")
        notes = optional_text(notes, "Notes")
        day = as_date(work_date)
        if check_in is not None and check_in.date() != day:
            raise ValidationError("Check-in must fall on the attendance date")
        if check_in is None and check_out is not None and check_out.date() != day:
            raise ValidationError("Check-out must fall on the attendance date")
        self._require_employee(employee_id)

        def mutate(current: Optional[AttendanceRecord]) -> AttendanceRecord:
            base = current or AttendanceRecord(attendance_id=None, employee_id=int(employee_id), work_date=day)
            new_in = check_in if check_in is not None else base.check_in
            new_out = check_out if check_out is not None else base.check_out
            if new_in is not None and new_out is not None and new_out < new_in:
                raise ValidationError("Check-out time cannot be earlier than check-in time")
            return recompute(replace(base, status=status, check_in=new_in, check_out=new_out, notes=notes))

        return self._attendance.apply_to_day(employee_id=int(employee_id), work_date=day, mutate=mutate)

    def today(self, employee_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(int(employee_id), self._clock().date())

    def summary(self, employee_id: int, *, month, year) -> AttendanceSummary:
        month, year = require_month(month), require_year(year)
        first, last = month_bounds(year, month)
        records = self._attendance.list_for_period(
            employee_id=int(employee_id), start_date=first.date(), end_date=last.date()
        )

        counts = Counter(r.status for r in records)
        return AttendanceSummary(
            employee_id=int(employee_id),
            month=month,
            year=year,
            total_days=days_in_month(year, month),
            present_days=counts[AttendanceStatus.PRESENT],
            absent_days=counts[AttendanceStatus.ABSENT],
            half_days=counts[AttendanceStatus.HALF_DAY],
            late_days=counts[AttendanceStatus.LATE],
            holidays=counts[AttendanceStatus.HOLIDAY],
            leaves=counts[AttendanceStatus.LEAVE],
            total_hours=sum((r.computed_hours for r in records), ZERO),
        )

    def list_records(
        self,
        *,
        employee_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status=None,
        page=1,
        limit=None,
    ) -> Page[AttendanceRecord]:
        page, limit = page_limit(page, limit)
        if status:
            status = require_enum(AttendanceStatus, status, "Status")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        items, total = self._attendance.list_records(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            status=status or None,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=items, page=page, limit=limit, total=total)
