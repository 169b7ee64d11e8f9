from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord

# Receives the stored record (None if the day has none yet) and returns the
# record to persist. Raising aborts the write.
DayMutation = Callable[[Optional[AttendanceRecord]], AttendanceRecord]


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def apply_to_day(self, *, employee_id: int, work_date: date, mutate: DayMutation) -> AttendanceRecord:
        """Atomically read, mutate and write the (employee, day) record.

        Implementations must serialize concurrent calls for the same key so that
        at most one record ever exists per employee per day.
        """

        raise NotImplementedError

    def list_for_period(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        """Return one page of records (newest day first) and the total count."""

        raise NotImplementedError
