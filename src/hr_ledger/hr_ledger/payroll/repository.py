from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord

PayrollMutation = Callable[[PayrollRecord], PayrollRecord]


class PayrollRepository(Protocol):
    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def exists_for_period(self, *, employee_id: int, month: int, year: int) -> bool:
        raise NotImplementedError

    def create(self, record: PayrollRecord) -> PayrollRecord:
        """Insert a new record; raises AlreadyExistsError if the period is taken."""

        raise NotImplementedError

    def update_locked(self, *, payroll_id: int, mutate: PayrollMutation) -> Optional[PayrollRecord]:
        """Locked read-modify-write; returns None if the record does not exist."""

        raise NotImplementedError

    def transition(
        self,
        *,
        payroll_id: int,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        at: datetime,
    ) -> bool:
        """Move from_status -> to_status, stamping processed/payment date.

        Returns False when the record is not currently in from_status.
        """

        raise NotImplementedError

    def list_for_year(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[PayrollRecord], int]:
        raise NotImplementedError
