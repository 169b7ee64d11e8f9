from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveDecision, LeaveRequest, NewLeave


class LeaveRepository(Protocol):
    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create_if_no_overlap(self, leave: NewLeave) -> Optional[LeaveRequest]:
        """Insert a Pending request unless a Pending/Approved one of the same
        employee overlaps it; returns None on overlap.

        The overlap check and the insert must be one atomic unit per employee.
        """

        raise NotImplementedError

    def decide(self, *, leave_id: int, decision: LeaveDecision) -> bool:
        """Apply a decision only while the request is still Pending."""

        raise NotImplementedError

    def cancel(self, *, leave_id: int) -> bool:
        """Set Cancelled only while the request is still Pending."""

        raise NotImplementedError

    def list_approved_starting_between(self, *, employee_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_applied_between(self, *, start: datetime, end: datetime) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[Sequence[LeaveRequest], int]:
        raise NotImplementedError
