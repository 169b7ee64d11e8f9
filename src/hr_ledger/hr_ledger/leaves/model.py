from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    applied_date: datetime
    approved_by: Optional[int] = None
    approved_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    team_email: Optional[str] = None
    handover_notes: Optional[str] = None
    documents: tuple[str, ...] = ()

    def overlaps(self, start_date: date, end_date: date) -> bool:
        """Closed-interval overlap with [start_date, end_date]."""
        return self.start_date <= end_date and self.end_date >= start_date


@dataclass(frozen=True)
class NewLeave:
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str
    applied_date: datetime
    team_email: Optional[str] = None
    handover_notes: Optional[str] = None
    documents: tuple[str, ...] = ()


@dataclass(frozen=True)
class LeaveDecision:
    status: LeaveStatus
    approved_by: int
    approved_date: datetime
    rejection_reason: Optional[str] = None


@dataclass(frozen=True)
class TypeBalance:
    total: int
    used: int

    @property
    def remaining(self) -> int:
        return max(0, self.total - self.used)


@dataclass(frozen=True)
class LeaveBalance:
    employee_id: int
    year: int
    by_type: dict[LeaveType, TypeBalance] = field(default_factory=dict)

    @property
    def total_used(self) -> int:
        return sum(b.used for b in self.by_type.values())


@dataclass(frozen=True)
class LeaveStatistics:
    """Requests applied within one year, grouped by status and by approved type."""

    year: int
    count_by_status: dict[LeaveStatus, int]
    days_by_status: dict[LeaveStatus, int]
    approved_days_by_type: dict[LeaveType, int]
    approved_count_by_type: dict[LeaveType, int]


def find_overlap(existing: Iterable[LeaveRequest], start_date: date, end_date: date) -> Optional[LeaveRequest]:
    """First Pending/Approved request in `existing` overlapping the range."""
    for leave in existing:
        if leave.status in (LeaveStatus.PENDING, LeaveStatus.APPROVED) and leave.overlaps(start_date, end_date):
            return leave
    return None
