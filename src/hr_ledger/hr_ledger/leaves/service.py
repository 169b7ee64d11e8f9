from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime, time
from typing import Iterable

from ..common.datetime_utils import Clock, as_date, inclusive_day_span, now_local, year_bounds
from ..common.paging import Page
from ..common.validators import optional_text, page_limit, require_enum, require_non_empty, require_year
from ..core.actor import Actor, require_employee, require_reviewer
from ..core.constants import LEAVE_ENTITLEMENTS
from ..core.enums import LeaveStatus, LeaveType
from ..core.events import EventPublisher, LeaveApplied, LeaveDecided, NullPublisher
from ..core.exceptions import (
    AlreadyProcessedError,
    ForbiddenError,
    InvalidDateRangeError,
    NotFoundError,
    OverlappingLeaveError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .model import LeaveBalance, LeaveDecision, LeaveRequest, LeaveStatistics, NewLeave, TypeBalance
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_DECISIONS = {LeaveStatus.APPROVED, LeaveStatus.REJECTED}


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        publisher: EventPublisher | None = None,
        clock: Clock = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._publisher = publisher or NullPublisher()
        self._clock = clock

    def _get_or_404(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def apply(
        self,
        actor: Actor,
        *,
        leave_type,
        start_date: date | datetime,
        end_date: date | datetime,
        reason: str,
        team_email: str | None = None,
        handover_notes: str | None = None,
        documents: Iterable[str] | None = None,
    ) -> LeaveRequest:
        employee_id = require_employee(actor)
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        leave_type = require_enum(LeaveType, leave_type, "Leave type")
        reason = require_non_empty(reason, "Reason")
        if start_date is None or end_date is None:
            raise ValidationError("Start date and end date are required")
        start, end = as_date(start_date), as_date(end_date)

        now = self._clock()
        if start < now.date():
            raise InvalidDateRangeError("Start date cannot be in the past")
        if end < start:
            raise InvalidDateRangeError("End date must be on or after start date")

        new_leave = NewLeave(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            total_days=inclusive_day_span(start, end),
            reason=reason,
            applied_date=now,
            team_email=optional_text(team_email, "Team email"),
            handover_notes=optional_text(handover_notes, "Handover notes"),
            documents=tuple(filter(None, (optional_text(d, "Document") for d in documents or ()))),
        )
        leave = self._leaves.create_if_no_overlap(new_leave)
        if leave is None:
            raise OverlappingLeaveError("You already have a leave request for overlapping dates")

        logger.info("Leave %s applied by employee %s (%s days)", leave.leave_id, employee_id, leave.total_days)
        self._publisher.publish(LeaveApplied(leave=leave))
        return leave

    def review(self, actor: Actor, *, leave_id: int, decision, rejection_reason: str | None = None) -> LeaveRequest:
        require_reviewer(actor)
        decision = require_enum(LeaveStatus, decision, "Status")
        if decision not in _DECISIONS:
            raise ValidationError("Status must be Approved or Rejected")

        self._get_or_404(leave_id)
        ok = self._leaves.decide(
            leave_id=int(leave_id),
            decision=LeaveDecision(
                status=decision,
                approved_by=int(actor.user_id),
                approved_date=self._clock(),
                rejection_reason=(
                    optional_text(rejection_reason, "Rejection reason") if decision == LeaveStatus.REJECTED else None
                ),
            ),
        )
        if not ok:
            raise AlreadyProcessedError("Leave request has already been processed")

        leave = self._get_or_404(leave_id)
        logger.info("Leave %s %s by user %s", leave.leave_id, decision.value.lower(), actor.user_id)
        self._publisher.publish(LeaveDecided(leave=leave, reviewer_user_id=int(actor.user_id)))
        return leave

    def cancel(self, actor: Actor, *, leave_id: int) -> LeaveRequest:
        leave = self._get_or_404(leave_id)
        if actor.employee_id is None or int(actor.employee_id) != leave.employee_id:
            raise ForbiddenError("You can only cancel your own leave requests")
        if leave.status != LeaveStatus.PENDING:
            raise AlreadyProcessedError("Only pending leave requests can be cancelled")

        if not self._leaves.cancel(leave_id=int(leave_id)):
            raise AlreadyProcessedError("Only pending leave requests can be cancelled")
        return self._get_or_404(leave_id)

    def balance(self, employee_id: int, *, year) -> LeaveBalance:
        year = require_year(year)
        first, last = year_bounds(year)
        approved = self._leaves.list_approved_starting_between(employee_id=int(employee_id), start=first, end=last)

        used: Counter[LeaveType] = Counter()
        for leave in approved:
            used[leave.leave_type] += leave.total_days

        return LeaveBalance(
            employee_id=int(employee_id),
            year=year,
            by_type={t: TypeBalance(total=total, used=used[t]) for t, total in LEAVE_ENTITLEMENTS.items()},
        )

    def statistics(self, actor: Actor, *, year) -> LeaveStatistics:
        require_reviewer(actor)
        year = require_year(year)
        first, last = year_bounds(year)
        leaves = self._leaves.list_applied_between(
            start=datetime.combine(first, time.min),
            end=datetime.combine(last, time.max),
        )

        count_by_status: Counter[LeaveStatus] = Counter()
        days_by_status: Counter[LeaveStatus] = Counter()
        approved_days: Counter[LeaveType] = Counter()
        approved_count: Counter[LeaveType] = Counter()
        for leave in leaves:
            count_by_status[leave.status] += 1
            days_by_status[leave.status] += leave.total_days
            if leave.status == LeaveStatus.APPROVED:
                approved_days[leave.leave_type] += leave.total_days
                approved_count[leave.leave_type] += 1

        return LeaveStatistics(
            year=year,
            count_by_status=dict(count_by_status),
            days_by_status=dict(days_by_status),
            approved_days_by_type=dict(approved_days),
            approved_count_by_type=dict(approved_count),
        )

    def get(self, leave_id: int) -> LeaveRequest:
        return self._get_or_404(leave_id)

    def list_requests(
        self,
        *,
        employee_id: int | None = None,
        status=None,
        leave_type=None,
        start_date: date | None = None,
        end_date: date | None = None,
        page=1,
        limit=None,
    ) -> Page[LeaveRequest]:
        page, limit = page_limit(page, limit)
        items, total = self._leaves.list_requests(
            employee_id=employee_id,
            status=require_enum(LeaveStatus, status, "Status") if status else None,
            leave_type=require_enum(LeaveType, leave_type, "Leave type") if leave_type else None,
            start_date=start_date,
            end_date=end_date,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=items, page=page, limit=limit, total=total)
