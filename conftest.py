"""Shared fixtures: a controllable clock and lock-guarded in-memory repositories."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from src.hr_ledger.hr_ledger.container import wire
from src.hr_ledger.hr_ledger.core.actor import Actor
from src.hr_ledger.hr_ledger.core.enums import LeaveStatus, PayrollStatus, Role
from src.hr_ledger.hr_ledger.core.exceptions import AlreadyExistsError
from src.hr_ledger.hr_ledger.employees.model import Employee, SalaryConfig
from src.hr_ledger.hr_ledger.leaves.model import LeaveRequest, find_overlap
from src.hr_ledger.hr_ledger.payroll.model import PayrollRecord

ADMIN_USER_ID = 1
HR_USER_ID = 2
ALICE_USER_ID = 10
BAO_USER_ID = 11
ALICE_EMPLOYEE_ID = 100
BAO_EMPLOYEE_ID = 101


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def _page(items: list, offset: int, limit: int):
    return items[offset : offset + limit], len(items)


class InMemoryEmployees:
    def __init__(self, employees: list[Employee], reviewer_user_ids: list[int]):
        self._by_id = {e.employee_id: e for e in employees}
        self._reviewers = list(reviewer_user_ids)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.user_id == int(user_id)), None)

    def list_reviewer_user_ids(self) -> list[int]:
        return list(self._reviewers)


class InMemoryAttendance:
    def __init__(self):
        self._lock = threading.Lock()
        self._rows = {}
        self._next_id = 0

    def get_for_employee_and_date(self, employee_id, work_date):
        return self._rows.get((int(employee_id), work_date))

    def apply_to_day(self, *, employee_id, work_date, mutate):
        with self._lock:
            key = (int(employee_id), work_date)
            current = self._rows.get(key)
            updated = mutate(current)
            if current is None:
                self._next_id += 1
                updated = replace(updated, attendance_id=self._next_id)
            else:
                updated = replace(updated, attendance_id=current.attendance_id)
            self._rows[key] = updated
            return updated

    def list_for_period(self, *, employee_id, start_date, end_date):
        return [
            r
            for (eid, day), r in sorted(self._rows.items(), key=lambda kv: kv[0][1])
            if eid == int(employee_id) and start_date <= day <= end_date
        ]

    def list_records(self, *, employee_id=None, start_date=None, end_date=None, status=None, offset=0, limit=10):
        items = [
            r
            for r in self._rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return _page(items, offset, limit)

    def all(self):
        return list(self._rows.values())


class InMemoryLeaves:
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, LeaveRequest] = {}
        self._next_id = 0

    def get(self, leave_id):
        return self._rows.get(int(leave_id))

    def create_if_no_overlap(self, leave):
        with self._lock:
            mine = [r for r in self._rows.values() if r.employee_id == leave.employee_id]
            if find_overlap(mine, leave.start_date, leave.end_date):
                return None
            self._next_id += 1
            created = LeaveRequest(
                leave_id=self._next_id,
                employee_id=leave.employee_id,
                leave_type=leave.leave_type,
                start_date=leave.start_date,
                end_date=leave.end_date,
                total_days=leave.total_days,
                reason=leave.reason,
                status=LeaveStatus.PENDING,
                applied_date=leave.applied_date,
                team_email=leave.team_email,
                handover_notes=leave.handover_notes,
                documents=leave.documents,
            )
            self._rows[created.leave_id] = created
            return created

    def decide(self, *, leave_id, decision):
        with self._lock:
            leave = self._rows.get(int(leave_id))
            if not leave or leave.status != LeaveStatus.PENDING:
                return False
            self._rows[leave.leave_id] = replace(
                leave,
                status=decision.status,
                approved_by=decision.approved_by,
                approved_date=decision.approved_date,
                rejection_reason=decision.rejection_reason,
            )
            return True

    def cancel(self, *, leave_id):
        with self._lock:
            leave = self._rows.get(int(leave_id))
            if not leave or leave.status != LeaveStatus.PENDING:
                return False
            self._rows[leave.leave_id] = replace(leave, status=LeaveStatus.CANCELLED)
            return True

    def list_approved_starting_between(self, *, employee_id, start, end):
        return [
            r
            for r in self._rows.values()
            if r.employee_id == int(employee_id) and r.status == LeaveStatus.APPROVED and start <= r.start_date <= end
        ]

    def list_applied_between(self, *, start, end):
        return [r for r in self._rows.values() if start <= r.applied_date <= end]

    def list_requests(
        self, *, employee_id=None, status=None, leave_type=None, start_date=None, end_date=None, offset=0, limit=10
    ):
        items = [
            r
            for r in self._rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (status is None or r.status == status)
            and (leave_type is None or r.leave_type == leave_type)
            and (start_date is None or r.end_date >= start_date)
            and (end_date is None or r.start_date <= end_date)
        ]
        items.sort(key=lambda r: (r.applied_date, r.leave_id), reverse=True)
        return _page(items, offset, limit)

    def put(self, leave: LeaveRequest) -> None:
        self._rows[leave.leave_id] = leave
        self._next_id = max(self._next_id, leave.leave_id)


class InMemoryPayroll:
    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[int, PayrollRecord] = {}
        self._next_id = 0

    def get(self, payroll_id):
        return self._rows.get(int(payroll_id))

    def exists_for_period(self, *, employee_id, month, year):
        return any(
            r.employee_id == employee_id and r.month == month and r.year == year for r in self._rows.values()
        )

    def create(self, record):
        with self._lock:
            if self.exists_for_period(employee_id=record.employee_id, month=record.month, year=record.year):
                raise AlreadyExistsError("Payroll already exists for this period")
            self._next_id += 1
            created = replace(record, payroll_id=self._next_id)
            self._rows[created.payroll_id] = created
            return created

    def update_locked(self, *, payroll_id, mutate):
        with self._lock:
            rec = self._rows.get(int(payroll_id))
            if rec is None:
                return None
            updated = mutate(rec)
            self._rows[rec.payroll_id] = updated
            return updated

    def transition(self, *, payroll_id, from_status, to_status, at):
        with self._lock:
            rec = self._rows.get(int(payroll_id))
            if not rec or rec.status != from_status:
                return False
            stamp = {"processed_date": at} if to_status == PayrollStatus.PROCESSED else {"payment_date": at}
            self._rows[rec.payroll_id] = replace(rec, status=to_status, **stamp)
            return True

    def list_for_year(self, *, year, employee_id=None):
        return [
            r for r in self._rows.values() if r.year == year and (employee_id is None or r.employee_id == employee_id)
        ]

    def list_records(self, *, employee_id=None, month=None, year=None, status=None, offset=0, limit=10):
        items = [
            r
            for r in self._rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (month is None or r.month == month)
            and (year is None or r.year == year)
            and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.year, r.month, r.payroll_id), reverse=True)
        return _page(items, offset, limit)


class InMemoryNotifications:
    def __init__(self):
        self._lock = threading.Lock()
        self._rows = {}
        self._next_id = 0
        self.fail_with: Optional[Exception] = None

    def create_many(self, notifications):
        if self.fail_with is not None:
            raise self.fail_with
        created = []
        with self._lock:
            for n in notifications:
                self._next_id += 1
                n = replace(n, notification_id=self._next_id)
                self._rows[n.notification_id] = n
                created.append(n)
        return created

    def _mine(self, recipient_id):
        return [n for n in self._rows.values() if n.recipient_id == int(recipient_id)]

    def list_for(self, *, recipient_id, category=None, priority=None, unread_only=False, offset=0, limit=20):
        items = [
            n
            for n in self._mine(recipient_id)
            if (category is None or n.category == category)
            and (priority is None or n.priority == priority)
            and (not unread_only or not n.is_read)
        ]
        items.sort(key=lambda n: (n.created_at, n.notification_id), reverse=True)
        return _page(items, offset, limit)

    def unread_count(self, *, recipient_id):
        return sum(1 for n in self._mine(recipient_id) if not n.is_read)

    def mark_read(self, *, notification_id, recipient_id, at):
        n = self._rows.get(int(notification_id))
        if not n or n.recipient_id != int(recipient_id):
            return False
        if not n.is_read:
            self._rows[n.notification_id] = replace(n, is_read=True, read_at=at)
        return True

    def mark_all_read(self, *, recipient_id, at):
        unread = [n for n in self._mine(recipient_id) if not n.is_read]
        for n in unread:
            self._rows[n.notification_id] = replace(n, is_read=True, read_at=at)
        return len(unread)

    def delete(self, *, notification_id, recipient_id):
        n = self._rows.get(int(notification_id))
        if not n or n.recipient_id != int(recipient_id):
            return False
        del self._rows[n.notification_id]
        return True

    def all(self):
        return list(self._rows.values())


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 1, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FrozenClock:
    return FrozenClock(fixed_now)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(
                employee_id=ALICE_EMPLOYEE_ID,
                user_id=ALICE_USER_ID,
                employee_code="EMP0100",
                full_name="Alice Nguyen",
                department="Engineering",
                salary=SalaryConfig(basic=Decimal("42000")),
            ),
            Employee(
                employee_id=BAO_EMPLOYEE_ID,
                user_id=BAO_USER_ID,
                employee_code="EMP0101",
                full_name="Bao Tran",
                department="Finance",
                salary=SalaryConfig(basic=Decimal("30000")),
            ),
        ],
        reviewer_user_ids=[ADMIN_USER_ID, HR_USER_ID],
    )


@pytest.fixture
def admin() -> Actor:
    return Actor(user_id=ADMIN_USER_ID, role=Role.ADMIN)


@pytest.fixture
def hr() -> Actor:
    return Actor(user_id=HR_USER_ID, role=Role.HR)


@pytest.fixture
def alice() -> Actor:
    return Actor(user_id=ALICE_USER_ID, role=Role.USER, employee_id=ALICE_EMPLOYEE_ID)


@pytest.fixture
def bao() -> Actor:
    return Actor(user_id=BAO_USER_ID, role=Role.USER, employee_id=BAO_EMPLOYEE_ID)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def leaves_repo() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def payroll_repo() -> InMemoryPayroll:
    return InMemoryPayroll()


@pytest.fixture
def notifications_repo() -> InMemoryNotifications:
    return InMemoryNotifications()


@pytest.fixture
def container(employees, attendance_repo, leaves_repo, payroll_repo, notifications_repo, clock):
    return wire(
        employees_repo=employees,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        notifications_repo=notifications_repo,
        clock=clock,
    )
