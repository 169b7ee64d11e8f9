from __future__ import annotations

import logging
from collections import Counter
from typing import Mapping

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, month_bounds, now_local, working_days_between
from ..common.money import ZERO, round2
from ..common.paging import Page
from ..common.validators import page_limit, require_enum, require_month, require_year
from ..core.actor import Actor, require_reviewer
from ..core.enums import AttendanceStatus, PayrollStatus
from ..core.exceptions import (
    AlreadyExistsError,
    ImmutableRecordError,
    InvalidTransitionError,
    NotFoundError,
    ZeroWorkingDaysError,
)
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollPatch, PayrollRecord, PayrollSummary, derive_totals
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        calculator: PayrollCalculator | None = None,
        clock: Clock = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    def _get_or_404(self, payroll_id: int) -> PayrollRecord:
        rec = self._payroll.get(int(payroll_id))
        if not rec:
            raise NotFoundError("Payroll not found")
        return rec

    def generate(self, actor: Actor, *, employee_id: int, month, year) -> PayrollRecord:
        require_reviewer(actor)
        month, year = require_month(month), require_year(year)

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if self._payroll.exists_for_period(employee_id=employee.employee_id, month=month, year=year):
            raise AlreadyExistsError("Payroll already exists for this period")

        first, last = month_bounds(year, month)
        working_days = working_days_between(first, last)
        if working_days == 0:
            raise ZeroWorkingDaysError("Pay period has no working days")

        records = self._attendance.list_for_period(
            employee_id=employee.employee_id, start_date=first.date(), end_date=last.date()
        )
        counts = Counter(r.status for r in records)
        present_days = counts[AttendanceStatus.PRESENT]

        earned_basic = round2(employee.salary.basic * present_days / working_days)
        record = derive_totals(
            PayrollRecord(
                payroll_id=None,
                employee_id=employee.employee_id,
                month=month,
                year=year,
                basic_salary=earned_basic,
                working_days=working_days,
                present_days=present_days,
                leave_days=counts[AttendanceStatus.LEAVE],
                allowances=self._calculator.allowances(earned_basic),
                deductions=self._calculator.deductions(earned_basic),
                generated_by=int(actor.user_id),
            )
        )
        created = self._payroll.create(record)
        logger.info("Payroll %s generated for employee %s (%02d/%s)", created.payroll_id, employee.employee_id, month, year)
        return created

    def update(self, actor: Actor, *, payroll_id: int, patch: PayrollPatch | Mapping) -> PayrollRecord:
        require_reviewer(actor)
        if not isinstance(patch, PayrollPatch):
            patch = PayrollPatch.from_dict(patch)

        def mutate(rec: PayrollRecord) -> PayrollRecord:
            if rec.status == PayrollStatus.PAID:
                raise ImmutableRecordError("Cannot update paid payroll")
            return patch.apply(rec)

        updated = self._payroll.update_locked(payroll_id=int(payroll_id), mutate=mutate)
        if updated is None:
            raise NotFoundError("Payroll not found")
        return updated

    def _transition(self, payroll_id: int, from_status: PayrollStatus, to_status: PayrollStatus, message: str):
        self._get_or_404(payroll_id)
        ok = self._payroll.transition(
            payroll_id=int(payroll_id),
            from_status=from_status,
            to_status=to_status,
            at=self._clock(),
        )
        if not ok:
            raise InvalidTransitionError(message)
        logger.info("Payroll %s moved to %s", payroll_id, to_status.value)
        return self._get_or_404(payroll_id)

    def process(self, actor: Actor, *, payroll_id: int) -> PayrollRecord:
        require_reviewer(actor)
        return self._transition(payroll_id, PayrollStatus.DRAFT, PayrollStatus.PROCESSED, "Payroll is already processed")

    def pay(self, actor: Actor, *, payroll_id: int) -> PayrollRecord:
        require_reviewer(actor)
        return self._transition(
            payroll_id, PayrollStatus.PROCESSED, PayrollStatus.PAID, "Payroll must be processed before payment"
        )

    def summary(self, *, year, employee_id: int | None = None) -> PayrollSummary:
        year = require_year(year)
        records = self._payroll.list_for_year(year=year, employee_id=employee_id)
        by_status = Counter(r.status for r in records)
        return PayrollSummary(
            year=year,
            employee_id=employee_id,
            total_payrolls=len(records),
            total_earnings=sum((r.total_earnings for r in records), ZERO),
            total_deductions=sum((r.total_deductions for r in records), ZERO),
            total_net_salary=sum((r.net_salary for r in records), ZERO),
            status_breakdown={s: by_status[s] for s in PayrollStatus},
        )

    def get(self, payroll_id: int) -> PayrollRecord:
        return self._get_or_404(payroll_id)

    def list_records(
        self,
        *,
        employee_id: int | None = None,
        month=None,
        year=None,
        status=None,
        page=1,
        limit=None,
    ) -> Page[PayrollRecord]:
        page, limit = page_limit(page, limit)
        items, total = self._payroll.list_records(
            employee_id=employee_id,
            month=require_month(month) if month else None,
            year=require_year(year) if year else None,
            status=require_enum(PayrollStatus, status, "Status") if status else None,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=items, page=page, limit=limit, total=total)
