from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PayrollStatus
from ..core.exceptions import AlreadyExistsError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, where_clause
from .model import Allowances, Deductions, Overtime, PayrollRecord
from .repository import PayrollMutation, PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, pay_month, pay_year, basic_salary,
    hra, transport, medical, other_allowance,
    tax, pf, insurance, other_deduction,
    overtime_hours, overtime_rate, overtime_amount, bonus,
    total_earnings, total_deductions, net_salary,
    working_days, present_days, leave_days, status, generated_by,
    processed_date, payment_date, created_at, updated_at
"""

# Column stamped when a record enters the given status.
_STAMP_COLUMN = {
    PayrollStatus.PROCESSED: "processed_date",
    PayrollStatus.PAID: "payment_date",
}


def _dec(v) -> Decimal:
    return Decimal(str(v if v is not None else 0))


def _row_to_record(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["pay_month"]),
        year=int(r["pay_year"]),
        basic_salary=_dec(r["basic_salary"]),
        allowances=Allowances(
            hra=_dec(r["hra"]),
            transport=_dec(r["transport"]),
            medical=_dec(r["medical"]),
            other=_dec(r["other_allowance"]),
        ),
        deductions=Deductions(
            tax=_dec(r["tax"]),
            pf=_dec(r["pf"]),
            insurance=_dec(r["insurance"]),
            other=_dec(r["other_deduction"]),
        ),
        overtime=Overtime(
            hours=_dec(r["overtime_hours"]),
            rate=_dec(r["overtime_rate"]),
            amount=_dec(r["overtime_amount"]),
        ),
        bonus=_dec(r["bonus"]),
        total_earnings=_dec(r["total_earnings"]),
        total_deductions=_dec(r["total_deductions"]),
        net_salary=_dec(r["net_salary"]),
        working_days=int(r["working_days"]),
        present_days=int(r["present_days"]),
        leave_days=int(r["leave_days"] or 0),
        status=PayrollStatus(r["status"]),
        generated_by=int(r["generated_by"]) if r.get("generated_by") is not None else None,
        processed_date=r.get("processed_date"),
        payment_date=r.get("payment_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _amounts(rec: PayrollRecord) -> tuple:
    return (
        rec.basic_salary,
        rec.allowances.hra,
        rec.allowances.transport,
        rec.allowances.medical,
        rec.allowances.other,
        rec.deductions.tax,
        rec.deductions.pf,
        rec.deductions.insurance,
        rec.deductions.other,
        rec.overtime.hours,
        rec.overtime.rate,
        rec.overtime.amount,
        rec.bonus,
        rec.total_earnings,
        rec.total_deductions,
        rec.net_salary,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def exists_for_period(self, *, employee_id: int, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 FROM payroll_records WHERE employee_id=%s AND pay_month=%s AND pay_year=%s LIMIT 1",
                (int(employee_id), int(month), int(year)),
            )
            return fetchone(cur) is not None

    def create(self, record: PayrollRecord) -> PayrollRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payroll_records(
                        employee_id, pay_month, pay_year, basic_salary,
                        hra, transport, medical, other_allowance,
                        tax, pf, insurance, other_deduction,
                        overtime_hours, overtime_rate, overtime_amount, bonus,
                        total_earnings, total_deductions, net_salary,
                        working_days, present_days, leave_days, status, generated_by
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(record.employee_id), int(record.month), int(record.year))
                    + _amounts(record)
                    + (
                        int(record.working_days),
                        int(record.present_days),
                        int(record.leave_days),
                        record.status.value,
                        record.generated_by,
                    ),
                )
                return replace(record, payroll_id=int(cur.lastrowid))
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise AlreadyExistsError("Payroll already exists for this period") from e
            raise

    def update_locked(self, *, payroll_id: int, mutate: PayrollMutation) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s FOR UPDATE", (int(payroll_id),))
            r = fetchone(cur)
            if not r:
                return None

            updated = mutate(_row_to_record(r))
            cur.execute(
                """
                UPDATE payroll_records
                SET basic_salary=%s,
                    hra=%s, transport=%s, medical=%s, other_allowance=%s,
                    tax=%s, pf=%s, insurance=%s, other_deduction=%s,
                    overtime_hours=%s, overtime_rate=%s, overtime_amount=%s, bonus=%s,
                    total_earnings=%s, total_deductions=%s, net_salary=%s
                WHERE payroll_id=%s
                """,
                _amounts(updated) + (int(payroll_id),),
            )
            return updated

    def transition(
        self,
        *,
        payroll_id: int,
        from_status: PayrollStatus,
        to_status: PayrollStatus,
        at: datetime,
    ) -> bool:
        stamp = _STAMP_COLUMN[to_status]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll_records SET status=%s, {stamp}=%s WHERE payroll_id=%s AND status=%s",
                (to_status.value, at, int(payroll_id), from_status.value),
            )
            return cur.rowcount > 0

    def list_for_year(self, *, year: int, employee_id: Optional[int] = None) -> Sequence[PayrollRecord]:
        clauses = ["pay_year=%s"]
        params: list[object] = [int(year)]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records WHERE {where_clause(clauses)} ORDER BY pay_month",
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

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
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if month is not None:
            clauses.append("pay_month=%s")
            params.append(int(month))
        if year is not None:
            clauses.append("pay_year=%s")
            params.append(int(year))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = where_clause(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM payroll_records WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE {where}
                ORDER BY pay_year DESC, pay_month DESC, payroll_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total
