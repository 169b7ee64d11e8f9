from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import REVIEWER_ROLES, EmploymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, SalaryConfig
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, user_id, employee_code, full_name, department, status,
    salary_basic, salary_allowances, salary_deductions
"""


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        user_id=int(r["user_id"]),
        employee_code=r["employee_code"],
        full_name=r["full_name"],
        department=r["department"],
        status=EmploymentStatus(r["status"]),
        salary=SalaryConfig(
            basic=Decimal(str(r.get("salary_basic") or 0)),
            allowances=Decimal(str(r.get("salary_allowances") or 0)),
            deductions=Decimal(str(r.get("salary_deductions") or 0)),
        ),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_reviewer_user_ids(self) -> Sequence[int]:
        roles = sorted(r.value for r in REVIEWER_ROLES)
        placeholders = ",".join(["%s"] * len(roles))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id
                FROM users
                WHERE role IN ({placeholders}) AND is_active=1
                ORDER BY user_id
                """,
                tuple(roles),
            )
            return [int(r["user_id"]) for r in fetchall(cur)]
