from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import AttendanceRecord
from .repository import AttendanceRepository, DayMutation

_COLUMNS = """
    attendance_id, employee_id, work_date, check_in, check_out, computed_hours,
    status, notes, check_in_location, check_out_location, created_at, updated_at
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        computed_hours=Decimal(str(r.get("computed_hours") or 0)),
        notes=r.get("notes"),
        check_in_location=r.get("check_in_location"),
        check_out_location=r.get("check_out_location"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def apply_to_day(self, *, employee_id: int, work_date: date, mutate: DayMutation) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            # Make sure a row exists so FOR UPDATE always locks a real row; a
            # concurrent creator blocks here until the first one commits.
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(employee_id, work_date, status)
                VALUES(%s,%s,%s)
                """,
                (int(employee_id), work_date, AttendanceStatus.ABSENT.value),
            )
            created = cur.rowcount == 1

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                FOR UPDATE
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            if not r:
                raise NotFoundError("Employee not found")

            stored = _row_to_record(r)
            updated = mutate(None if created else stored)
            updated = replace(updated, attendance_id=stored.attendance_id, created_at=stored.created_at)

            cur.execute(
                """
                UPDATE attendance_records
                SET check_in=%s, check_out=%s, computed_hours=%s, status=%s, notes=%s,
                    check_in_location=%s, check_out_location=%s
                WHERE attendance_id=%s
                """,
                (
                    updated.check_in,
                    updated.check_out,
                    updated.computed_hours,
                    updated.status.value,
                    updated.notes,
                    updated.check_in_location,
                    updated.check_out_location,
                    stored.attendance_id,
                ),
            )
            return updated

    def list_for_period(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

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
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = where_clause(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_records WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total
