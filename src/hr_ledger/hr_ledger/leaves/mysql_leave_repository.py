from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, where_clause
from .model import LeaveDecision, LeaveRequest, NewLeave
from .repository import LeaveRepository

_COLUMNS = """
    leave_id, employee_id, leave_type, start_date, end_date, total_days, reason, status,
    applied_date, approved_by, approved_date, rejection_reason, team_email, handover_notes, documents
"""


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=int(r["total_days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_date=r["applied_date"],
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_date=r.get("approved_date"),
        rejection_reason=r.get("rejection_reason"),
        team_email=r.get("team_email"),
        handover_notes=r.get("handover_notes"),
        documents=tuple(load_json(r.get("documents")) or ()),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def create_if_no_overlap(self, leave: NewLeave) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Serializes applications of the same employee for the rest of the transaction.
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (int(leave.employee_id),))
            if not fetchone(cur):
                raise NotFoundError("Employee not found")

            cur.execute(
                """
                SELECT leave_id
                FROM leave_requests
                WHERE employee_id=%s AND status IN (%s, %s)
                  AND start_date <= %s AND end_date >= %s
                LIMIT 1
                """,
                (
                    int(leave.employee_id),
                    LeaveStatus.PENDING.value,
                    LeaveStatus.APPROVED.value,
                    leave.end_date,
                    leave.start_date,
                ),
            )
            if fetchone(cur):
                return None

            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, leave_type, start_date, end_date, total_days, reason, status,
                    applied_date, team_email, handover_notes, documents
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(leave.employee_id),
                    leave.leave_type.value,
                    leave.start_date,
                    leave.end_date,
                    int(leave.total_days),
                    leave.reason,
                    LeaveStatus.PENDING.value,
                    leave.applied_date,
                    leave.team_email,
                    leave.handover_notes,
                    dump_json(list(leave.documents)),
                ),
            )
            return LeaveRequest(
                leave_id=int(cur.lastrowid),
                employee_id=int(leave.employee_id),
                leave_type=leave.leave_type,
                start_date=leave.start_date,
                end_date=leave.end_date,
                total_days=int(leave.total_days),
                reason=leave.reason,
                status=LeaveStatus.PENDING,
                applied_date=leave.applied_date,
                team_email=leave.team_email,
                handover_notes=leave.handover_notes,
                documents=tuple(leave.documents),
            )

    def decide(self, *, leave_id: int, decision: LeaveDecision) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_date=%s, rejection_reason=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    decision.status.value,
                    int(decision.approved_by),
                    decision.approved_date,
                    decision.rejection_reason,
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def cancel(self, *, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET status=%s WHERE leave_id=%s AND status=%s",
                (LeaveStatus.CANCELLED.value, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_approved_starting_between(self, *, employee_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND status=%s AND start_date BETWEEN %s AND %s
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, start, end),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def list_applied_between(self, *, start: datetime, end: datetime) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE applied_date BETWEEN %s AND %s",
                (start, end),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

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
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if leave_type is not None:
            clauses.append("leave_type=%s")
            params.append(leave_type.value)
        if start_date is not None:
            clauses.append("end_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("start_date <= %s")
            params.append(end_date)

        where = where_clause(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM leave_requests WHERE {where}", tuple(params))
            total = int(fetchone(cur)["n"])
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY applied_date DESC, leave_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_leave(r) for r in fetchall(cur)], total
