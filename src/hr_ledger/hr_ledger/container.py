from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.dispatcher import NotificationDispatcher
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.calculator.standard_calculator import PayrollSchedule, StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Clock

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository
    notifications_repo: NotificationRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    notification_service: NotificationService
    dispatcher: NotificationDispatcher


def wire(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    notifications_repo: NotificationRepository,
    payroll_schedule: Optional[Mapping] = None,
    clock: Clock = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations."""
    notification_service = NotificationService(notifications_repo, clock=clock)
    dispatcher = NotificationDispatcher(notification_service, employees_repo)

    attendance_service = AttendanceService(attendance_repo, employees_repo, clock=clock)
    leave_service = LeaveService(leaves_repo, employees_repo, publisher=dispatcher, clock=clock)
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        attendance_repo,
        calculator=StandardPayrollCalculator(PayrollSchedule.from_mapping(payroll_schedule)),
        clock=clock,
    )

    return Container(
        conn=conn,
        clock=clock,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        notifications_repo=notifications_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        notification_service=notification_service,
        dispatcher=dispatcher,
    )


def build_container(*, db_config: dict, payroll_schedule: Optional[Mapping] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        payroll_schedule=payroll_schedule,
        conn=conn,
    )
