"""Turns ledger events into notifications.

The dispatcher runs after the ledger write has committed. Anything that goes
wrong here is logged and dropped: the ledger caller still gets its record.
"""

from __future__ import annotations

import logging

from ..core.enums import LeaveStatus, NotificationCategory, NotificationPriority
from ..core.events import LeaveApplied, LeaveDecided, LedgerEvent
from ..employees.repository import EmployeeRepository
from ..leaves.model import LeaveRequest
from .service import NotificationService

logger = logging.getLogger(__name__)


def _period(leave: LeaveRequest) -> str:
    return f"{leave.start_date:%Y-%m-%d} to {leave.end_date:%Y-%m-%d}"


class NotificationDispatcher:
    def __init__(self, notifications: NotificationService, employees: EmployeeRepository):
        self._notifications = notifications
        self._employees = employees

    def publish(self, event: LedgerEvent) -> None:
        try:
            if isinstance(event, LeaveApplied):
                self._on_leave_applied(event)
            elif isinstance(event, LeaveDecided):
                self._on_leave_decided(event)
        except Exception:
            logger.exception("Failed to dispatch notification for %s", type(event).__name__)

    def _on_leave_applied(self, event: LeaveApplied) -> None:
        leave = event.leave
        employee = self._employees.get_by_id(leave.employee_id)
        if not employee:
            logger.warning("Leave %s references unknown employee %s", leave.leave_id, leave.employee_id)
            return

        reviewers = [uid for uid in self._employees.list_reviewer_user_ids() if uid != employee.user_id]
        if not reviewers:
            logger.warning("No reviewers to notify about leave %s", leave.leave_id)
            return

        self._notifications.broadcast(
            recipient_ids=reviewers,
            sender_id=employee.user_id,
            title="New Leave Application",
            message=f"{employee.full_name} has applied for {leave.leave_type.value} leave from {_period(leave)}",
            category=NotificationCategory.LEAVE,
            priority=NotificationPriority.MEDIUM,
            payload={"leaveId": leave.leave_id, "action": "applied"},
        )

    def _on_leave_decided(self, event: LeaveDecided) -> None:
        leave = event.leave
        employee = self._employees.get_by_id(leave.employee_id)
        if not employee:
            logger.warning("Leave %s references unknown employee %s", leave.leave_id, leave.employee_id)
            return

        action = "approved" if leave.status == LeaveStatus.APPROVED else "rejected"
        message = f"Your {leave.leave_type.value} leave request from {_period(leave)} has been {action}"
        if leave.rejection_reason:
            message += f": {leave.rejection_reason}"

        self._notifications.notify(
            recipient_id=employee.user_id,
            sender_id=event.reviewer_user_id,
            title=f"Leave Request {action.capitalize()}",
            message=message,
            category=NotificationCategory.LEAVE,
            priority=NotificationPriority.HIGH,
            payload={"leaveId": leave.leave_id, "action": action},
        )
