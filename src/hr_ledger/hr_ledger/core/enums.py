from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles supplied by the authentication layer."""

    ADMIN = "admin"
    HR = "hr"
    USER = "user"


REVIEWER_ROLES = frozenset({Role.ADMIN, Role.HR})


class AttendanceStatus(str, Enum):
    """Day status stored on an attendance record."""

    PRESENT = "Present"
    ABSENT = "Absent"
    HALF_DAY = "Half Day"
    LATE = "Late"
    HOLIDAY = "Holiday"
    LEAVE = "Leave"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    MATERNITY = "Maternity"
    PATERNITY = "Paternity"
    EMERGENCY = "Emergency"
    CASUAL = "Casual"


class LeaveStatus(str, Enum):
    """Leave workflow: PENDING -> APPROVED | REJECTED | CANCELLED."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


class PayrollStatus(str, Enum):
    """Payroll workflow: DRAFT -> PROCESSED -> PAID."""

    DRAFT = "Draft"
    PROCESSED = "Processed"
    PAID = "Paid"


class EmploymentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    TERMINATED = "Terminated"


class NotificationCategory(str, Enum):
    LEAVE = "Leave"
    ATTENDANCE = "Attendance"
    ANNOUNCEMENT = "Announcement"
    SYSTEM = "System"
    REMINDER = "Reminder"


class NotificationPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
