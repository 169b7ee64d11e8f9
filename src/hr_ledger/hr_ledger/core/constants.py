"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import LeaveType

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_NOTIFICATION_PAGE_SIZE = 20

# Annual entitlement in days per leave type.
LEAVE_ENTITLEMENTS: dict[LeaveType, int] = {
    LeaveType.ANNUAL: 21,
    LeaveType.SICK: 10,
    LeaveType.CASUAL: 7,
    LeaveType.MATERNITY: 180,
    LeaveType.PATERNITY: 15,
    LeaveType.EMERGENCY: 5,
}

# Standard payroll schedule (rates are fractions of earned basic).
DEFAULT_HRA_RATE = Decimal("0.40")
DEFAULT_TAX_RATE = Decimal("0.10")
DEFAULT_PF_RATE = Decimal("0.12")
DEFAULT_TRANSPORT_ALLOWANCE = Decimal("2000")
DEFAULT_MEDICAL_ALLOWANCE = Decimal("1500")
DEFAULT_INSURANCE_DEDUCTION = Decimal("500")
