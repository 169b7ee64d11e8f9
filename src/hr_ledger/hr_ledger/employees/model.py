from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ..core.enums import EmploymentStatus


@dataclass(frozen=True)
class SalaryConfig:
    basic: Decimal = Decimal("0")
    allowances: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee (read-only view; owned by the directory module)."""

    employee_id: int
    user_id: int
    employee_code: str
    full_name: str
    department: str
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    salary: SalaryConfig = field(default_factory=SalaryConfig)
