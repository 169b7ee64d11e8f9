from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from ..common.money import ZERO, round2
from ..common.validators import require_amount
from ..core.enums import PayrollStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Allowances:
    hra: Decimal = ZERO
    transport: Decimal = ZERO
    medical: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.hra + self.transport + self.medical + self.other


@dataclass(frozen=True)
class Deductions:
    tax: Decimal = ZERO
    pf: Decimal = ZERO
    insurance: Decimal = ZERO
    other: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.tax + self.pf + self.insurance + self.other


@dataclass(frozen=True)
class Overtime:
    hours: Decimal = ZERO
    rate: Decimal = ZERO
    amount: Decimal = ZERO


@dataclass(frozen=True)
class PayrollRecord:
    """Monthly pay slip. Totals are always the output of derive_totals()."""

    payroll_id: Optional[int]
    employee_id: int
    month: int
    year: int
    basic_salary: Decimal
    working_days: int
    present_days: int
    leave_days: int = 0
    allowances: Allowances = field(default_factory=Allowances)
    deductions: Deductions = field(default_factory=Deductions)
    overtime: Overtime = field(default_factory=Overtime)
    bonus: Decimal = ZERO
    total_earnings: Decimal = ZERO
    total_deductions: Decimal = ZERO
    net_salary: Decimal = ZERO
    status: PayrollStatus = PayrollStatus.DRAFT
    generated_by: Optional[int] = None
    processed_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def derive_totals(record: PayrollRecord) -> PayrollRecord:
    overtime = replace(record.overtime, amount=round2(record.overtime.hours * record.overtime.rate))
    earnings = round2(record.basic_salary + record.allowances.total + overtime.amount + record.bonus)
    deductions = round2(record.deductions.total)
    return replace(
        record,
        overtime=overtime,
        total_earnings=earnings,
        total_deductions=deductions,
        net_salary=earnings - deductions,
    )


_PATCH_FIELDS = {
    "allowances": ("hra", "transport", "medical", "other"),
    "deductions": ("tax", "pf", "insurance", "other"),
    "overtime": ("hours", "rate"),
}


@dataclass(frozen=True)
class PayrollPatch:
    """Partial update; only the listed component keys are accepted."""

    allowances: Mapping[str, Decimal] = field(default_factory=dict)
    deductions: Mapping[str, Decimal] = field(default_factory=dict)
    overtime: Mapping[str, Decimal] = field(default_factory=dict)
    bonus: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "PayrollPatch":
        if not isinstance(data, Mapping):
            raise ValidationError("Payroll update must be an object")

        unknown = set(data) - set(_PATCH_FIELDS) - {"bonus"}
        if unknown:
            raise ValidationError(f"Unknown payroll fields: {', '.join(sorted(unknown))}")

        parts: dict[str, dict[str, Decimal]] = {}
        for group, allowed in _PATCH_FIELDS.items():
            values = data.get(group) or {}
            if not isinstance(values, Mapping):
                raise ValidationError(f"{group} must be an object")
            bad = set(values) - set(allowed)
            if bad:
                raise ValidationError(f"Unknown {group} fields: {', '.join(sorted(bad))}")
            parts[group] = {k: round2(require_amount(v, f"{group}.{k}")) for k, v in values.items()}

        bonus = data.get("bonus")
        return cls(
            allowances=parts["allowances"],
            deductions=parts["deductions"],
            overtime=parts["overtime"],
            bonus=round2(require_amount(bonus, "bonus")) if bonus is not None else None,
        )

    def apply(self, record: PayrollRecord) -> PayrollRecord:
        return derive_totals(
            replace(
                record,
                allowances=replace(record.allowances, **self.allowances),
                deductions=replace(record.deductions, **self.deductions),
                overtime=replace(record.overtime, **self.overtime),
                bonus=self.bonus if self.bonus is not None else record.bonus,
            )
        )


@dataclass(frozen=True)
class PayrollSummary:
    year: int
    employee_id: Optional[int]
    total_payrolls: int
    total_earnings: Decimal
    total_deductions: Decimal
    total_net_salary: Decimal
    status_breakdown: dict[PayrollStatus, int]
