from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Mapping, Optional

from ...common.money import ZERO, round2, to_decimal
from ...core.constants import (
    DEFAULT_HRA_RATE,
    DEFAULT_INSURANCE_DEDUCTION,
    DEFAULT_MEDICAL_ALLOWANCE,
    DEFAULT_PF_RATE,
    DEFAULT_TAX_RATE,
    DEFAULT_TRANSPORT_ALLOWANCE,
)
from ..model import Allowances, Deductions
from .base import PayrollCalculator


@dataclass(frozen=True)
class PayrollSchedule:
    """Rates are fractions of earned basic; the rest are flat monthly amounts."""

    hra_rate: Decimal = DEFAULT_HRA_RATE
    transport: Decimal = DEFAULT_TRANSPORT_ALLOWANCE
    medical: Decimal = DEFAULT_MEDICAL_ALLOWANCE
    other_allowance: Decimal = ZERO
    tax_rate: Decimal = DEFAULT_TAX_RATE
    pf_rate: Decimal = DEFAULT_PF_RATE
    insurance: Decimal = DEFAULT_INSURANCE_DEDUCTION
    other_deduction: Decimal = ZERO

    @classmethod
    def from_mapping(cls, data: Optional[Mapping]) -> "PayrollSchedule":
        known = {f.name for f in fields(cls)}
        return cls(**{k: to_decimal(v) for k, v in (data or {}).items() if k in known})


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: percentage HRA/tax/PF of earned basic plus flat amounts."""

    def __init__(self, schedule: PayrollSchedule | None = None):
        self._schedule = schedule or PayrollSchedule()

    def allowances(self, earned_basic: Decimal) -> Allowances:
        s = self._schedule
        return Allowances(
            hra=round2(earned_basic * s.hra_rate),
            transport=round2(s.transport),
            medical=round2(s.medical),
            other=round2(s.other_allowance),
        )

    def deductions(self, earned_basic: Decimal) -> Deductions:
        s = self._schedule
        return Deductions(
            tax=round2(earned_basic * s.tax_rate),
            pf=round2(earned_basic * s.pf_rate),
            insurance=round2(s.insurance),
            other=round2(s.other_deduction),
        )
