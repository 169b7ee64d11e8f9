from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import Allowances, Deductions


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll components)."""

    @abstractmethod
    def allowances(self, earned_basic: Decimal) -> Allowances:
        raise NotImplementedError

    @abstractmethod
    def deductions(self, earned_basic: Decimal) -> Deductions:
        raise NotImplementedError
