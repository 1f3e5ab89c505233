"""Type definitions for the commission and payroll calculations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from workforce_payroll.models import PayrollSettings

CENTS = Decimal("0.01")


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize to cents, half up."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


class CommissionType(str, Enum):
    """Commission ledger entry classification."""

    TASK_COMPLETION = "task_completion"
    PO_COMPLETION = "po_completion"


class PayPeriodCadence(str, Enum):
    """Configured pay period lengths."""

    WEEKLY = "1 week"
    BIWEEKLY = "2 weeks"
    MONTHLY = "1 month"

    @classmethod
    def parse(cls, value: str) -> PayPeriodCadence:
        """Map a configured value to a cadence. Unknown values are monthly."""
        try:
            return cls(value)
        except ValueError:
            return cls.MONTHLY


@dataclass(frozen=True)
class PayrollPeriod:
    """A pay period window.

    When `end_inclusive` is set, `end` names the final calendar day and the
    window runs through the end of that day.
    """

    start: datetime
    end: datetime
    end_inclusive: bool = False

    @property
    def cutoff(self) -> datetime:
        """Exclusive upper bound for timestamps inside the window."""
        if self.end_inclusive:
            return self.end + timedelta(days=1)
        return self.end

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.cutoff


@dataclass(frozen=True)
class PayrollSettingsSnapshot:
    """Immutable copy of the tenant's payroll settings.

    Computations take this instead of the ORM row so a concurrent settings
    edit cannot change a calculation that is already in flight.
    """

    base_salary: Decimal
    commission_rate: Decimal  # percent, 0-100
    po_commission_rate: Decimal  # percent, 0-100
    pay_period: str

    @property
    def cadence(self) -> PayPeriodCadence:
        return PayPeriodCadence.parse(self.pay_period)

    @classmethod
    def from_model(cls, row: PayrollSettings) -> PayrollSettingsSnapshot:
        return cls(
            base_salary=Decimal(row.base_salary),
            commission_rate=Decimal(row.commission_rate),
            po_commission_rate=Decimal(row.po_commission_rate),
            pay_period=row.pay_period,
        )


@dataclass(frozen=True)
class CommissionBreakdown:
    """Components of a single task's commission."""

    base_component: Decimal
    po_component: Decimal
    commission_type: CommissionType

    @property
    def amount(self) -> Decimal:
        return self.base_component + self.po_component
