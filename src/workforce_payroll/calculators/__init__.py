"""Commission and pay period calculations."""

from workforce_payroll.calculators.commission import (
    calculate_commission,
    calculate_commission_breakdown,
    commission_type_for,
)
from workforce_payroll.calculators.formatting import format_currency
from workforce_payroll.calculators.period import calculate_payroll_period
from workforce_payroll.calculators.types import (
    CommissionBreakdown,
    CommissionType,
    PayPeriodCadence,
    PayrollPeriod,
    PayrollSettingsSnapshot,
    to_money,
)

__all__ = [
    "calculate_commission",
    "calculate_commission_breakdown",
    "commission_type_for",
    "calculate_payroll_period",
    "format_currency",
    "CommissionBreakdown",
    "CommissionType",
    "PayPeriodCadence",
    "PayrollPeriod",
    "PayrollSettingsSnapshot",
    "to_money",
]
