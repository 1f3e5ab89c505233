"""Currency rendering for notifications and reports."""

from __future__ import annotations

from decimal import Decimal

from workforce_payroll.calculators.types import to_money


def format_currency(amount: Decimal | int | float | str) -> str:
    """Render a USD amount, e.g. 1234.56 -> "$1,234.56", -1234.56 -> "-$1,234.56"."""
    value = to_money(Decimal(str(amount)))
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
