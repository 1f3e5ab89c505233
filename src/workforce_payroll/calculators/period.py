"""Pay period window calculation."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from workforce_payroll.calculators.types import PayPeriodCadence, PayrollPeriod


def calculate_payroll_period(
    cadence: str | PayPeriodCadence,
    reference_date: date | datetime,
) -> PayrollPeriod:
    """Return the pay period window containing `reference_date`.

    Every window starts on the 1st of the reference month at local midnight,
    wherever the reference date falls in the month:

    - "1 week":  start + 7 days
    - "2 weeks": start + 14 days
    - "1 month" (and any unrecognized value): the last day of the month,
      inclusive of that whole day

    Weekly windows do not roll forward through the month.
    """
    start = datetime(reference_date.year, reference_date.month, 1)

    resolved = cadence if isinstance(cadence, PayPeriodCadence) else PayPeriodCadence.parse(cadence)
    if resolved == PayPeriodCadence.WEEKLY:
        end = start + timedelta(days=7)
    elif resolved == PayPeriodCadence.BIWEEKLY:
        end = start + timedelta(days=14)
    else:
        last_day = calendar.monthrange(start.year, start.month)[1]
        return PayrollPeriod(start=start, end=start.replace(day=last_day), end_inclusive=True)

    return PayrollPeriod(start=start, end=end)
