"""Tests for pay period windows."""

from datetime import date, datetime

import pytest

from workforce_payroll.calculators import PayPeriodCadence, calculate_payroll_period


class TestCalculatePayrollPeriod:
    """Test window boundaries for each cadence."""

    def test_weekly(self):
        """Weekly windows run seven days from the 1st."""
        period = calculate_payroll_period("1 week", datetime(2024, 1, 15))

        assert period.start == datetime(2024, 1, 1)
        assert period.end == datetime(2024, 1, 8)

    def test_biweekly(self):
        """Bi-weekly windows run fourteen days from the 1st."""
        period = calculate_payroll_period("2 weeks", datetime(2024, 1, 15))

        assert period.start == datetime(2024, 1, 1)
        assert period.end == datetime(2024, 1, 15)

    def test_monthly(self):
        """Monthly windows name the last day as their end."""
        period = calculate_payroll_period("1 month", datetime(2024, 1, 15))

        assert period.start == datetime(2024, 1, 1)
        assert period.end == datetime(2024, 1, 31)

    def test_leap_february(self):
        """February in a leap year ends on the 29th."""
        period = calculate_payroll_period(PayPeriodCadence.MONTHLY, date(2024, 2, 10))

        assert period.end == datetime(2024, 2, 29)

    def test_unknown_cadence_is_monthly(self):
        """Unrecognized cadences fall back to monthly."""
        period = calculate_payroll_period("fortnightly-ish", datetime(2023, 4, 20))

        assert period.start == datetime(2023, 4, 1)
        assert period.end == datetime(2023, 4, 30)

    @pytest.mark.parametrize("day", [1, 15, 28])
    def test_always_anchored_to_first(self, day):
        """The start never moves with the reference day."""
        period = calculate_payroll_period("1 week", datetime(2024, 3, day, 17, 45))

        assert period.start == datetime(2024, 3, 1)

    def test_window_is_half_open(self):
        """The end instant is outside the window."""
        period = calculate_payroll_period("1 week", datetime(2024, 1, 3))

        assert period.contains(datetime(2024, 1, 1))
        assert period.contains(datetime(2024, 1, 7, 23, 59))
        assert not period.contains(datetime(2024, 1, 8))

    def test_monthly_window_covers_whole_last_day(self):
        """Activity any time on the last day belongs to the month."""
        period = calculate_payroll_period("1 month", datetime(2024, 1, 31, 9, 0))

        assert period.end == datetime(2024, 1, 31)
        assert period.cutoff == datetime(2024, 2, 1)
        assert period.contains(datetime(2024, 1, 31, 9, 0))
        assert period.contains(datetime(2024, 1, 31, 23, 59, 59))
        assert not period.contains(datetime(2024, 2, 1))

    def test_weekly_cutoff_is_end(self):
        """Week windows stop at the end instant itself."""
        period = calculate_payroll_period("2 weeks", datetime(2024, 1, 3))

        assert period.cutoff == period.end
