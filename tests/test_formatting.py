"""Tests for currency formatting."""

from decimal import Decimal

from workforce_payroll.calculators import format_currency


class TestFormatCurrency:
    """Test USD rendering."""

    def test_positive(self):
        assert format_currency(1234.56) == "$1,234.56"

    def test_negative(self):
        assert format_currency(-1234.56) == "-$1,234.56"

    def test_zero(self):
        assert format_currency(Decimal("0")) == "$0.00"

    def test_rounds_to_cents(self):
        """Amounts are rounded half up to cents."""
        assert format_currency(Decimal("10.005")) == "$10.01"
        assert format_currency("1000000") == "$1,000,000.00"
