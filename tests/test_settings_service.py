"""Tests for the payroll settings store."""

from decimal import Decimal
from uuid import uuid4

import pytest

from workforce_payroll.calculators import PayPeriodCadence
from workforce_payroll.exceptions import ValidationError
from workforce_payroll.services import PayrollSettingsService, PayrollSettingsUpdate


def update(**overrides) -> PayrollSettingsUpdate:
    values = {
        "base_salary": Decimal("4000"),
        "commission_rate": Decimal("5"),
        "po_commission_rate": Decimal("2.5"),
        "pay_period": "2 weeks",
    }
    values.update(overrides)
    return PayrollSettingsUpdate(**values)


class TestPayrollSettingsService:
    """Test reading and writing settings."""

    async def test_defaults_on_first_read(self, session, tenant_id):
        """A tenant without settings gets zero rates and a monthly period."""
        snapshot = await PayrollSettingsService(session, tenant_id).get_settings()

        assert snapshot.base_salary == Decimal("0")
        assert snapshot.commission_rate == Decimal("0")
        assert snapshot.po_commission_rate == Decimal("0")
        assert snapshot.cadence == PayPeriodCadence.MONTHLY

    async def test_update_round_trip(self, session, tenant_id):
        service = PayrollSettingsService(session, tenant_id)

        saved = await service.update_settings(update())
        loaded = await service.get_settings()

        assert saved == loaded
        assert loaded.po_commission_rate == Decimal("2.50")
        assert loaded.cadence == PayPeriodCadence.BIWEEKLY

    async def test_tenants_are_isolated(self, session, tenant_id):
        """Settings are stored per tenant."""
        await PayrollSettingsService(session, tenant_id).update_settings(update())
        other = await PayrollSettingsService(session, uuid4()).get_settings()

        assert other.base_salary == Decimal("0")

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"base_salary": Decimal("-1")}, "base_salary"),
            ({"commission_rate": Decimal("100.01")}, "commission_rate"),
            ({"po_commission_rate": Decimal("-0.5")}, "po_commission_rate"),
            ({"pay_period": "1 year"}, "pay_period"),
            ({"commission_rate": "abc"}, "commission_rate"),
            ({"commission_rate": Decimal("2.555")}, "commission_rate"),
            ({"po_commission_rate": Decimal("0.125")}, "po_commission_rate"),
            ({"base_salary": Decimal("4000.001")}, "base_salary"),
        ],
    )
    async def test_rejects_invalid_values(self, session, tenant_id, overrides, field):
        service = PayrollSettingsService(session, tenant_id)

        with pytest.raises(ValidationError) as exc_info:
            await service.update_settings(update(**overrides))
        assert exc_info.value.field == field

    async def test_fractional_cents_leave_stored_settings_alone(self, session, tenant_id):
        """A rejected update is not rounded and saved."""
        service = PayrollSettingsService(session, tenant_id)
        await service.update_settings(update())

        with pytest.raises(ValidationError):
            await service.update_settings(update(commission_rate=Decimal("2.555")))

        assert (await service.get_settings()).commission_rate == Decimal("5.00")

    async def test_trailing_zeros_accepted(self, session, tenant_id):
        saved = await PayrollSettingsService(session, tenant_id).update_settings(
            update(commission_rate=Decimal("2.500"))
        )

        assert saved.commission_rate == Decimal("2.50")

    async def test_snapshot_is_frozen(self, session, tenant_id):
        """Later edits do not change a snapshot already handed out."""
        service = PayrollSettingsService(session, tenant_id)
        before = await service.update_settings(update())

        await service.update_settings(update(commission_rate=Decimal("9")))

        assert before.commission_rate == Decimal("5.00")
