"""Payroll settings store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.calculators.types import (
    PayPeriodCadence,
    PayrollSettingsSnapshot,
    to_money,
)
from workforce_payroll.exceptions import ConcurrencyConflictError, ValidationError
from workforce_payroll.models import PayrollSettings

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


@dataclass
class PayrollSettingsUpdate:
    """New values for a tenant's payroll settings."""

    base_salary: Decimal
    commission_rate: Decimal
    po_commission_rate: Decimal
    pay_period: str


def _as_decimal(value: object, field: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    if result.normalize().as_tuple().exponent < -2:
        raise ValidationError(f"{field} allows at most 2 decimal places", field=field)
    return result


def validate_settings_update(update: PayrollSettingsUpdate) -> PayrollSettingsUpdate:
    """Validate and normalize a settings update. Raises ValidationError."""
    base_salary = _as_decimal(update.base_salary, "base_salary")
    if base_salary < 0:
        raise ValidationError("base_salary must be >= 0", field="base_salary")

    rates = {}
    for field in ("commission_rate", "po_commission_rate"):
        rate = _as_decimal(getattr(update, field), field)
        if rate < 0 or rate > HUNDRED:
            raise ValidationError(f"{field} must be between 0 and 100", field=field)
        rates[field] = rate

    allowed = {c.value for c in PayPeriodCadence}
    if update.pay_period not in allowed:
        raise ValidationError(
            f"pay_period must be one of {sorted(allowed)}", field="pay_period"
        )

    return PayrollSettingsUpdate(
        base_salary=to_money(base_salary),
        commission_rate=to_money(rates["commission_rate"]),
        po_commission_rate=to_money(rates["po_commission_rate"]),
        pay_period=update.pay_period,
    )


class PayrollSettingsService:
    """Reads and writes the per-tenant payroll settings row.

    Reads return a PayrollSettingsSnapshot; nothing downstream holds the
    ORM row, so later edits never alter commissions already written.
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id

    async def _load_row(self, for_update: bool = False) -> PayrollSettings | None:
        query = select(PayrollSettings).where(PayrollSettings.tenant_id == self.tenant_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def _get_or_create_row(self, for_update: bool = False) -> PayrollSettings:
        row = await self._load_row(for_update=for_update)
        if row is not None:
            return row

        row = PayrollSettings(
            tenant_id=self.tenant_id,
            base_salary=Decimal("0.00"),
            commission_rate=Decimal("0.00"),
            po_commission_rate=Decimal("0.00"),
            pay_period=PayPeriodCadence.MONTHLY.value,
        )
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConcurrencyConflictError(
                "Payroll settings were created concurrently; retry the request",
                {"tenant_id": str(self.tenant_id)},
            ) from e
        logger.info("Created default payroll settings for tenant %s", self.tenant_id)
        return row

    async def get_settings(self) -> PayrollSettingsSnapshot:
        """Current settings, creating the default row on first access.

        Only flushes; the caller's transaction decides whether the default
        row is kept.
        """
        row = await self._get_or_create_row()
        return PayrollSettingsSnapshot.from_model(row)

    async def update_settings(self, update: PayrollSettingsUpdate) -> PayrollSettingsSnapshot:
        """Validate and persist new settings."""
        clean = validate_settings_update(update)

        try:
            row = await self._get_or_create_row(for_update=True)
            row.base_salary = clean.base_salary
            row.commission_rate = clean.commission_rate
            row.po_commission_rate = clean.po_commission_rate
            row.pay_period = clean.pay_period
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Updated payroll settings for tenant %s: base=%s rate=%s po_rate=%s period=%s",
            self.tenant_id,
            clean.base_salary,
            clean.commission_rate,
            clean.po_commission_rate,
            clean.pay_period,
        )
        return PayrollSettingsSnapshot.from_model(row)
