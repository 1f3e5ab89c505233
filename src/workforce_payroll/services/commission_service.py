"""Commission ledger reads and per-employee summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.calculators import (
    CommissionType,
    PayrollPeriod,
    calculate_payroll_period,
    to_money,
)
from workforce_payroll.exceptions import NotFoundError, ValidationError
from workforce_payroll.models import CommissionRecord, Employee, PurchaseOrder

ZERO = Decimal("0.00")


def _average(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return to_money(total / count)


@dataclass
class CommissionTypeSummary:
    count: int = 0
    total: Decimal = ZERO

    @property
    def average(self) -> Decimal:
        return _average(self.total, self.count)


@dataclass
class PurchaseOrderCommissionSummary:
    total_po_amount: Decimal = ZERO
    total_po_commission: Decimal = ZERO
    completed_pos: int = 0

    @property
    def average_commission(self) -> Decimal:
        return _average(self.total_po_commission, self.completed_pos)


@dataclass
class CommissionSummary:
    """Totals over every commission an employee has earned."""

    employee_id: UUID
    total_commission: Decimal = ZERO
    commission_count: int = 0
    by_type: dict[str, CommissionTypeSummary] = field(default_factory=dict)
    purchase_orders: PurchaseOrderCommissionSummary = field(
        default_factory=PurchaseOrderCommissionSummary
    )

    @property
    def average_commission(self) -> Decimal:
        return _average(self.total_commission, self.commission_count)


class CommissionService:
    """Read-only projections over the commission ledger."""

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id

    async def _require_employee(self, employee_id: UUID) -> Employee:
        result = await self.session.execute(
            select(Employee).where(
                Employee.employee_id == employee_id,
                Employee.tenant_id == self.tenant_id,
            )
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def list_commissions(
        self,
        employee_id: UUID,
        commission_type: str | None = None,
    ) -> list[CommissionRecord]:
        """Commission records for an employee, newest first."""
        await self._require_employee(employee_id)

        query = select(CommissionRecord).where(
            CommissionRecord.tenant_id == self.tenant_id,
            CommissionRecord.employee_id == employee_id,
        )
        if commission_type is not None:
            if commission_type not in {t.value for t in CommissionType}:
                raise ValidationError(
                    f"Unknown commission type '{commission_type}'",
                    field="commission_type",
                )
            query = query.where(CommissionRecord.commission_type == commission_type)

        result = await self.session.execute(
            query.order_by(CommissionRecord.created_at.desc())
        )
        return list(result.scalars().all())

    async def period_total(
        self,
        employee_id: UUID,
        pay_period: str,
        as_of: datetime | None = None,
    ) -> Decimal:
        """Sum of the employee's commissions created inside the current period.

        Counts every record in the window, claimed or not.
        """
        period: PayrollPeriod = calculate_payroll_period(pay_period, as_of or datetime.now())
        result = await self.session.execute(
            select(CommissionRecord.amount).where(
                CommissionRecord.tenant_id == self.tenant_id,
                CommissionRecord.employee_id == employee_id,
                CommissionRecord.created_at >= period.start,
                CommissionRecord.created_at < period.cutoff,
            )
        )
        return to_money(sum(result.scalars().all(), ZERO))

    async def get_commission_summary(self, employee_id: UUID) -> CommissionSummary:
        """Overall, per-type, and purchase order totals for one employee."""
        await self._require_employee(employee_id)

        result = await self.session.execute(
            select(
                CommissionRecord.commission_type,
                CommissionRecord.amount,
                PurchaseOrder.total_amount,
            )
            .outerjoin(PurchaseOrder, PurchaseOrder.task_id == CommissionRecord.task_id)
            .where(
                CommissionRecord.tenant_id == self.tenant_id,
                CommissionRecord.employee_id == employee_id,
            )
        )

        summary = CommissionSummary(
            employee_id=employee_id,
            by_type={t.value: CommissionTypeSummary() for t in CommissionType},
        )
        for commission_type, amount, po_total in result.all():
            amount = Decimal(amount)
            summary.total_commission += amount
            summary.commission_count += 1

            bucket = summary.by_type.setdefault(commission_type, CommissionTypeSummary())
            bucket.count += 1
            bucket.total += amount

            if commission_type == CommissionType.PO_COMPLETION.value and po_total is not None:
                summary.purchase_orders.completed_pos += 1
                summary.purchase_orders.total_po_amount += Decimal(po_total)
                summary.purchase_orders.total_po_commission += amount

        return summary
