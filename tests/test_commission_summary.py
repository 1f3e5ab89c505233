"""Tests for commission listings and summaries."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from workforce_payroll.exceptions import NotFoundError, ValidationError
from workforce_payroll.services import (
    CommissionService,
    PurchaseOrderInput,
    PurchaseOrderItemInput,
    TaskInput,
    TaskService,
)


def order(number: str, amount: str) -> PurchaseOrderInput:
    return PurchaseOrderInput(
        order_number=number,
        vendor="Acme Supply",
        items=[PurchaseOrderItemInput("Goods", 1, Decimal(amount))],
    )


async def complete(session, tenant_id, employee, title, completed_at, po=None):
    service = TaskService(session, tenant_id)
    task = await service.create_task(
        TaskInput(title=title, assigned_to=employee.employee_id, purchase_order=po)
    )
    return await service.complete_task(task.task_id, completed_at=completed_at)


class TestCommissionSummary:
    """Test the per-employee summary."""

    async def test_totals_and_averages(self, session, tenant_id, employee, payroll_settings):
        """Summary splits by type and reports the purchase order block."""
        await complete(session, tenant_id, employee, "Plain", datetime(2024, 1, 5))
        await complete(session, tenant_id, employee, "PO one", datetime(2024, 1, 6), order("PO-1", "10000"))
        await complete(session, tenant_id, employee, "PO two", datetime(2024, 1, 7), order("PO-2", "5000"))

        summary = await CommissionService(session, tenant_id).get_commission_summary(
            employee.employee_id
        )

        # 100 + (100 + 100) + (100 + 50)
        assert summary.total_commission == Decimal("450.00")
        assert summary.commission_count == 3
        assert summary.average_commission == Decimal("150.00")

        assert summary.by_type["task_completion"].count == 1
        assert summary.by_type["task_completion"].total == Decimal("100.00")
        assert summary.by_type["po_completion"].count == 2
        assert summary.by_type["po_completion"].total == Decimal("350.00")
        assert summary.by_type["po_completion"].average == Decimal("175.00")

        assert summary.purchase_orders.completed_pos == 2
        assert summary.purchase_orders.total_po_amount == Decimal("15000.00")
        assert summary.purchase_orders.total_po_commission == Decimal("350.00")
        assert summary.purchase_orders.average_commission == Decimal("175.00")

    async def test_empty(self, session, tenant_id, employee):
        """An employee with no commissions has zero everywhere."""
        summary = await CommissionService(session, tenant_id).get_commission_summary(
            employee.employee_id
        )

        assert summary.total_commission == Decimal("0")
        assert summary.average_commission == Decimal("0")
        assert summary.by_type["po_completion"].count == 0
        assert summary.purchase_orders.average_commission == Decimal("0")

    async def test_unknown_employee(self, session, tenant_id):
        with pytest.raises(NotFoundError):
            await CommissionService(session, tenant_id).get_commission_summary(uuid4())


class TestListCommissions:
    """Test listing an employee's commission records."""

    async def test_newest_first_and_filter(self, session, tenant_id, employee, payroll_settings):
        await complete(session, tenant_id, employee, "Older", datetime(2024, 1, 5))
        await complete(session, tenant_id, employee, "Newer", datetime(2024, 1, 9), order("PO-9", "100"))
        service = CommissionService(session, tenant_id)

        records = await service.list_commissions(employee.employee_id)
        assert [r.created_at for r in records] == [datetime(2024, 1, 9), datetime(2024, 1, 5)]

        po_only = await service.list_commissions(employee.employee_id, "po_completion")
        assert len(po_only) == 1
        assert po_only[0].amount == Decimal("101.00")

    async def test_unknown_type(self, session, tenant_id, employee):
        with pytest.raises(ValidationError):
            await CommissionService(session, tenant_id).list_commissions(
                employee.employee_id, "bonus"
            )
