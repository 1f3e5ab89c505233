"""Commission calculation for completed tasks."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from workforce_payroll.calculators.types import (
    CommissionBreakdown,
    CommissionType,
    PayrollSettingsSnapshot,
    to_money,
)

if TYPE_CHECKING:
    from workforce_payroll.models import Task

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def commission_type_for(task: Task) -> CommissionType:
    """PO-linked tasks earn a po_completion commission, all others task_completion."""
    if task.purchase_order is not None:
        return CommissionType.PO_COMPLETION
    return CommissionType.TASK_COMPLETION


def calculate_commission_breakdown(
    task: Task, settings: PayrollSettingsSnapshot
) -> CommissionBreakdown:
    """Split a task's commission into its flat and purchase-order parts.

    Incomplete tasks earn nothing. A completed task earns
    commission_rate% of the base salary, plus po_commission_rate% of the
    attached purchase order's total. Purchase order approval status is not
    consulted.
    """
    commission_type = commission_type_for(task)
    if task.status != "completed":
        return CommissionBreakdown(ZERO, ZERO, commission_type)

    base_component = to_money(
        Decimal(settings.commission_rate) / HUNDRED * Decimal(settings.base_salary)
    )

    po_component = ZERO
    if task.purchase_order is not None:
        po_component = to_money(
            Decimal(settings.po_commission_rate)
            / HUNDRED
            * Decimal(task.purchase_order.total_amount)
        )

    return CommissionBreakdown(base_component, po_component, commission_type)


def calculate_commission(task: Task, settings: PayrollSettingsSnapshot) -> Decimal:
    """Commission earned by a task under the given settings."""
    return calculate_commission_breakdown(task, settings).amount
