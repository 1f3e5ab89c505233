"""Purchase order service - builds, edits, and approves purchase orders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.calculators.types import to_money
from workforce_payroll.exceptions import NotFoundError, ValidationError
from workforce_payroll.models import PurchaseOrder, PurchaseOrderItem
from workforce_payroll.services.state_machine import (
    PurchaseOrderStateMachine,
    PurchaseOrderStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class PurchaseOrderItemInput:
    description: str
    quantity: int
    unit_price: Decimal


@dataclass
class PurchaseOrderInput:
    order_number: str
    vendor: str
    items: list[PurchaseOrderItemInput] = field(default_factory=list)
    notes: str | None = None


def build_items(items: list[PurchaseOrderItemInput]) -> list[PurchaseOrderItem]:
    """Validate item inputs and turn them into numbered, priced rows."""
    if not items:
        raise ValidationError("A purchase order needs at least one item", field="items")

    rows = []
    for line_number, item in enumerate(items, start=1):
        if not item.description or not item.description.strip():
            raise ValidationError(
                f"Item {line_number} needs a description", field="description"
            )
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int):
            raise ValidationError(
                f"Item {line_number} quantity must be a whole number", field="quantity"
            )
        if item.quantity < 1:
            raise ValidationError(
                f"Item {line_number} quantity must be at least 1", field="quantity"
            )
        try:
            unit_price = Decimal(str(item.unit_price))
        except (InvalidOperation, ValueError):
            raise ValidationError(
                f"Item {line_number} unit price must be a number", field="unit_price"
            )
        if not unit_price.is_finite() or unit_price < 0:
            raise ValidationError(
                f"Item {line_number} unit price must be >= 0", field="unit_price"
            )

        row = PurchaseOrderItem(
            line_number=line_number,
            description=item.description.strip(),
            quantity=item.quantity,
            unit_price=to_money(unit_price),
        )
        row.total_price = row.compute_total()
        rows.append(row)
    return rows


class PurchaseOrderService:
    """Service for purchase orders attached to tasks.

    Operations:
    - build_purchase_order: Validate input and assemble an unsaved order
    - replace_items: Swap an order's items and recompute its totals
    - set_status: Approve or reject a pending order
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID):
        self.session = session
        self.tenant_id = tenant_id

    async def get_purchase_order(self, po_id: UUID, for_update: bool = False) -> PurchaseOrder:
        """Load a purchase order with its items. Raises NotFoundError."""
        query = select(PurchaseOrder).where(
            PurchaseOrder.po_id == po_id,
            PurchaseOrder.tenant_id == self.tenant_id,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        po = result.scalar_one_or_none()
        if po is None:
            raise NotFoundError("PurchaseOrder", po_id)
        return po

    async def order_number_taken(self, order_number: str) -> bool:
        result = await self.session.execute(
            select(PurchaseOrder.po_id).where(
                PurchaseOrder.tenant_id == self.tenant_id,
                PurchaseOrder.order_number == order_number,
            )
        )
        return result.first() is not None

    async def build_purchase_order(self, po_input: PurchaseOrderInput) -> PurchaseOrder:
        """Validate input and return a new, unsaved PurchaseOrder.

        The caller attaches it to a task and commits.
        """
        order_number = (po_input.order_number or "").strip()
        vendor = (po_input.vendor or "").strip()
        if not order_number:
            raise ValidationError("order_number is required", field="order_number")
        if not vendor:
            raise ValidationError("vendor is required", field="vendor")
        if await self.order_number_taken(order_number):
            raise ValidationError(
                f"Order number {order_number} already exists", field="order_number"
            )

        po = PurchaseOrder(
            tenant_id=self.tenant_id,
            order_number=order_number,
            vendor=vendor,
            notes=po_input.notes,
            status=PurchaseOrderStatus.PENDING.value,
            items=build_items(po_input.items),
        )
        po.recalculate_totals()
        return po

    async def replace_items(
        self, po_id: UUID, items: list[PurchaseOrderItemInput]
    ) -> PurchaseOrder:
        """Replace every item on an order and recompute the totals."""
        new_items = build_items(items)
        po = await self.get_purchase_order(po_id, for_update=True)

        try:
            po.items.clear()
            po.items.extend(new_items)
            po.recalculate_totals()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Replaced items on purchase order %s: %d items, total %s",
            po.order_number,
            len(new_items),
            po.total_amount,
        )
        return po

    async def set_status(self, po_id: UUID, status: str) -> PurchaseOrder:
        """Approve or reject a pending purchase order.

        Raises InvalidTransitionError for anything other than a move out of
        pending. Does not touch the linked task or any commission.
        """
        if status not in {s.value for s in PurchaseOrderStatus}:
            raise ValidationError(f"Unknown purchase order status '{status}'", field="status")

        po = await self.get_purchase_order(po_id, for_update=True)
        from_status = po.status
        PurchaseOrderStateMachine.validate_transition(from_status, status)

        try:
            po.status = status
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Purchase order %s moved %s -> %s", po.order_number, from_status, status
        )
        return po
