"""Purchase order API endpoints."""

from uuid import UUID

from fastapi import APIRouter

from workforce_payroll.api.dependencies import DbSession, TenantId
from workforce_payroll.api.schemas import (
    ErrorResponse,
    PurchaseOrderItemsReplace,
    PurchaseOrderResponse,
    PurchaseOrderStatusUpdate,
)
from workforce_payroll.services import PurchaseOrderItemInput, PurchaseOrderService

router = APIRouter(prefix="/purchase-orders", tags=["purchase-orders"])


@router.get(
    "/{po_id}",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_purchase_order(
    db: DbSession,
    tenant_id: TenantId,
    po_id: UUID,
) -> PurchaseOrderResponse:
    """Get a purchase order with its items."""
    po = await PurchaseOrderService(db, tenant_id).get_purchase_order(po_id)
    return PurchaseOrderResponse.model_validate(po)


@router.put(
    "/{po_id}/items",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def replace_purchase_order_items(
    db: DbSession,
    tenant_id: TenantId,
    po_id: UUID,
    payload: PurchaseOrderItemsReplace,
) -> PurchaseOrderResponse:
    """Replace a purchase order's items and recompute its totals."""
    po = await PurchaseOrderService(db, tenant_id).replace_items(
        po_id,
        [
            PurchaseOrderItemInput(
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            for item in payload.items
        ],
    )
    return PurchaseOrderResponse.model_validate(po)


@router.post(
    "/{po_id}/status",
    response_model=PurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def set_purchase_order_status(
    db: DbSession,
    tenant_id: TenantId,
    po_id: UUID,
    payload: PurchaseOrderStatusUpdate,
) -> PurchaseOrderResponse:
    """Approve or reject a pending purchase order."""
    po = await PurchaseOrderService(db, tenant_id).set_status(po_id, payload.status)
    return PurchaseOrderResponse.model_validate(po)
