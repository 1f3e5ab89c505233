"""Commission API endpoints."""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Query

from workforce_payroll.api.dependencies import DbSession, TenantId
from workforce_payroll.api.schemas import (
    CommissionListResponse,
    CommissionResponse,
    CommissionSummaryResponse,
    CommissionTypeSummaryResponse,
    ErrorResponse,
    PurchaseOrderCommissionSummaryResponse,
)
from workforce_payroll.services import CommissionService

router = APIRouter(prefix="/commissions", tags=["commissions"])


@router.get(
    "/employees/{employee_id}/summary",
    response_model=CommissionSummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_commission_summary(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: UUID,
) -> CommissionSummaryResponse:
    """Commission totals for an employee, overall, per type, and for purchase orders."""
    summary = await CommissionService(db, tenant_id).get_commission_summary(employee_id)
    po = summary.purchase_orders
    return CommissionSummaryResponse(
        employee_id=summary.employee_id,
        total_commission=summary.total_commission,
        commission_count=summary.commission_count,
        average_commission=summary.average_commission,
        by_type={
            name: CommissionTypeSummaryResponse(
                count=bucket.count, total=bucket.total, average=bucket.average
            )
            for name, bucket in summary.by_type.items()
        },
        purchase_orders=PurchaseOrderCommissionSummaryResponse(
            total_po_amount=po.total_po_amount,
            total_po_commission=po.total_po_commission,
            completed_pos=po.completed_pos,
            average_commission=po.average_commission,
        ),
    )


@router.get(
    "/employees/{employee_id}",
    response_model=CommissionListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_commissions(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: UUID,
    commission_type: Annotated[
        Literal["task_completion", "po_completion"] | None, Query()
    ] = None,
) -> CommissionListResponse:
    """List an employee's commission records, newest first."""
    records = await CommissionService(db, tenant_id).list_commissions(
        employee_id, commission_type
    )
    return CommissionListResponse(
        items=[CommissionResponse.model_validate(r) for r in records],
        total=len(records),
    )
