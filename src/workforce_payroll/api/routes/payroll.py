"""Payroll settings and payroll record API endpoints."""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Query

from workforce_payroll.api.dependencies import DbSession, Emitter, TenantId
from workforce_payroll.api.schemas import (
    ErrorResponse,
    PayrollListResponse,
    PayrollResponse,
    PayrollSettingsRequest,
    PayrollSettingsResponse,
    PayrollStatsResponse,
    PayrollStatusUpdate,
    ProcessPayrollRequest,
)
from workforce_payroll.services import (
    PayrollRecordManager,
    PayrollSettingsService,
    PayrollSettingsUpdate,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


# ============================================================================
# Settings
# ============================================================================


@router.get("/settings", response_model=PayrollSettingsResponse)
async def get_payroll_settings(
    db: DbSession,
    tenant_id: TenantId,
) -> PayrollSettingsResponse:
    """Current payroll settings; defaults are created on first read."""
    snapshot = await PayrollSettingsService(db, tenant_id).get_settings()
    await db.commit()
    return PayrollSettingsResponse.model_validate(snapshot)


@router.put(
    "/settings",
    response_model=PayrollSettingsResponse,
    responses={422: {"model": ErrorResponse}},
)
async def update_payroll_settings(
    db: DbSession,
    tenant_id: TenantId,
    payload: PayrollSettingsRequest,
) -> PayrollSettingsResponse:
    """Replace the tenant's payroll settings."""
    snapshot = await PayrollSettingsService(db, tenant_id).update_settings(
        PayrollSettingsUpdate(
            base_salary=payload.base_salary,
            commission_rate=payload.commission_rate,
            po_commission_rate=payload.po_commission_rate,
            pay_period=payload.pay_period,
        )
    )
    return PayrollSettingsResponse.model_validate(snapshot)


# ============================================================================
# Payroll records
# ============================================================================


@router.post(
    "/employees/{employee_id}/process",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def process_payroll_period(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: UUID,
    payload: ProcessPayrollRequest | None = None,
) -> PayrollResponse:
    """Aggregate the employee's commissions into the current period's payroll."""
    settings = await PayrollSettingsService(db, tenant_id).get_settings()
    payroll = await PayrollRecordManager(db, tenant_id).process_period(
        employee_id,
        settings,
        as_of=payload.as_of if payload else None,
    )
    return PayrollResponse.model_validate(payroll)


@router.get(
    "/employees/{employee_id}",
    response_model=PayrollListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_employee_payrolls(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: UUID,
) -> PayrollListResponse:
    """List an employee's payroll records, latest period first."""
    payrolls = await PayrollRecordManager(db, tenant_id).list_payrolls(employee_id)
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(p) for p in payrolls],
        total=len(payrolls),
    )


@router.get("/records", response_model=PayrollListResponse)
async def list_payroll_records(
    db: DbSession,
    tenant_id: TenantId,
    status: Annotated[Literal["pending", "processed", "paid"] | None, Query()] = None,
) -> PayrollListResponse:
    """List every payroll record in the tenant, optionally by status."""
    payrolls = await PayrollRecordManager(db, tenant_id).list_all_payrolls(status)
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(p) for p in payrolls],
        total=len(payrolls),
    )


@router.get(
    "/employees/{employee_id}/stats",
    response_model=PayrollStatsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee_payroll_stats(
    db: DbSession,
    tenant_id: TenantId,
    employee_id: UUID,
) -> PayrollStatsResponse:
    """Lifetime commission, completed task and unpaid payroll totals."""
    stats = await PayrollRecordManager(db, tenant_id).get_payroll_stats(employee_id)
    return PayrollStatsResponse.model_validate(stats)


@router.get(
    "/{payroll_id}",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(
    db: DbSession,
    tenant_id: TenantId,
    payroll_id: UUID,
) -> PayrollResponse:
    """Get a payroll record."""
    payroll = await PayrollRecordManager(db, tenant_id).get_payroll(payroll_id)
    return PayrollResponse.model_validate(payroll)


@router.post(
    "/{payroll_id}/status",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def advance_payroll_status(
    db: DbSession,
    tenant_id: TenantId,
    emitter: Emitter,
    payroll_id: UUID,
    payload: PayrollStatusUpdate,
) -> PayrollResponse:
    """Move a payroll record to processed or paid."""
    payroll = await PayrollRecordManager(db, tenant_id, emitter).advance_status(
        payroll_id, payload.status, paid_at=payload.paid_at
    )
    return PayrollResponse.model_validate(payroll)
