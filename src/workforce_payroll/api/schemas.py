"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Purchase order schemas
# ============================================================================


class PurchaseOrderItemCreate(BaseModel):
    """Schema for one purchase order line."""

    description: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)


class PurchaseOrderCreate(BaseModel):
    """Schema for a purchase order created together with its task."""

    order_number: str = Field(min_length=1)
    vendor: str = Field(min_length=1)
    notes: str | None = None
    items: list[PurchaseOrderItemCreate] = Field(min_length=1)


class PurchaseOrderItemsReplace(BaseModel):
    """Schema for replacing every item on a purchase order."""

    items: list[PurchaseOrderItemCreate] = Field(min_length=1)


class PurchaseOrderStatusUpdate(BaseModel):
    """Schema for approving or rejecting a purchase order."""

    status: Literal["approved", "rejected"]


class PurchaseOrderItemResponse(BaseModel):
    """Schema for purchase order item response."""

    model_config = ConfigDict(from_attributes=True)

    item_id: UUID
    line_number: int
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class PurchaseOrderResponse(BaseModel):
    """Schema for purchase order response."""

    model_config = ConfigDict(from_attributes=True)

    po_id: UUID
    task_id: UUID
    order_number: str
    vendor: str
    notes: str | None = None
    total_amount: Decimal
    status: str
    items: list[PurchaseOrderItemResponse]
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Task schemas
# ============================================================================


class TaskCreate(BaseModel):
    """Schema for creating a task."""

    title: str = Field(min_length=1)
    assigned_to: UUID
    description: str = ""
    priority: Literal["low", "medium", "high"] = "medium"
    due_date: date | None = None
    assigned_by: UUID | None = None
    purchase_order: PurchaseOrderCreate | None = None


class TaskStatusUpdate(BaseModel):
    """Schema for a task status change."""

    status: Literal["pending", "in_progress", "completed"]


class TaskEmployeeResponseUpdate(BaseModel):
    """Schema for the employee's answer to a task's purchase order."""

    employee_response: Literal["accepted", "rejected"]
    response_notes: str | None = None


class TaskResponse(BaseModel):
    """Schema for task response."""

    model_config = ConfigDict(from_attributes=True)

    task_id: UUID
    tenant_id: UUID
    title: str
    description: str
    status: str
    priority: str
    due_date: date | None = None
    assigned_to: UUID
    assigned_by: UUID | None = None
    employee_response: str | None = None
    response_notes: str | None = None
    completed_at: datetime | None = None
    purchase_order: PurchaseOrderResponse | None = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Commission schemas
# ============================================================================


class CommissionResponse(BaseModel):
    """Schema for commission record response."""

    model_config = ConfigDict(from_attributes=True)

    commission_id: UUID
    employee_id: UUID
    task_id: UUID
    payroll_id: UUID | None = None
    amount: Decimal
    commission_type: str
    created_at: datetime


class CommissionListResponse(BaseModel):
    """Schema for listing an employee's commissions."""

    items: list[CommissionResponse]
    total: int


class TaskCompletionResponse(BaseModel):
    """Schema for a completed task and the commission it earned."""

    task: TaskResponse
    commission: CommissionResponse
    period_total: Decimal | None = None


class TaskStatusResponse(BaseModel):
    """Schema for a status change; commission is set only on completion."""

    task: TaskResponse
    commission: CommissionResponse | None = None
    period_total: Decimal | None = None


class CommissionTypeSummaryResponse(BaseModel):
    """Per-type commission totals."""

    count: int
    total: Decimal
    average: Decimal


class PurchaseOrderCommissionSummaryResponse(BaseModel):
    """Totals over commissions earned on purchase order tasks."""

    total_po_amount: Decimal
    total_po_commission: Decimal
    completed_pos: int
    average_commission: Decimal


class CommissionSummaryResponse(BaseModel):
    """Schema for an employee's commission summary."""

    employee_id: UUID
    total_commission: Decimal
    commission_count: int
    average_commission: Decimal
    by_type: dict[str, CommissionTypeSummaryResponse]
    purchase_orders: PurchaseOrderCommissionSummaryResponse


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollSettingsRequest(BaseModel):
    """Schema for updating payroll settings."""

    base_salary: Decimal = Field(ge=0, decimal_places=2)
    commission_rate: Decimal = Field(ge=0, le=100, decimal_places=2)
    po_commission_rate: Decimal = Field(ge=0, le=100, decimal_places=2)
    pay_period: Literal["1 week", "2 weeks", "1 month"]


class PayrollSettingsResponse(BaseModel):
    """Schema for payroll settings response."""

    model_config = ConfigDict(from_attributes=True)

    base_salary: Decimal
    commission_rate: Decimal
    po_commission_rate: Decimal
    pay_period: str


class ProcessPayrollRequest(BaseModel):
    """Schema for processing an employee's payroll period."""

    as_of: datetime | None = None


class PayrollStatusUpdate(BaseModel):
    """Schema for advancing a payroll record."""

    status: Literal["pending", "processed", "paid"]
    paid_at: datetime | None = None


class PayrollResponse(BaseModel):
    """Schema for employee payroll response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID
    employee_id: UUID
    period_start: datetime
    period_end: datetime
    base_salary: Decimal
    commission_amount: Decimal
    total_amount: Decimal
    status: str
    payment_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PayrollListResponse(BaseModel):
    """Schema for listing payroll records."""

    items: list[PayrollResponse]
    total: int


class PayrollStatsResponse(BaseModel):
    """Schema for an employee's payroll dashboard figures."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: UUID
    total_commission: Decimal
    completed_tasks: int
    pending_payments: Decimal


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
