"""Task API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from workforce_payroll.api.dependencies import DbSession, Emitter, TenantId
from workforce_payroll.api.schemas import (
    CommissionResponse,
    ErrorResponse,
    TaskCompletionResponse,
    TaskCreate,
    TaskEmployeeResponseUpdate,
    TaskResponse,
    TaskStatusResponse,
    TaskStatusUpdate,
)
from workforce_payroll.services import (
    PurchaseOrderInput,
    PurchaseOrderItemInput,
    TaskCompletionResult,
    TaskInput,
    TaskService,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _completion_response(result: TaskCompletionResult) -> TaskCompletionResponse:
    return TaskCompletionResponse(
        task=TaskResponse.model_validate(result.task),
        commission=CommissionResponse.model_validate(result.commission),
        period_total=result.period_total,
    )


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_task(
    db: DbSession,
    tenant_id: TenantId,
    payload: TaskCreate,
) -> TaskResponse:
    """Create a task, optionally with a purchase order."""
    po_input = None
    if payload.purchase_order is not None:
        po_input = PurchaseOrderInput(
            order_number=payload.purchase_order.order_number,
            vendor=payload.purchase_order.vendor,
            notes=payload.purchase_order.notes,
            items=[
                PurchaseOrderItemInput(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in payload.purchase_order.items
            ],
        )

    task = await TaskService(db, tenant_id).create_task(
        TaskInput(
            title=payload.title,
            assigned_to=payload.assigned_to,
            description=payload.description,
            priority=payload.priority,
            due_date=payload.due_date,
            assigned_by=payload.assigned_by,
            purchase_order=po_input,
        )
    )
    return TaskResponse.model_validate(task)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_task(
    db: DbSession,
    tenant_id: TenantId,
    task_id: UUID,
) -> TaskResponse:
    """Get a task with its purchase order."""
    task = await TaskService(db, tenant_id).get_task(task_id)
    return TaskResponse.model_validate(task)


@router.patch(
    "/{task_id}/status",
    response_model=TaskStatusResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_task_status(
    db: DbSession,
    tenant_id: TenantId,
    emitter: Emitter,
    task_id: UUID,
    payload: TaskStatusUpdate,
) -> TaskStatusResponse:
    """Change a task's status. Completing it records the commission."""
    task, completion = await TaskService(db, tenant_id, emitter).update_status(
        task_id, payload.status
    )
    if completion is None:
        return TaskStatusResponse(task=TaskResponse.model_validate(task))

    completed = _completion_response(completion)
    return TaskStatusResponse(
        task=completed.task,
        commission=completed.commission,
        period_total=completed.period_total,
    )


@router.post(
    "/{task_id}/complete",
    response_model=TaskCompletionResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def complete_task(
    db: DbSession,
    tenant_id: TenantId,
    emitter: Emitter,
    task_id: UUID,
) -> TaskCompletionResponse:
    """Complete a task and record its commission."""
    result = await TaskService(db, tenant_id, emitter).complete_task(task_id)
    return _completion_response(result)


@router.put(
    "/{task_id}/response",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def respond_to_task(
    db: DbSession,
    tenant_id: TenantId,
    task_id: UUID,
    payload: TaskEmployeeResponseUpdate,
) -> TaskResponse:
    """Record the employee's answer to the task's purchase order."""
    task = await TaskService(db, tenant_id).respond_to_task(
        task_id, payload.employee_response, payload.response_notes
    )
    return TaskResponse.model_validate(task)
