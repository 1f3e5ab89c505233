"""Task service - task lifecycle and commission creation on completion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.calculators import calculate_commission_breakdown
from workforce_payroll.exceptions import NotFoundError, ValidationError
from workforce_payroll.models import CommissionRecord, Employee, Task
from workforce_payroll.notifications import CommissionEarned, EventEmitter, EventMetadata
from workforce_payroll.services.commission_service import CommissionService
from workforce_payroll.services.purchase_order_service import (
    PurchaseOrderInput,
    PurchaseOrderService,
)
from workforce_payroll.services.settings_service import PayrollSettingsService
from workforce_payroll.services.state_machine import (
    EmployeeResponse,
    TaskPriority,
    TaskStateMachine,
    TaskStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class TaskInput:
    title: str
    assigned_to: UUID
    description: str = ""
    priority: str = TaskPriority.MEDIUM.value
    due_date: date | None = None
    assigned_by: UUID | None = None
    purchase_order: PurchaseOrderInput | None = None


@dataclass
class TaskCompletionResult:
    """Outcome of completing a task."""

    task: Task
    commission: CommissionRecord
    period_total: Decimal | None


class TaskService:
    """Service for the task lifecycle.

    Operations:
    - create_task: Create a task, optionally with its purchase order
    - update_status: Move between pending and in_progress, or complete
    - complete_task: Mark completed and write the commission record atomically
    - respond_to_task: Record the employee's answer to the purchase order
    """

    def __init__(
        self,
        session: AsyncSession,
        tenant_id: UUID,
        emitter: EventEmitter | None = None,
    ):
        self.session = session
        self.tenant_id = tenant_id
        self.emitter = emitter

    async def get_task(self, task_id: UUID, for_update: bool = False) -> Task:
        """Load a task with its purchase order and items. Raises NotFoundError."""
        query = select(Task).where(Task.task_id == task_id, Task.tenant_id == self.tenant_id)
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        task = result.scalar_one_or_none()
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    async def _get_employee(self, employee_id: UUID) -> Employee:
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

    async def create_task(self, task_input: TaskInput) -> Task:
        """Create a pending task, with its purchase order when one is given."""
        title = (task_input.title or "").strip()
        if not title:
            raise ValidationError("title is required", field="title")
        if task_input.priority not in {p.value for p in TaskPriority}:
            raise ValidationError(
                f"Unknown priority '{task_input.priority}'", field="priority"
            )
        await self._get_employee(task_input.assigned_to)
        if task_input.assigned_by is not None:
            await self._get_employee(task_input.assigned_by)

        purchase_order = None
        if task_input.purchase_order is not None:
            po_service = PurchaseOrderService(self.session, self.tenant_id)
            purchase_order = await po_service.build_purchase_order(task_input.purchase_order)

        task = Task(
            tenant_id=self.tenant_id,
            title=title,
            description=task_input.description or "",
            status=TaskStatus.PENDING.value,
            priority=task_input.priority,
            due_date=task_input.due_date,
            assigned_to=task_input.assigned_to,
            assigned_by=task_input.assigned_by,
            employee_response=None,
            response_notes=None,
            completed_at=None,
            purchase_order=purchase_order,
        )
        try:
            self.session.add(task)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ValidationError(
                "Task could not be saved; the order number may already exist",
                field="order_number",
            ) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Created task %s for employee %s%s",
            task.task_id,
            task.assigned_to,
            f" with purchase order {purchase_order.order_number}" if purchase_order else "",
        )
        return task

    async def update_status(
        self, task_id: UUID, to_status: str
    ) -> tuple[Task, TaskCompletionResult | None]:
        """Move a task to a new status.

        Completion goes through complete_task so the commission record is
        written; the second element of the result is set only in that case.
        """
        if to_status not in {s.value for s in TaskStatus}:
            raise ValidationError(f"Unknown task status '{to_status}'", field="status")
        if to_status == TaskStatus.COMPLETED:
            completion = await self.complete_task(task_id)
            return completion.task, completion

        task = await self.get_task(task_id, for_update=True)
        from_status = task.status
        TaskStateMachine.validate_transition(from_status, to_status)

        try:
            task.status = to_status
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Task %s moved %s -> %s", task_id, from_status, to_status)
        return task, None

    async def complete_task(
        self,
        task_id: UUID,
        completed_at: datetime | None = None,
    ) -> TaskCompletionResult:
        """Complete a task and record its commission in one transaction.

        Raises InvalidTransitionError if the task is already completed. If
        the commission insert fails the status change is rolled back with it.
        """
        task = await self.get_task(task_id, for_update=True)
        from_status = task.status
        TaskStateMachine.validate_transition(from_status, TaskStatus.COMPLETED)

        completed_at = completed_at or datetime.now()
        try:
            settings = await PayrollSettingsService(self.session, self.tenant_id).get_settings()

            task.status = TaskStatus.COMPLETED.value
            task.completed_at = completed_at
            breakdown = calculate_commission_breakdown(task, settings)

            record = CommissionRecord(
                tenant_id=self.tenant_id,
                employee_id=task.assigned_to,
                task_id=task.task_id,
                amount=breakdown.amount,
                commission_type=breakdown.commission_type.value,
                payroll_id=None,
                created_at=completed_at,
            )
            self.session.add(record)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Task %s completed: commission %s for employee %s (%s, base %s + po %s)",
            task.task_id,
            record.amount,
            record.employee_id,
            record.commission_type,
            breakdown.base_component,
            breakdown.po_component,
        )

        period_total = await self._running_period_total(record, settings.pay_period, completed_at)
        if period_total is not None:
            await self._notify_commission_earned(task, record, period_total)

        return TaskCompletionResult(task=task, commission=record, period_total=period_total)

    async def _running_period_total(
        self,
        record: CommissionRecord,
        pay_period: str,
        completed_at: datetime,
    ) -> Decimal | None:
        """Sum the employee's commissions for the current period, or None on failure."""
        try:
            return await CommissionService(self.session, self.tenant_id).period_total(
                record.employee_id, pay_period, completed_at
            )
        except Exception:
            logger.exception(
                "Failed to compute period total after commission %s", record.commission_id
            )
            return None

    async def _notify_commission_earned(
        self,
        task: Task,
        record: CommissionRecord,
        period_total: Decimal,
    ) -> None:
        """Publish CommissionEarned. The commission is already committed."""
        if self.emitter is None:
            return
        try:
            employee = await self._get_employee(record.employee_id)
            event = CommissionEarned(
                metadata=EventMetadata.create(tenant_id=self.tenant_id),
                commission_id=record.commission_id,
                employee_id=record.employee_id,
                employee_name=employee.full_name,
                employee_email=employee.email,
                task_id=task.task_id,
                task_title=task.title,
                amount=record.amount,
                commission_type=record.commission_type,
                period_total=period_total,
            )
            self.emitter.emit(event)
        except Exception:
            logger.exception(
                "Failed to publish CommissionEarned for commission %s", record.commission_id
            )

    async def respond_to_task(
        self,
        task_id: UUID,
        response: str,
        notes: str | None = None,
    ) -> Task:
        """Record the employee's accept/reject answer to the task's purchase order."""
        if response not in {r.value for r in EmployeeResponse}:
            raise ValidationError(f"Unknown response '{response}'", field="employee_response")

        task = await self.get_task(task_id, for_update=True)
        if task.purchase_order is None:
            raise ValidationError(
                "Only tasks with a purchase order accept a response",
                field="employee_response",
            )

        try:
            task.employee_response = response
            task.response_notes = notes
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Employee response on task %s: %s", task_id, response)
        return task
