"""Tests for the task lifecycle and commission creation."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from workforce_payroll.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from workforce_payroll.models import CommissionRecord, PayrollSettings, Task
from workforce_payroll.notifications import build_notification_emitter
from workforce_payroll.services import TaskInput, TaskService

COMPLETED_AT = datetime(2024, 1, 15, 10, 30)


class FailingDispatcher:
    """Dispatcher whose delivery always fails."""

    def send(self, recipient: str, subject: str, body: str) -> None:
        raise ConnectionError("mail relay unavailable")


async def count_commissions(session, task_id) -> int:
    return await session.scalar(
        select(func.count()).select_from(CommissionRecord).where(CommissionRecord.task_id == task_id)
    )


class TestCreateTask:
    """Test task creation."""

    async def test_plain_task(self, session, tenant_id, employee, admin):
        """New tasks start pending with no purchase order."""
        task = await TaskService(session, tenant_id).create_task(
            TaskInput(
                title="  Restock shelves ",
                assigned_to=employee.employee_id,
                assigned_by=admin.employee_id,
                priority="high",
            )
        )

        assert task.title == "Restock shelves"
        assert task.status == "pending"
        assert task.priority == "high"
        assert task.purchase_order is None

    async def test_unknown_assignee(self, session, tenant_id, employee):
        with pytest.raises(NotFoundError):
            await TaskService(session, tenant_id).create_task(
                TaskInput(title="Restock", assigned_to=uuid4())
            )

    async def test_assignee_from_other_tenant(self, session, employee):
        """Employees are only visible inside their own tenant."""
        with pytest.raises(NotFoundError):
            await TaskService(session, uuid4()).create_task(
                TaskInput(title="Restock", assigned_to=employee.employee_id)
            )

    async def test_unknown_priority(self, session, tenant_id, employee):
        with pytest.raises(ValidationError):
            await TaskService(session, tenant_id).create_task(
                TaskInput(title="Restock", assigned_to=employee.employee_id, priority="urgent")
            )


class TestUpdateStatus:
    """Test non-completing status changes."""

    async def test_start_and_pause(self, session, tenant_id, employee):
        """Tasks move between pending and in_progress freely."""
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))

        task, completion = await service.update_status(task.task_id, "in_progress")
        assert task.status == "in_progress"
        assert completion is None

        task, _ = await service.update_status(task.task_id, "pending")
        assert task.status == "pending"

    async def test_same_status_rejected(self, session, tenant_id, employee):
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))

        with pytest.raises(InvalidTransitionError):
            await service.update_status(task.task_id, "pending")

    async def test_completing_through_update_status_writes_commission(
        self, session, tenant_id, employee, payroll_settings
    ):
        """A status change to completed takes the commission path."""
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))

        task, completion = await service.update_status(task.task_id, "completed")

        assert task.status == "completed"
        assert completion is not None
        assert completion.commission.amount == Decimal("100.00")
        assert await count_commissions(session, task.task_id) == 1


class TestCompleteTask:
    """Test completion and the commission it produces."""

    async def test_purchase_order_commission(
        self, session, tenant_id, employee, payroll_settings, po_input, emitter, dispatcher
    ):
        """Completing a PO task at 2%/1% on 5000 and 10,000 earns 200."""
        service = TaskService(session, tenant_id, emitter)
        task = await service.create_task(
            TaskInput(title="Order laptops", assigned_to=employee.employee_id, purchase_order=po_input)
        )

        result = await service.complete_task(task.task_id, completed_at=COMPLETED_AT)

        assert result.task.status == "completed"
        assert result.task.completed_at == COMPLETED_AT
        assert result.commission.amount == Decimal("200.00")
        assert result.commission.commission_type == "po_completion"
        assert result.commission.payroll_id is None
        assert result.commission.employee_id == employee.employee_id
        assert result.period_total == Decimal("200.00")

        assert len(dispatcher.sent) == 1
        recipient, subject, body = dispatcher.sent[0]
        assert recipient == "jane.doe@example.com"
        assert subject == "Commission Earned: $200.00"
        assert "Order laptops" in body
        assert "Purchase Order Completion" in body

    async def test_running_total_accumulates(self, session, tenant_id, employee, payroll_settings):
        """The period total counts every commission in the window."""
        service = TaskService(session, tenant_id)
        first = await service.create_task(TaskInput(title="One", assigned_to=employee.employee_id))
        second = await service.create_task(TaskInput(title="Two", assigned_to=employee.employee_id))

        await service.complete_task(first.task_id, completed_at=COMPLETED_AT)
        result = await service.complete_task(second.task_id, completed_at=COMPLETED_AT)

        assert result.period_total == Decimal("200.00")

    async def test_complete_twice(self, session, tenant_id, employee, payroll_settings):
        """A completed task cannot complete again or earn a second commission."""
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))
        await service.complete_task(task.task_id, completed_at=COMPLETED_AT)

        with pytest.raises(InvalidTransitionError):
            await service.complete_task(task.task_id)
        assert await count_commissions(session, task.task_id) == 1

    async def test_default_settings_created(self, session, tenant_id, employee):
        """Without saved settings the defaults apply and are stored."""
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))

        result = await service.complete_task(task.task_id, completed_at=COMPLETED_AT)

        assert result.commission.amount == Decimal("0.00")
        assert result.commission.commission_type == "task_completion"
        row = await session.scalar(select(PayrollSettings).where(PayrollSettings.tenant_id == tenant_id))
        assert row.pay_period == "1 month"

    async def test_failure_rolls_back_status(
        self, session, tenant_id, employee, payroll_settings, monkeypatch
    ):
        """If the commission cannot be written the task stays as it was."""
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))
        task_id = task.task_id
        await service.update_status(task_id, "in_progress")

        def broken(task, settings):
            raise RuntimeError("ledger unavailable")

        monkeypatch.setattr(
            "workforce_payroll.services.task_service.calculate_commission_breakdown", broken
        )

        with pytest.raises(RuntimeError):
            await service.complete_task(task_id, completed_at=COMPLETED_AT)

        status = await session.scalar(select(Task.status).where(Task.task_id == task_id))
        assert status == "in_progress"
        assert await count_commissions(session, task_id) == 0

    async def test_notification_failure_keeps_commission(
        self, session, tenant_id, employee, payroll_settings
    ):
        """Delivery failures are logged; the completion still stands."""
        emitter = build_notification_emitter(FailingDispatcher())
        service = TaskService(session, tenant_id, emitter)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))

        result = await service.complete_task(task.task_id, completed_at=COMPLETED_AT)

        assert result.commission.amount == Decimal("100.00")
        assert await count_commissions(session, task.task_id) == 1

    async def test_running_total_failure_keeps_commission(
        self, session, tenant_id, employee, payroll_settings, emitter, dispatcher, monkeypatch
    ):
        """A failed period total leaves the committed completion in place."""
        service = TaskService(session, tenant_id, emitter)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))
        task_id = task.task_id

        async def broken(self, employee_id, pay_period, as_of=None):
            raise RuntimeError("replica unavailable")

        monkeypatch.setattr(
            "workforce_payroll.services.task_service.CommissionService.period_total", broken
        )

        result = await service.complete_task(task_id, completed_at=COMPLETED_AT)

        assert result.period_total is None
        assert result.task.status == "completed"
        assert result.commission.amount == Decimal("100.00")
        status = await session.scalar(select(Task.status).where(Task.task_id == task_id))
        assert status == "completed"
        assert await count_commissions(session, task_id) == 1
        assert dispatcher.sent == []

    async def test_unknown_task(self, session, tenant_id):
        with pytest.raises(NotFoundError):
            await TaskService(session, tenant_id).complete_task(uuid4())


class TestRespondToTask:
    """Test the employee response to a task's purchase order."""

    async def test_accept(self, session, tenant_id, employee, po_input):
        service = TaskService(session, tenant_id)
        task = await service.create_task(
            TaskInput(title="Order laptops", assigned_to=employee.employee_id, purchase_order=po_input)
        )

        task = await service.respond_to_task(task.task_id, "accepted", "Vendor confirmed")

        assert task.employee_response == "accepted"
        assert task.response_notes == "Vendor confirmed"
        assert task.status == "pending"

    async def test_allowed_after_completion(
        self, session, tenant_id, employee, payroll_settings, po_input
    ):
        """Responses are independent of the task status."""
        service = TaskService(session, tenant_id)
        task = await service.create_task(
            TaskInput(title="Order laptops", assigned_to=employee.employee_id, purchase_order=po_input)
        )
        await service.complete_task(task.task_id, completed_at=COMPLETED_AT)

        task = await service.respond_to_task(task.task_id, "rejected")

        assert task.employee_response == "rejected"
        assert task.status == "completed"

    async def test_requires_purchase_order(self, session, tenant_id, employee):
        service = TaskService(session, tenant_id)
        task = await service.create_task(TaskInput(title="Count stock", assigned_to=employee.employee_id))

        with pytest.raises(ValidationError):
            await service.respond_to_task(task.task_id, "accepted")

    async def test_unknown_response(self, session, tenant_id, employee, po_input):
        service = TaskService(session, tenant_id)
        task = await service.create_task(
            TaskInput(title="Order laptops", assigned_to=employee.employee_id, purchase_order=po_input)
        )

        with pytest.raises(ValidationError):
            await service.respond_to_task(task.task_id, "maybe")
