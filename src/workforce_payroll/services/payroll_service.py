"""Payroll record manager - aggregates commissions into per-period payroll."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce_payroll.calculators import (
    PayrollPeriod,
    PayrollSettingsSnapshot,
    calculate_payroll_period,
    to_money,
)
from workforce_payroll.exceptions import (
    ConcurrencyConflictError,
    NotFoundError,
    ValidationError,
)
from workforce_payroll.models import CommissionRecord, Employee, EmployeePayroll, Task
from workforce_payroll.notifications import EventEmitter, EventMetadata, PayrollProcessed
from workforce_payroll.services.state_machine import (
    PayrollStateMachine,
    PayrollStatus,
    TaskStatus,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class PayrollStats:
    """Lifetime payroll figures for an employee.

    pending_payments totals every record not yet paid, processed ones included.
    """

    employee_id: UUID
    total_commission: Decimal
    completed_tasks: int
    pending_payments: Decimal


class PayrollRecordManager:
    """Service for employee payroll records.

    Operations:
    - process_period: Claim unlinked commissions and total the period
    - advance_status: pending -> processed -> paid
    - list_all_payrolls, get_payroll_stats: admin and dashboard reads

    Once a record is processed its amounts are frozen; process_period
    returns it untouched.
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

    async def get_payroll(self, payroll_id: UUID, for_update: bool = False) -> EmployeePayroll:
        """Load a payroll record. Raises NotFoundError."""
        query = select(EmployeePayroll).where(
            EmployeePayroll.payroll_id == payroll_id,
            EmployeePayroll.tenant_id == self.tenant_id,
        )
        if for_update:
            query = query.with_for_update()
        result = await self.session.execute(query)
        payroll = result.scalar_one_or_none()
        if payroll is None:
            raise NotFoundError("EmployeePayroll", payroll_id)
        return payroll

    async def list_payrolls(self, employee_id: UUID) -> list[EmployeePayroll]:
        """All payroll records for an employee, latest period first."""
        await self._get_employee(employee_id)
        result = await self.session.execute(
            select(EmployeePayroll)
            .where(
                EmployeePayroll.tenant_id == self.tenant_id,
                EmployeePayroll.employee_id == employee_id,
            )
            .order_by(EmployeePayroll.period_start.desc())
        )
        return list(result.scalars().all())

    async def list_all_payrolls(self, status: str | None = None) -> list[EmployeePayroll]:
        """Every payroll record in the tenant, latest period first.

        Raises ValidationError for an unknown status filter.
        """
        query = select(EmployeePayroll).where(EmployeePayroll.tenant_id == self.tenant_id)
        if status is not None:
            if status not in {s.value for s in PayrollStatus}:
                raise ValidationError(f"Unknown payroll status '{status}'", field="status")
            query = query.where(EmployeePayroll.status == status)
        result = await self.session.execute(
            query.order_by(EmployeePayroll.period_start.desc(), EmployeePayroll.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_payroll_stats(self, employee_id: UUID) -> PayrollStats:
        """Dashboard totals for one employee across all periods."""
        await self._get_employee(employee_id)

        commissions = await self.session.execute(
            select(CommissionRecord.amount).where(
                CommissionRecord.tenant_id == self.tenant_id,
                CommissionRecord.employee_id == employee_id,
            )
        )
        completed_tasks = await self.session.scalar(
            select(func.count())
            .select_from(Task)
            .where(
                Task.tenant_id == self.tenant_id,
                Task.assigned_to == employee_id,
                Task.status == TaskStatus.COMPLETED.value,
            )
        )
        unpaid = await self.session.execute(
            select(EmployeePayroll.total_amount).where(
                EmployeePayroll.tenant_id == self.tenant_id,
                EmployeePayroll.employee_id == employee_id,
                EmployeePayroll.status != PayrollStatus.PAID.value,
            )
        )
        return PayrollStats(
            employee_id=employee_id,
            total_commission=to_money(sum(commissions.scalars().all(), ZERO)),
            completed_tasks=completed_tasks or 0,
            pending_payments=to_money(sum(unpaid.scalars().all(), ZERO)),
        )

    async def _find_for_period(
        self, employee_id: UUID, period: PayrollPeriod
    ) -> EmployeePayroll | None:
        result = await self.session.execute(
            select(EmployeePayroll)
            .where(
                EmployeePayroll.tenant_id == self.tenant_id,
                EmployeePayroll.employee_id == employee_id,
                EmployeePayroll.period_start == period.start,
                EmployeePayroll.period_end == period.end,
            )
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def _claim_commissions(
        self, payroll: EmployeePayroll, period: PayrollPeriod
    ) -> int:
        """Link the period's unclaimed commissions to the payroll record.

        Rows are locked first, then claimed with a conditional update. If any
        row was claimed by someone else in between, the counts disagree.
        """
        result = await self.session.execute(
            select(CommissionRecord.commission_id)
            .where(
                CommissionRecord.tenant_id == self.tenant_id,
                CommissionRecord.employee_id == payroll.employee_id,
                CommissionRecord.payroll_id.is_(None),
                CommissionRecord.created_at >= period.start,
                CommissionRecord.created_at < period.cutoff,
            )
            .with_for_update()
        )
        claimable = list(result.scalars().all())
        if not claimable:
            return 0

        result = await self.session.execute(
            update(CommissionRecord)
            .where(
                CommissionRecord.commission_id.in_(claimable),
                CommissionRecord.payroll_id.is_(None),
            )
            .values(payroll_id=payroll.payroll_id)
        )
        if result.rowcount != len(claimable):
            raise ConcurrencyConflictError(
                "Commission records were claimed by another payroll run",
                {
                    "payroll_id": str(payroll.payroll_id),
                    "expected": len(claimable),
                    "claimed": result.rowcount,
                },
            )
        return len(claimable)

    async def _linked_commission_total(self, payroll_id: UUID) -> Decimal:
        result = await self.session.execute(
            select(CommissionRecord.amount).where(CommissionRecord.payroll_id == payroll_id)
        )
        return to_money(sum(result.scalars().all(), ZERO))

    async def process_period(
        self,
        employee_id: UUID,
        settings: PayrollSettingsSnapshot,
        as_of: datetime | None = None,
    ) -> EmployeePayroll:
        """Create or refresh the employee's pending payroll for the current period.

        The record's commission_amount is the sum of every commission linked
        to it, so repeated runs without new commissions change nothing.
        """
        period = calculate_payroll_period(settings.pay_period, as_of or datetime.now())
        await self._get_employee(employee_id)

        payroll = await self._find_for_period(employee_id, period)
        if payroll is not None and PayrollStateMachine.is_frozen(payroll.status):
            logger.info(
                "Payroll %s for employee %s (%s - %s) is %s; not re-processing",
                payroll.payroll_id,
                employee_id,
                period.start.date(),
                period.end.date(),
                payroll.status,
            )
            return payroll

        base_salary = to_money(settings.base_salary)
        try:
            if payroll is None:
                payroll = EmployeePayroll(
                    tenant_id=self.tenant_id,
                    employee_id=employee_id,
                    period_start=period.start,
                    period_end=period.end,
                    base_salary=base_salary,
                    commission_amount=ZERO,
                    total_amount=base_salary,
                    status=PayrollStatus.PENDING.value,
                    payment_date=None,
                )
                self.session.add(payroll)
                await self.session.flush()
            else:
                payroll.base_salary = base_salary

            claimed = await self._claim_commissions(payroll, period)
            commission_amount = await self._linked_commission_total(payroll.payroll_id)
            payroll.commission_amount = commission_amount
            payroll.total_amount = to_money(payroll.base_salary + commission_amount)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConcurrencyConflictError(
                "Payroll for this period was created concurrently",
                {
                    "employee_id": str(employee_id),
                    "period_start": period.start.isoformat(),
                    "period_end": period.end.isoformat(),
                },
            ) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Processed payroll %s for employee %s (%s - %s): claimed %d, commission %s, total %s",
            payroll.payroll_id,
            employee_id,
            period.start.date(),
            period.end.date(),
            claimed,
            payroll.commission_amount,
            payroll.total_amount,
        )
        return payroll

    async def advance_status(
        self,
        payroll_id: UUID,
        new_status: str,
        paid_at: datetime | None = None,
    ) -> EmployeePayroll:
        """Move a payroll record one step forward.

        Raises InvalidTransitionError for anything but pending -> processed
        or processed -> paid. Paying stamps payment_date.
        """
        if new_status not in {s.value for s in PayrollStatus}:
            raise ValidationError(f"Unknown payroll status '{new_status}'", field="status")

        payroll = await self.get_payroll(payroll_id, for_update=True)
        from_status = payroll.status
        PayrollStateMachine.validate_transition(from_status, new_status)

        try:
            payroll.status = new_status
            if new_status == PayrollStatus.PAID:
                payroll.payment_date = paid_at or datetime.now()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Payroll %s moved %s -> %s", payroll_id, from_status, new_status)

        if new_status == PayrollStatus.PROCESSED:
            await self._notify_payroll_processed(payroll)
        return payroll

    async def _notify_payroll_processed(self, payroll: EmployeePayroll) -> None:
        if self.emitter is None:
            return
        try:
            employee = await self._get_employee(payroll.employee_id)
            event = PayrollProcessed(
                metadata=EventMetadata.create(tenant_id=self.tenant_id),
                payroll_id=payroll.payroll_id,
                employee_id=payroll.employee_id,
                employee_name=employee.full_name,
                employee_email=employee.email,
                period_start=payroll.period_start,
                period_end=payroll.period_end,
                base_salary=payroll.base_salary,
                commission_amount=payroll.commission_amount,
                total_amount=payroll.total_amount,
            )
            self.emitter.emit(event)
        except Exception:
            logger.exception("Failed to publish PayrollProcessed for payroll %s", payroll.payroll_id)
