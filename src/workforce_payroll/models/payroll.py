"""Payroll settings, commission ledger, and employee payroll models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from workforce_payroll.models.base import Base, TimestampMixin, UpdatedAtMixin, new_id


class PayrollSettings(Base, UpdatedAtMixin):
    """Per-tenant pay configuration. One row per tenant."""

    __tablename__ = "payroll_settings"

    settings_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, unique=True)
    base_salary: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    # Percentages, 0-100
    commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    po_commission_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("0")
    )
    pay_period: Mapped[str] = mapped_column(String, nullable=False, default="1 month")

    __table_args__ = (
        CheckConstraint("base_salary >= 0", name="payroll_settings_base_salary_check"),
        CheckConstraint(
            "commission_rate >= 0 AND commission_rate <= 100",
            name="payroll_settings_commission_rate_check",
        ),
        CheckConstraint(
            "po_commission_rate >= 0 AND po_commission_rate <= 100",
            name="payroll_settings_po_commission_rate_check",
        ),
        CheckConstraint(
            "pay_period IN ('1 week', '2 weeks', '1 month')",
            name="payroll_settings_pay_period_check",
        ),
    )


class EmployeePayroll(Base, UpdatedAtMixin):
    """Aggregated pay for one employee over one pay period."""

    __tablename__ = "employee_payroll"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    period_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    period_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    commission_amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    payment_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "tenant_id",
            "employee_id",
            "period_start",
            "period_end",
            name="employee_payroll_period_unique",
        ),
        CheckConstraint(
            "status IN ('pending', 'processed', 'paid')",
            name="employee_payroll_status_check",
        ),
        CheckConstraint("period_end >= period_start", name="employee_payroll_dates_check"),
        CheckConstraint("commission_amount >= 0", name="employee_payroll_commission_check"),
    )


class CommissionRecord(Base, TimestampMixin):
    """Append-only ledger entry created when a task completes.

    Only payroll_id is written after insert, when the record is claimed by
    an EmployeePayroll.
    """

    __tablename__ = "commission_record"

    commission_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    task_id: Mapped[UUID] = mapped_column(
        ForeignKey("task.task_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    payroll_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("employee_payroll.payroll_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    commission_type: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="commission_record_amount_check"),
        CheckConstraint(
            "commission_type IN ('task_completion', 'po_completion')",
            name="commission_record_type_check",
        ),
    )
