"""Task, purchase order, and purchase order item models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from workforce_payroll.models.base import Base, UpdatedAtMixin, new_id


class Task(Base, UpdatedAtMixin):
    """Work item assigned by an administrator to an employee."""

    __tablename__ = "task"

    task_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    priority: Mapped[str] = mapped_column(String, nullable=False, default="medium")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    assigned_to: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_by: Mapped[UUID | None] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="SET NULL"),
        nullable=True,
    )
    employee_response: Mapped[str | None] = mapped_column(String, nullable=True)
    response_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')",
            name="task_status_check",
        ),
        CheckConstraint(
            "priority IN ('low', 'medium', 'high')",
            name="task_priority_check",
        ),
        CheckConstraint(
            "employee_response IS NULL OR employee_response IN ('accepted', 'rejected')",
            name="task_employee_response_check",
        ),
    )

    # Relationships
    purchase_order: Mapped[PurchaseOrder | None] = relationship(
        back_populates="task",
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class PurchaseOrder(Base, UpdatedAtMixin):
    """Vendor order attached to exactly one task."""

    __tablename__ = "purchase_order"

    po_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    task_id: Mapped[UUID] = mapped_column(
        ForeignKey("task.task_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    order_number: Mapped[str] = mapped_column(String, nullable=False)
    vendor: Mapped[str] = mapped_column(String, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=Decimal("0")
    )
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")

    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="po_tenant_order_number_unique"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="po_status_check",
        ),
        CheckConstraint("total_amount >= 0", name="po_total_amount_check"),
    )

    # Relationships
    task: Mapped[Task] = relationship(back_populates="purchase_order")
    items: Mapped[list[PurchaseOrderItem]] = relationship(
        back_populates="purchase_order",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.line_number",
    )

    def recalculate_totals(self) -> Decimal:
        """Recompute every item total and the order total from the items."""
        total = Decimal("0")
        for item in self.items:
            item.total_price = item.compute_total()
            total += item.total_price
        self.total_amount = total
        return total


class PurchaseOrderItem(Base):
    """Line on a purchase order."""

    __tablename__ = "purchase_order_item"

    item_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    po_id: Mapped[UUID] = mapped_column(
        ForeignKey("purchase_order.po_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="po_item_quantity_check"),
        CheckConstraint("unit_price >= 0", name="po_item_unit_price_check"),
    )

    # Relationships
    purchase_order: Mapped[PurchaseOrder] = relationship(back_populates="items")

    def compute_total(self) -> Decimal:
        return Decimal(self.quantity) * Decimal(self.unit_price)
