"""Employee model."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from workforce_payroll.models.base import Base, TimestampMixin, new_id


class Employee(Base, TimestampMixin):
    """A worker who is assigned tasks and earns commission.

    Profile management lives outside this engine; only the fields needed to
    address notifications and own payroll records are kept here.
    """

    __tablename__ = "employee"

    employee_id: Mapped[UUID] = mapped_column(primary_key=True, default=new_id)
    tenant_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    user_type: Mapped[str] = mapped_column(String, nullable=False, default="employee")

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="employee_tenant_email_unique"),
        CheckConstraint(
            "user_type IN ('employee', 'admin')",
            name="employee_user_type_check",
        ),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
