"""ORM models."""

from workforce_payroll.models.base import Base, TimestampMixin, UpdatedAtMixin
from workforce_payroll.models.employee import Employee
from workforce_payroll.models.payroll import CommissionRecord, EmployeePayroll, PayrollSettings
from workforce_payroll.models.task import PurchaseOrder, PurchaseOrderItem, Task

__all__ = [
    "Base",
    "TimestampMixin",
    "UpdatedAtMixin",
    "Employee",
    "Task",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "PayrollSettings",
    "CommissionRecord",
    "EmployeePayroll",
]
