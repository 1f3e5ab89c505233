"""Engine services."""

from workforce_payroll.services.commission_service import (
    CommissionService,
    CommissionSummary,
    CommissionTypeSummary,
    PurchaseOrderCommissionSummary,
)
from workforce_payroll.services.payroll_service import PayrollRecordManager, PayrollStats
from workforce_payroll.services.purchase_order_service import (
    PurchaseOrderInput,
    PurchaseOrderItemInput,
    PurchaseOrderService,
)
from workforce_payroll.services.settings_service import (
    PayrollSettingsService,
    PayrollSettingsUpdate,
)
from workforce_payroll.services.state_machine import (
    EmployeeResponse,
    PayrollStateMachine,
    PayrollStatus,
    PurchaseOrderStateMachine,
    PurchaseOrderStatus,
    TaskPriority,
    TaskStateMachine,
    TaskStatus,
)
from workforce_payroll.services.task_service import (
    TaskCompletionResult,
    TaskInput,
    TaskService,
)

__all__ = [
    "CommissionService",
    "CommissionSummary",
    "CommissionTypeSummary",
    "EmployeeResponse",
    "PayrollRecordManager",
    "PayrollSettingsService",
    "PayrollSettingsUpdate",
    "PayrollStats",
    "PayrollStateMachine",
    "PayrollStatus",
    "PurchaseOrderCommissionSummary",
    "PurchaseOrderInput",
    "PurchaseOrderItemInput",
    "PurchaseOrderService",
    "PurchaseOrderStateMachine",
    "PurchaseOrderStatus",
    "TaskCompletionResult",
    "TaskInput",
    "TaskPriority",
    "TaskService",
    "TaskStateMachine",
    "TaskStatus",
]
