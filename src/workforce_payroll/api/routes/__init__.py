"""API routes."""

from workforce_payroll.api.routes.commissions import router as commissions_router
from workforce_payroll.api.routes.health import router as health_router
from workforce_payroll.api.routes.payroll import router as payroll_router
from workforce_payroll.api.routes.purchase_orders import router as purchase_orders_router
from workforce_payroll.api.routes.tasks import router as tasks_router

__all__ = [
    "commissions_router",
    "health_router",
    "payroll_router",
    "purchase_orders_router",
    "tasks_router",
]
