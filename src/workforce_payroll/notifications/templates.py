"""Notification message templates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from workforce_payroll.calculators.formatting import format_currency
from workforce_payroll.notifications.events import CommissionEarned, PayrollProcessed


@dataclass(frozen=True)
class NotificationMessage:
    """A rendered message ready for a dispatcher."""

    recipient: str
    subject: str
    body: str


def _short_date(value: date | datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def render_commission_earned(event: CommissionEarned) -> NotificationMessage:
    kind = "Purchase Order" if event.commission_type == "po_completion" else "Task"
    body = "\n".join(
        [
            f"Congratulations {event.employee_name}!",
            "",
            "You've earned a commission for completing the following task:",
            f"  {event.task_title}",
            f"  Commission Type: {kind} Completion",
            f"  Amount: {format_currency(event.amount)}",
            "",
            f"Total commissions earned this period: {format_currency(event.period_total)}",
            "",
            "Keep up the great work!",
        ]
    )
    return NotificationMessage(
        recipient=event.employee_email,
        subject=f"Commission Earned: {format_currency(event.amount)}",
        body=body,
    )


def render_payroll_processed(event: PayrollProcessed) -> NotificationMessage:
    period = f"{_short_date(event.period_start)} - {_short_date(event.period_end)}"
    body = "\n".join(
        [
            f"Dear {event.employee_name},",
            "",
            "Here's your payroll statement for the period:",
            period,
            "",
            f"  Base Salary: {format_currency(event.base_salary)}",
            f"  Commission:  {format_currency(event.commission_amount)}",
            f"  Total:       {format_currency(event.total_amount)}",
            "",
            "Payment will be processed according to your selected payment method.",
        ]
    )
    return NotificationMessage(
        recipient=event.employee_email,
        subject=f"Payroll Statement: {period}",
        body=body,
    )
