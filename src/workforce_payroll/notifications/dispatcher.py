"""Outbound notification boundary.

Actual delivery (SMTP, a mail API, a queue) is an external service. The
engine hands it (recipient, subject, body) triples through this protocol.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from workforce_payroll.notifications.events import (
    CommissionEarned,
    DomainEvent,
    PayrollProcessed,
)
from workforce_payroll.notifications.templates import (
    NotificationMessage,
    render_commission_earned,
    render_payroll_processed,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class NotificationDispatcher(Protocol):
    """Accepts rendered messages for delivery."""

    def send(self, recipient: str, subject: str, body: str) -> None:
        ...


class LoggingNotificationDispatcher:
    """Dispatcher that only logs. Used when no delivery service is wired in."""

    def __init__(self, sender: str = "payroll@localhost") -> None:
        self.sender = sender

    def send(self, recipient: str, subject: str, body: str) -> None:
        logger.info(
            "Notification from %s to %s: %s",
            self.sender,
            recipient,
            subject,
        )


class NotificationHandler:
    """Event handler that renders engine events and passes them to a dispatcher."""

    def __init__(self, dispatcher: NotificationDispatcher) -> None:
        self.dispatcher = dispatcher

    def __call__(self, event: DomainEvent) -> None:
        message = self.render(event)
        if message is None:
            return
        logger.debug(
            "Sending %s %s for tenant %s",
            event.event_type,
            event.metadata.event_id,
            event.metadata.tenant_id,
        )
        self.dispatcher.send(message.recipient, message.subject, message.body)

    @staticmethod
    def render(event: DomainEvent) -> NotificationMessage | None:
        if isinstance(event, CommissionEarned):
            return render_commission_earned(event)
        if isinstance(event, PayrollProcessed):
            return render_payroll_processed(event)
        return None
