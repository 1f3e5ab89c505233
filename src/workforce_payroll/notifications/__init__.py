"""Engine events and outbound notifications."""

from workforce_payroll.notifications.dispatcher import (
    LoggingNotificationDispatcher,
    NotificationDispatcher,
    NotificationHandler,
)
from workforce_payroll.notifications.emitter import EventEmitter, EventHandler
from workforce_payroll.notifications.events import (
    CommissionEarned,
    DomainEvent,
    EventMetadata,
    PayrollProcessed,
)
from workforce_payroll.notifications.templates import NotificationMessage


def build_notification_emitter(dispatcher: NotificationDispatcher) -> EventEmitter:
    """Emitter with the notification handler subscribed to every event."""
    emitter = EventEmitter()
    emitter.on([CommissionEarned, PayrollProcessed], NotificationHandler(dispatcher))
    return emitter


__all__ = [
    "build_notification_emitter",
    "CommissionEarned",
    "DomainEvent",
    "EventEmitter",
    "EventHandler",
    "EventMetadata",
    "LoggingNotificationDispatcher",
    "NotificationDispatcher",
    "NotificationHandler",
    "NotificationMessage",
    "PayrollProcessed",
]
