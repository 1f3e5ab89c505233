"""In-process publisher for engine events.

Subscribers are keyed by event class name. A subscriber that raises is
logged and skipped; the publishing service never sees the failure.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from workforce_payroll.notifications.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventEmitter:
    """Synchronous fan-out of events to their subscribers.

    Usage:
        emitter = EventEmitter()
        emitter.on([CommissionEarned, PayrollProcessed], NotificationHandler(dispatcher))
        emitter.emit(event)
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(
        self,
        event_type: type[DomainEvent] | list[type[DomainEvent]],
        handler: EventHandler,
    ) -> None:
        """Subscribe handler to one or more event classes."""
        event_types = event_type if isinstance(event_type, list) else [event_type]
        for cls in event_types:
            self._subscribers[cls.__name__].append(handler)

    def emit(self, event: DomainEvent) -> list[Exception]:
        """Deliver event to its subscribers in subscription order.

        Returns the exceptions raised by failing subscribers.
        """
        errors: list[Exception] = []
        for handler in self._subscribers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as exc:
                logger.exception("Handler %r failed for %s", handler, event.event_type)
                errors.append(exc)
        return errors
