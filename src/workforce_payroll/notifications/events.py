"""Domain events published by the engine.

Events are immutable and carry everything a notification needs, so
handlers never touch the ORM.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EventMetadata:
    """Metadata attached to every domain event."""

    event_id: UUID
    timestamp: datetime
    tenant_id: UUID

    @classmethod
    def create(cls, tenant_id: UUID) -> EventMetadata:
        return cls(event_id=uuid4(), timestamp=datetime.now(), tenant_id=tenant_id)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    metadata: EventMetadata

    @property
    def event_type(self) -> str:
        """Event type name for routing."""
        return self.__class__.__name__



@dataclass(frozen=True)
class CommissionEarned(DomainEvent):
    """A task completed and a commission record was written."""

    commission_id: UUID
    employee_id: UUID
    employee_name: str
    employee_email: str
    task_id: UUID
    task_title: str
    amount: Decimal
    commission_type: str
    period_total: Decimal  # running total for the current pay period


@dataclass(frozen=True)
class PayrollProcessed(DomainEvent):
    """An employee payroll record moved to processed."""

    payroll_id: UUID
    employee_id: UUID
    employee_name: str
    employee_email: str
    period_start: datetime
    period_end: datetime
    base_salary: Decimal
    commission_amount: Decimal
    total_amount: Decimal
