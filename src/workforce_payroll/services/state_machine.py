"""Lifecycle state machines for tasks, purchase orders, and payroll records."""

from __future__ import annotations

from enum import Enum

from workforce_payroll.exceptions import InvalidTransitionError


class TaskStatus(str, Enum):
    """Task status values."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority values."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EmployeeResponse(str, Enum):
    """Employee answer to a task's purchase order."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PurchaseOrderStatus(str, Enum):
    """Purchase order status values."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PayrollStatus(str, Enum):
    """Employee payroll status values."""

    PENDING = "pending"
    PROCESSED = "processed"
    PAID = "paid"


def _plain(status: str) -> str:
    return status.value if isinstance(status, Enum) else status


class _StateMachine:
    """Transition table lookups shared by the lifecycle machines."""

    VALID_TRANSITIONS: dict[str, list[str]] = {}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(_plain(from_status), _plain(to_status))


class TaskStateMachine(_StateMachine):
    """State machine for task status.

    Allowed transitions:
    - pending → in_progress
    - pending → completed
    - in_progress → pending
    - in_progress → completed

    Completed is terminal; reaching it is what triggers a commission.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        TaskStatus.PENDING: [TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED],
        TaskStatus.IN_PROGRESS: [TaskStatus.PENDING, TaskStatus.COMPLETED],
        TaskStatus.COMPLETED: [],
    }


class PurchaseOrderStateMachine(_StateMachine):
    """State machine for purchase order approval.

    Allowed transitions:
    - pending → approved
    - pending → rejected
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PurchaseOrderStatus.PENDING: [
            PurchaseOrderStatus.APPROVED,
            PurchaseOrderStatus.REJECTED,
        ],
        PurchaseOrderStatus.APPROVED: [],
        PurchaseOrderStatus.REJECTED: [],
    }


class PayrollStateMachine(_StateMachine):
    """State machine for employee payroll records.

    Allowed transitions, strictly forward and one step at a time:
    - pending → processed
    - processed → paid
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.PENDING: [PayrollStatus.PROCESSED],
        PayrollStatus.PROCESSED: [PayrollStatus.PAID],
        PayrollStatus.PAID: [],
    }

    # Statuses where aggregation may still change the amounts
    AGGREGATION_ALLOWED = {PayrollStatus.PENDING}

    @classmethod
    def can_aggregate(cls, status: str) -> bool:
        """Check if commission re-aggregation is allowed in this status."""
        return status in cls.AGGREGATION_ALLOWED

    @classmethod
    def is_frozen(cls, status: str) -> bool:
        """Processed and paid records are never mutated by aggregation."""
        return not cls.can_aggregate(status)
