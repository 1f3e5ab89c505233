"""Typed failures raised by the engine.

None of these are retried; they describe deterministic rule violations and
are surfaced to the caller as-is.
"""

from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base class for engine failures."""

    code = "ENGINE_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)


class InvalidTransitionError(EngineError):
    """Raised when an invalid state transition is attempted."""

    code = "INVALID_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, {"from_status": from_status, "to_status": to_status})


class NotFoundError(EngineError):
    """Raised when a referenced entity does not exist for the tenant."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            {"entity": entity, "entity_id": str(entity_id)},
        )


class ValidationError(EngineError):
    """Raised for malformed input such as negative rates or empty order items."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, {"field": field} if field else None)


class ConcurrencyConflictError(EngineError):
    """Raised when a concurrent writer claimed the same rows first."""

    code = "CONCURRENCY_CONFLICT"
