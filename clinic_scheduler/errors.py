"""Typed error taxonomy for the scheduling engine.

Every failure surfaced to callers is one of these kinds, so the caller can
react to the kind (e.g. refresh the slot list on ConflictError) instead of
parsing messages. Only InfrastructureError is retried internally.
"""


class SchedulingError(Exception):
    """Base class for all scheduling errors."""
    code = "SCHEDULING_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchedulingError):
    """Malformed input: bad slot, past date/time, short reason."""
    code = "VALIDATION_ERROR"


class ConflictError(SchedulingError):
    """Slot no longer available at reservation time."""
    code = "SLOT_CONFLICT"


class InvalidTransitionError(SchedulingError):
    """Status transition not permitted from the current state."""
    code = "INVALID_TRANSITION"


class NotFoundError(SchedulingError):
    """Referenced appointment does not exist."""
    code = "NOT_FOUND"


class PermissionDeniedError(SchedulingError):
    """Actor lacks the role or ownership required for the action."""
    code = "PERMISSION_DENIED"


class InfrastructureError(SchedulingError):
    """Transient store/network failure (retryable)."""
    code = "INFRASTRUCTURE_ERROR"
