"""API package initialization."""
from clinic_scheduler.api.models import (
    AppointmentListResponse,
    AvailabilityResponse,
    BookingRequest,
    ErrorResponse,
    RescheduleRequest,
    ScheduleResponse,
    TransitionRequest,
)

__all__ = [
    "AppointmentListResponse",
    "AvailabilityResponse",
    "BookingRequest",
    "ErrorResponse",
    "RescheduleRequest",
    "ScheduleResponse",
    "TransitionRequest",
]
