"""Pydantic models for API request/response validation.

Dates and times are accepted as plain strings; the engine validates them so
malformed values surface as the same VALIDATION_ERROR as any other
booking precondition.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from clinic_scheduler.models import Appointment


class BookingRequest(BaseModel):
    """Request schema for POST /api/v1/appointments."""
    patient_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Person being seen (account holder or a family member)",
        examples=["Maria Lopez"]
    )
    date: str = Field(..., description="Calendar date, YYYY-MM-DD", examples=["2025-03-10"])
    time: str = Field(..., description="Slot start, HH:MM", examples=["19:00"])
    reason: str = Field(
        ...,
        max_length=2000,
        description="Visit reason (at least 10 characters)",
        examples=["Follow-up checkup"]
    )
    patient_id: Optional[str] = Field(
        None,
        max_length=128,
        description="Owning account; doctors may book on behalf of a patient"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "patient_name": "Maria Lopez",
                "date": "2025-03-10",
                "time": "19:00",
                "reason": "Follow-up checkup"
            }
        }
    )


class RescheduleRequest(BaseModel):
    """Request schema for PUT /api/v1/appointments/{id}/reschedule."""
    date: str = Field(..., description="New calendar date, YYYY-MM-DD")
    time: str = Field(..., description="New slot start, HH:MM")
    reason: str = Field(..., max_length=2000, description="Visit reason (at least 10 characters)")


class TransitionRequest(BaseModel):
    """Request schema for POST /api/v1/appointments/{id}/{action}."""
    doctor_notes: Optional[str] = Field(None, max_length=2000, description="Approver notes")


class ScheduleResponse(BaseModel):
    """Opening hours and approval policy for a date."""
    date: str
    open_hour: int
    close_hour: int
    approval_required: bool
    is_weekend: bool
    description: str = Field(..., examples=["Monday: 6:00 PM - 9:00 PM (automatic confirmation)"])
    slots: List[str]


class AvailabilityResponse(BaseModel):
    """Free slots for a date."""
    date: str
    available_slots: List[str]
    total_slots: int


class AppointmentListResponse(BaseModel):
    """Appointments visible to the caller."""
    appointments: List[Appointment]
    total: int


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    code: Optional[str] = Field(None, description="Error code")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Conflict",
                "detail": "slot no longer available",
                "code": "SLOT_CONFLICT"
            }
        }
    )
