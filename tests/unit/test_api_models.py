"""Tests for API request/response schemas."""
import pytest
from pydantic import ValidationError

from clinic_scheduler.api.models import (
    BookingRequest,
    ErrorResponse,
    RescheduleRequest,
    TransitionRequest,
)


def test_booking_request_minimal():
    request = BookingRequest(
        patient_name="Maria Lopez", date="2025-03-10", time="19:00", reason="Follow-up checkup"
    )

    assert request.patient_id is None


def test_booking_request_requires_name():
    with pytest.raises(ValidationError):
        BookingRequest(patient_name="", date="2025-03-10", time="19:00", reason="Follow-up checkup")


def test_booking_request_rejects_oversized_reason():
    with pytest.raises(ValidationError):
        BookingRequest(patient_name="Maria", date="2025-03-10", time="19:00", reason="x" * 2001)


def test_reschedule_request_requires_all_fields():
    with pytest.raises(ValidationError):
        RescheduleRequest(date="2025-03-10", time="19:00")


def test_transition_request_notes_are_optional():
    assert TransitionRequest().doctor_notes is None


def test_error_response_shape():
    body = ErrorResponse(error="Not Found", detail="appointment x not found", code="NOT_FOUND")

    assert body.model_dump() == {
        "error": "Not Found",
        "detail": "appointment x not found",
        "code": "NOT_FOUND",
    }
