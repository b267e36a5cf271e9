"""FastAPI server for the clinic scheduling engine.

Features:
- Thin HTTP layer over AppointmentScheduler
- Typed error kinds mapped to status codes
- Request IDs on every response and log event
- Health check endpoint

Usage:
    uvicorn clinic_scheduler.api_server:app --port 8000
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinic_scheduler import config, errors
from clinic_scheduler.api.dependencies import get_actor, get_scheduler
from clinic_scheduler.api.models import (
    AppointmentListResponse,
    AvailabilityResponse,
    BookingRequest,
    ErrorResponse,
    RescheduleRequest,
    ScheduleResponse,
    TransitionRequest,
)
from clinic_scheduler.logging_config import RequestIDMiddleware, setup_structured_logging
from clinic_scheduler.models import Appointment
from clinic_scheduler.scheduler import AppointmentScheduler
from clinic_scheduler.schedule_rules import is_weekend, parse_date
from clinic_scheduler.slots import generate_slots
from clinic_scheduler.state import Action, Actor

logger = logging.getLogger(__name__)

# error kind -> (status code, title)
ERROR_STATUS = {
    errors.ValidationError: (status.HTTP_400_BAD_REQUEST, "Validation Error"),
    errors.PermissionDeniedError: (status.HTTP_403_FORBIDDEN, "Permission Denied"),
    errors.NotFoundError: (status.HTTP_404_NOT_FOUND, "Not Found"),
    errors.ConflictError: (status.HTTP_409_CONFLICT, "Slot Unavailable"),
    errors.InvalidTransitionError: (status.HTTP_409_CONFLICT, "Invalid Transition"),
    errors.InfrastructureError: (status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable"),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown logic."""
    setup_structured_logging(config.LOG_LEVEL)
    logger.info("Scheduling API starting up...")
    yield
    logger.info("Scheduling API shutting down...")


app = FastAPI(
    title="Clinic Scheduling API",
    description="Slot availability, booking, approval and rescheduling for a single-provider clinic",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestIDMiddleware)


@app.exception_handler(errors.SchedulingError)
async def scheduling_error_handler(request: Request, exc: errors.SchedulingError):
    """Map engine error kinds to HTTP responses."""
    status_code, title = ERROR_STATUS.get(
        type(exc), (status.HTTP_400_BAD_REQUEST, "Scheduling Error")
    )
    headers = None
    if isinstance(exc, errors.InfrastructureError):
        headers = {"Retry-After": "5"}
        logger.error(f"Store unavailable: {exc}")

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=title, detail=exc.message, code=exc.code).model_dump(),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors consistently."""
    logger.warning(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="Validation Error",
            detail=str(exc.errors()),
            code="VALIDATION_ERROR"
        ).model_dump()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected exceptions."""
    logger.error(f"Unexpected error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal Server Error",
            detail="An unexpected error occurred. Please try again later.",
            code="INTERNAL_ERROR"
        ).model_dump()
    )


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for load balancers."""
    return {
        "status": "healthy",
        "service": "clinic-scheduling-api",
        "version": "1.0.0"
    }


@app.get("/api/v1/schedule/{date}", tags=["Schedule"], response_model=ScheduleResponse)
def get_schedule(date: str, scheduler: AppointmentScheduler = Depends(get_scheduler)):
    """Opening hours, approval policy and candidate slots for a date."""
    day = parse_date(date)
    schedule = scheduler.resolve_config(day)
    return ScheduleResponse(
        date=day.isoformat(),
        open_hour=schedule.open_hour,
        close_hour=schedule.close_hour,
        approval_required=schedule.approval_required,
        is_weekend=is_weekend(day),
        description=scheduler.describe_schedule(day),
        slots=generate_slots(day),
    )


@app.get("/api/v1/availability", tags=["Schedule"], response_model=AvailabilityResponse)
def get_availability(
    date: str = Query(..., description="Calendar date, YYYY-MM-DD"),
    exclude_appointment_id: Optional[str] = Query(
        None, description="Treat this appointment's own slot as free (editing)"
    ),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """GET /api/v1/availability?date=2025-03-10 - free slots for a date."""
    day = parse_date(date)
    slots = scheduler.available_slots(day, exclude_appointment_id)
    return AvailabilityResponse(date=day.isoformat(), available_slots=slots, total_slots=len(slots))


@app.post(
    "/api/v1/appointments",
    tags=["Appointments"],
    response_model=Appointment,
    status_code=status.HTTP_201_CREATED,
)
def create_appointment(
    request: BookingRequest,
    actor: Actor = Depends(get_actor),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """
    Book a slot.

    Patients book for themselves or a family member; doctors may pass
    patient_id to book on a patient's behalf.
    """
    account_id = actor.account_id
    if request.patient_id and request.patient_id != actor.account_id:
        if not actor.is_approver:
            raise errors.PermissionDeniedError("patients can only book for their own account")
        account_id = request.patient_id

    return scheduler.book(account_id, request.patient_name, request.date, request.time, request.reason)


@app.get("/api/v1/appointments", tags=["Appointments"], response_model=AppointmentListResponse)
def list_appointments(
    actor: Actor = Depends(get_actor),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """Doctors see every appointment, patients their own."""
    appointments = scheduler.list_appointments(actor)
    return AppointmentListResponse(appointments=appointments, total=len(appointments))


@app.get("/api/v1/appointments/{appointment_id}", tags=["Appointments"], response_model=Appointment)
def get_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_actor),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    return scheduler.get_appointment(appointment_id, actor)


@app.put(
    "/api/v1/appointments/{appointment_id}/reschedule",
    tags=["Appointments"],
    response_model=Appointment,
)
def reschedule_appointment(
    appointment_id: str,
    request: RescheduleRequest,
    actor: Actor = Depends(get_actor),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """Move an appointment to a new slot; it returns to pending."""
    return scheduler.reschedule(appointment_id, request.date, request.time, request.reason, actor)


@app.post(
    "/api/v1/appointments/{appointment_id}/{action}",
    tags=["Appointments"],
    response_model=Appointment,
)
def transition_appointment(
    appointment_id: str,
    action: Action,
    request: Optional[TransitionRequest] = None,
    actor: Actor = Depends(get_actor),
    scheduler: AppointmentScheduler = Depends(get_scheduler),
):
    """POST /api/v1/appointments/{id}/accept|reject|cancel."""
    notes = request.doctor_notes if request else None
    return scheduler.transition(appointment_id, actor, action, doctor_notes=notes)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "clinic_scheduler.api_server:app",
        host="0.0.0.0",
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
