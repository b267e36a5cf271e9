"""Booking service.

Preconditions are checked in a fixed order, each its own failure:
1. reason length
2. patient name
3. slot legality for the date
4. slot strictly in the future (and within the booking horizon)
5. slot free - checked and reserved atomically by the store
"""
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, Union

from clinic_scheduler import config
from clinic_scheduler.errors import ConflictError, ValidationError
from clinic_scheduler.logging_config import get_logger
from clinic_scheduler.models import Appointment
from clinic_scheduler.schedule_rules import is_weekend, parse_date, resolve_config
from clinic_scheduler.slots import is_valid_slot, slot_datetime
from clinic_scheduler.state import AppointmentStatus
from clinic_scheduler.store import AppointmentStore

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def validate_reason(reason: str) -> str:
    """
    Validate and normalize the visit reason.

    Returns:
        Trimmed reason

    Raises:
        ValidationError: If shorter than MIN_REASON_LENGTH or longer than MAX_REASON_LENGTH
    """
    trimmed = (reason or "").strip()
    if len(trimmed) < config.MIN_REASON_LENGTH:
        raise ValidationError("reason too short")
    if len(trimmed) > config.MAX_REASON_LENGTH:
        raise ValidationError("reason too long")
    return trimmed


def validate_patient_name(name: str) -> str:
    """Validate and normalize the name of the person being seen."""
    trimmed = (name or "").strip()
    if not trimmed or len(trimmed) > config.MAX_PATIENT_NAME_LENGTH:
        raise ValidationError("patient name required")
    return trimmed


def validate_slot(target_date: Union[date, str], slot: str, now: datetime) -> date:
    """
    Validate that (date, slot) is a bookable future slot.

    Args:
        target_date: date object or ISO string
        slot: "HH:MM" string
        now: Timestamp of the booking action

    Returns:
        Parsed date

    Raises:
        ValidationError: "invalid slot", "past date/time" or "beyond booking horizon"
    """
    day = parse_date(target_date)

    if not is_valid_slot(day, slot):
        raise ValidationError("invalid slot")

    if slot_datetime(day, slot) <= now:
        raise ValidationError("past date/time")

    if day > now.date() + timedelta(days=config.BOOKING_HORIZON_DAYS):
        raise ValidationError("beyond booking horizon")

    return day


class BookingService:
    """Create appointments on free, legal, future slots."""

    def __init__(self, store: AppointmentStore, clock: Clock = datetime.now):
        """
        Args:
            store: Appointment store
            clock: Returns the current local time (injectable for tests)
        """
        self.store = store
        self.clock = clock

    def book(
        self,
        account_id: str,
        subject_name: str,
        target_date: Union[date, str],
        slot: str,
        reason: str
    ) -> Appointment:
        """
        Book a slot.

        Args:
            account_id: Owning account
            subject_name: Person being seen (account holder or a dependent)
            target_date: date object or ISO string
            slot: "HH:MM" string
            reason: Visit reason, at least 10 characters after trimming

        Returns:
            Created appointment, status pending

        Raises:
            ValidationError: If any precondition fails
            ConflictError: If the slot was taken
            InfrastructureError: If the store stays unavailable
        """
        trimmed_reason = validate_reason(reason)
        patient_name = validate_patient_name(subject_name)
        now = self.clock()
        day = validate_slot(target_date, slot, now)

        record = {
            "id": str(uuid.uuid4()),
            "patient_id": account_id,
            "patient_name": patient_name,
            "date": day,
            "time": slot,
            "reason": trimmed_reason,
            "status": AppointmentStatus.PENDING.value,
            "requires_approval": resolve_config(day).approval_required,
            "is_weekend": is_weekend(day),
            "created_at": now,
            "updated_at": now,
        }

        try:
            appointment = self.store.reserve(record)
        except ConflictError:
            logger.warning("slot_conflict", account_id=account_id, date=day.isoformat(), time=slot)
            raise

        logger.info(
            "appointment_booked",
            appointment_id=appointment.id,
            account_id=account_id,
            date=day.isoformat(),
            time=slot,
            requires_approval=appointment.requires_approval,
        )
        return appointment
