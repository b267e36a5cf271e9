"""Rescheduling service.

A changed slot is a new scheduling decision: the appointment goes back to
pending and its approval flags are recomputed for the new date, whatever
its previous status was.
"""
from datetime import date, datetime
from typing import Optional, Union

from clinic_scheduler.booking import Clock, validate_reason, validate_slot
from clinic_scheduler.errors import ConflictError
from clinic_scheduler.logging_config import get_logger
from clinic_scheduler.models import Appointment
from clinic_scheduler.schedule_rules import is_weekend, resolve_config
from clinic_scheduler.state import Actor, AppointmentStatus, authorize_owner_or_approver
from clinic_scheduler.store import AppointmentStore

logger = get_logger(__name__)


class ReschedulingService:
    """Move an existing appointment to another slot."""

    def __init__(self, store: AppointmentStore, clock: Clock = datetime.now):
        self.store = store
        self.clock = clock

    def reschedule(
        self,
        appointment_id: str,
        new_date: Union[date, str],
        new_time: str,
        new_reason: str,
        actor: Optional[Actor] = None
    ) -> Appointment:
        """
        Reschedule an appointment.

        Args:
            appointment_id: Appointment to move
            new_date: date object or ISO string
            new_time: "HH:MM" string
            new_reason: Visit reason, at least 10 characters after trimming
            actor: Acting account; when given, must own the appointment or be
                an approver

        Returns:
            Updated appointment, status pending

        Raises:
            NotFoundError: If the appointment doesn't exist
            PermissionDeniedError: If the actor may not touch the appointment
            ValidationError: If any booking precondition fails
            ConflictError: If another active appointment holds the new slot
        """
        if actor is not None:
            current = self.store.get(appointment_id)
            authorize_owner_or_approver(actor, current.patient_id)

        reason = validate_reason(new_reason)
        now = self.clock()
        day = validate_slot(new_date, new_time, now)

        changes = {
            "date": day,
            "time": new_time,
            "reason": reason,
            "status": AppointmentStatus.PENDING.value,
            "requires_approval": resolve_config(day).approval_required,
            "is_weekend": is_weekend(day),
            "updated_at": now,
            "rescheduled_at": now,
        }

        try:
            appointment = self.store.move(appointment_id, changes)
        except ConflictError:
            logger.warning(
                "slot_conflict",
                appointment_id=appointment_id,
                date=day.isoformat(),
                time=new_time,
            )
            raise

        logger.info(
            "appointment_rescheduled",
            appointment_id=appointment.id,
            date=day.isoformat(),
            time=new_time,
            requires_approval=appointment.requires_approval,
        )
        return appointment
