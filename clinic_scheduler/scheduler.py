"""Scheduling engine facade.

Exposes the operations the surrounding application calls:
- resolve_config / describe_schedule: opening hours for a date
- available_slots: free slots for a date
- book: reserve a slot
- transition: accept / reject / cancel
- reschedule: move to another slot (back to pending)
- get_appointment / list_appointments: reads scoped to the actor
"""
from datetime import date, datetime
from typing import List, Optional, Union

from clinic_scheduler import config
from clinic_scheduler.availability import AvailabilityResolver
from clinic_scheduler.booking import BookingService, Clock
from clinic_scheduler.errors import ValidationError
from clinic_scheduler.logging_config import get_logger
from clinic_scheduler.models import Appointment, ScheduleConfig
from clinic_scheduler.rescheduling import ReschedulingService
from clinic_scheduler.schedule_rules import describe_schedule, resolve_config
from clinic_scheduler.state import (
    Action,
    Actor,
    authorize,
    authorize_owner_or_approver,
    next_status,
)
from clinic_scheduler.store import AppointmentStore

logger = get_logger(__name__)


class AppointmentScheduler:
    """Single entry point wiring rules, availability, booking and state."""

    def __init__(self, store: Optional[AppointmentStore] = None, clock: Clock = datetime.now):
        """
        Args:
            store: Appointment store (default: AppointmentStore(config.DATABASE_URL))
            clock: Returns the current local time (injectable for tests)
        """
        self.store = store or AppointmentStore(config.DATABASE_URL)
        self.clock = clock
        self.availability = AvailabilityResolver(self.store)
        self.booking = BookingService(self.store, clock)
        self.rescheduling = ReschedulingService(self.store, clock)

    def resolve_config(self, target_date: Union[date, str]) -> ScheduleConfig:
        return resolve_config(target_date)

    def describe_schedule(self, target_date: Union[date, str]) -> str:
        return describe_schedule(target_date)

    def available_slots(
        self,
        target_date: Union[date, str],
        exclude_appointment_id: Optional[str] = None
    ) -> List[str]:
        return self.availability.available_slots(target_date, exclude_appointment_id)

    def book(
        self,
        account_id: str,
        subject_name: str,
        target_date: Union[date, str],
        slot: str,
        reason: str
    ) -> Appointment:
        return self.booking.book(account_id, subject_name, target_date, slot, reason)

    def reschedule(
        self,
        appointment_id: str,
        new_date: Union[date, str],
        new_time: str,
        new_reason: str,
        actor: Optional[Actor] = None
    ) -> Appointment:
        return self.rescheduling.reschedule(appointment_id, new_date, new_time, new_reason, actor)

    def transition(
        self,
        appointment_id: str,
        actor: Actor,
        action: Action,
        doctor_notes: Optional[str] = None
    ) -> Appointment:
        """
        Apply accept / reject / cancel.

        Args:
            appointment_id: Appointment to update
            actor: Acting account and role
            action: Action to apply
            doctor_notes: Optional notes, stored only for approvers

        Returns:
            Updated appointment

        Raises:
            NotFoundError: If the appointment doesn't exist
            PermissionDeniedError: If the actor may not take the action
            ValidationError: If the action is not accept, reject or cancel
            InvalidTransitionError: If the action isn't allowed from the
                current status (including a concurrent change)
        """
        try:
            action = Action(action)
        except ValueError:
            raise ValidationError(f"unknown action: {action!r}")
        current = self.store.get(appointment_id)
        authorize(actor, action, current.patient_id)
        target = next_status(current.status, action)

        changes = {"updated_at": self.clock()}
        if doctor_notes and doctor_notes.strip() and actor.is_approver:
            changes["doctor_notes"] = doctor_notes.strip()

        appointment = self.store.update_status(appointment_id, current.status, target, changes)

        logger.info(
            "appointment_transitioned",
            appointment_id=appointment_id,
            action=action.value,
            from_status=current.status.value,
            to_status=target.value,
            actor_role=actor.role.value,
        )
        return appointment

    def get_appointment(self, appointment_id: str, actor: Actor) -> Appointment:
        """Get an appointment the actor is allowed to see."""
        appointment = self.store.get(appointment_id)
        authorize_owner_or_approver(actor, appointment.patient_id)
        return appointment

    def list_appointments(self, actor: Actor) -> List[Appointment]:
        """Approvers see every appointment, owners only their own."""
        if actor.is_approver:
            return self.store.list_appointments()
        return self.store.list_appointments(patient_id=actor.account_id)
