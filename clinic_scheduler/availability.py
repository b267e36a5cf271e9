"""Slot availability.

Read-only view used to populate slot pickers. It is advisory: the
no-double-booking guarantee comes from the store's atomic reserve, not
from this read.
"""
from datetime import date
from typing import List, Optional, Set, Union

from clinic_scheduler.schedule_rules import parse_date
from clinic_scheduler.slots import generate_slots
from clinic_scheduler.store import AppointmentStore


class AvailabilityResolver:
    """Subtract booked slots from the generated slots of a date."""

    def __init__(self, store: AppointmentStore):
        self.store = store

    def booked_slots(
        self,
        target_date: Union[date, str],
        exclude_appointment_id: Optional[str] = None
    ) -> Set[str]:
        """
        Get slot times held by pending/accepted appointments on a date.

        Args:
            target_date: date object or ISO string
            exclude_appointment_id: Appointment whose own slot counts as free
                (used while editing that appointment)

        Returns:
            Set of "HH:MM" strings
        """
        return {
            appointment.time
            for appointment in self.store.query(parse_date(target_date))
            if appointment.id != exclude_appointment_id
        }

    def available_slots(
        self,
        target_date: Union[date, str],
        exclude_appointment_id: Optional[str] = None
    ) -> List[str]:
        """
        Get free slots for a date.

        Args:
            target_date: date object or ISO string
            exclude_appointment_id: See booked_slots

        Returns:
            Ascending list of "HH:MM" strings not held by an active appointment
        """
        day = parse_date(target_date)
        # O(1) lookup per slot
        booked = self.booked_slots(day, exclude_appointment_id)
        return [slot for slot in generate_slots(day) if slot not in booked]
