"""Clinic appointment scheduling and slot-allocation engine."""
from clinic_scheduler.scheduler import AppointmentScheduler

__all__ = ["AppointmentScheduler"]
