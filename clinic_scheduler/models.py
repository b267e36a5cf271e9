"""Value types returned by the scheduling engine."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from clinic_scheduler.state import AppointmentStatus


@dataclass(frozen=True)
class ScheduleConfig:
    """Opening hours and approval policy for one calendar date."""
    open_hour: int
    close_hour: int
    approval_required: bool

    def __post_init__(self):
        if not self.open_hour < self.close_hour:
            raise ValueError(
                f"open_hour ({self.open_hour}) must be before close_hour ({self.close_hour})"
            )


class Appointment(BaseModel):
    """Snapshot of a persisted appointment record."""
    id: str
    patient_id: str = Field(..., description="Owning account (may book for dependents)")
    patient_name: str = Field(..., description="Person being seen")
    date: date
    time: str = Field(..., description="Slot start, HH:MM")
    reason: str
    status: AppointmentStatus
    requires_approval: bool
    is_weekend: bool
    doctor_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    rescheduled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def is_active(self) -> bool:
        """True while the appointment holds its slot."""
        return self.status.holds_slot
