"""SQLAlchemy database models for the appointment store."""
from sqlalchemy import Boolean, Column, Date, DateTime, Index, String, Text, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Must match state.ACTIVE_STATUSES
ACTIVE_SLOT_PREDICATE = "status IN ('pending', 'accepted')"


class AppointmentRecord(Base):
    """Appointment table.

    The partial unique index is what makes a slot "booked": at most one
    pending/accepted row may exist per (date, time). Rejected and cancelled
    rows fall outside the index and never block a slot.
    """
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True)
    patient_id = Column(String(128), nullable=False, index=True)
    patient_name = Column(String(100), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, index=True)
    requires_approval = Column(Boolean, nullable=False)
    is_weekend = Column(Boolean, nullable=False)
    doctor_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    rescheduled_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "date",
            "time",
            unique=True,
            sqlite_where=text(ACTIVE_SLOT_PREDICATE),
            postgresql_where=text(ACTIVE_SLOT_PREDICATE),
        ),
    )

    def __repr__(self):
        return f"<AppointmentRecord(id={self.id}, date={self.date}, time={self.time}, status={self.status})>"
