"""Shared test fixtures."""
from datetime import datetime, timedelta

import pytest

from clinic_scheduler.retry_policy import build_retrying
from clinic_scheduler.scheduler import AppointmentScheduler
from clinic_scheduler.state import Actor, Role
from clinic_scheduler.store import AppointmentStore

MONDAY = "2025-03-10"
TUESDAY = "2025-03-11"
SATURDAY = "2025-03-15"
SUNDAY = "2025-03-16"
REASON = "Follow-up checkup"


class FakeClock:
    """Controllable replacement for datetime.now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at Saturday 2025-03-01 09:00 local time."""
    return FakeClock(datetime(2025, 3, 1, 9, 0))


@pytest.fixture
def store(tmp_path):
    """File-backed SQLite store (shared by all threads), no retry delays."""
    appointment_store = AppointmentStore(
        database_url=f"sqlite:///{tmp_path / 'clinic.db'}",
        retrying=build_retrying(max_retries=3, min_wait=0, max_wait=0),
    )
    yield appointment_store
    appointment_store.close()


@pytest.fixture
def scheduler(store, clock) -> AppointmentScheduler:
    return AppointmentScheduler(store, clock)


@pytest.fixture
def patient() -> Actor:
    return Actor(account_id="patient-001", role=Role.PATIENT)


@pytest.fixture
def other_patient() -> Actor:
    return Actor(account_id="patient-002", role=Role.PATIENT)


@pytest.fixture
def doctor() -> Actor:
    return Actor(account_id="doctor-001", role=Role.DOCTOR)


@pytest.fixture
def book(scheduler, patient):
    """Book a slot for `patient` with sensible defaults."""
    def _book(date=MONDAY, time="19:00", reason=REASON, name="Maria Lopez", account_id=None):
        return scheduler.book(account_id or patient.account_id, name, date, time, reason)
    return _book
