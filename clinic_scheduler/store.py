"""Appointment record store.

Pattern: Thin wrapper around SQLAlchemy for appointment persistence.

Every method is one round trip inside one transaction, retried with
exponential backoff only on transient infrastructure failures. The
check-then-write steps (reserve, move, status change) run inside a single
transaction and are backed by the partial unique index on (date, time), so
two concurrent writers can never both hold the same slot.
"""
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import create_engine, select, update
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session as SQLSession, sessionmaker
from sqlalchemy.pool import StaticPool
from tenacity import Retrying

from clinic_scheduler import config
from clinic_scheduler.database_models import AppointmentRecord, Base
from clinic_scheduler.errors import (
    ConflictError,
    InfrastructureError,
    InvalidTransitionError,
    NotFoundError,
)
from clinic_scheduler.models import Appointment
from clinic_scheduler.retry_policy import build_retrying
from clinic_scheduler.state import ACTIVE_STATUSES, AppointmentStatus

SLOT_TAKEN = "slot no longer available"


def _engine_options(database_url: str, timeout: float) -> Dict[str, Any]:
    """Per-backend options that bound every round trip by `timeout` seconds."""
    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        options: Dict[str, Any] = {
            "connect_args": {"timeout": timeout, "check_same_thread": False}
        }
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise each thread sees its own empty DB
            options["poolclass"] = StaticPool
        return options

    if backend == "postgresql":
        return {
            "pool_timeout": timeout,
            "connect_args": {"options": f"-c statement_timeout={int(timeout * 1000)}"},
        }

    return {"pool_timeout": timeout}


class AppointmentStore:
    """
    Persistent appointment records.

    Responsibilities:
    - Atomically reserve a slot when creating an appointment
    - Atomically move an appointment to another slot
    - Conditionally swap an appointment's status
    - Query appointments by date and status
    """

    def __init__(
        self,
        database_url: str = config.DATABASE_URL,
        timeout: float = config.STORE_TIMEOUT_SECONDS,
        retrying: Optional[Retrying] = None,
    ):
        """
        Initialize the store and create tables if needed.

        Args:
            database_url: SQLAlchemy connection string
            timeout: Seconds to wait on locks/connections before failing
            retrying: Retry controller (default: retry_policy.build_retrying())
        """
        self.engine = create_engine(
            database_url,
            pool_pre_ping=True,
            **_engine_options(database_url, timeout)
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._retrying = retrying or build_retrying()

    def _call(self, fn, *args, **kwargs):
        # copy(): tenacity keeps per-call state on the controller
        return self._retrying.copy()(fn, *args, **kwargs)

    @contextmanager
    def _transaction(self):
        """Yield a session inside one transaction, translating driver errors."""
        try:
            with self.SessionLocal() as db:
                with db.begin():
                    yield db
        except IntegrityError as e:
            raise ConflictError(SLOT_TAKEN) from e
        except (OperationalError, DBAPIError, PoolTimeoutError) as e:
            raise InfrastructureError(f"appointment store unavailable: {e.__class__.__name__}") from e

    @staticmethod
    def _slot_holder(
        db: SQLSession,
        target_date: date,
        slot: str,
        exclude_id: Optional[str] = None
    ) -> Optional[AppointmentRecord]:
        """Return the active appointment holding (date, slot), if any."""
        stmt = select(AppointmentRecord).where(
            AppointmentRecord.date == target_date,
            AppointmentRecord.time == slot,
            AppointmentRecord.status.in_([s.value for s in ACTIVE_STATUSES]),
        )
        if exclude_id:
            stmt = stmt.where(AppointmentRecord.id != exclude_id)
        return db.execute(stmt).scalars().first()

    # ===== WRITES =====

    def reserve(self, record: Dict[str, Any]) -> Appointment:
        """
        Create an appointment, reserving its slot.

        Args:
            record: Column values for the new row (id, date, time, status, ...)

        Returns:
            The created appointment

        Raises:
            ConflictError: If an active appointment already holds the slot
            InfrastructureError: If the store stays unavailable after retries
        """
        return self._call(self._reserve, record)

    def _reserve(self, record: Dict[str, Any]) -> Appointment:
        with self._transaction() as db:
            if self._slot_holder(db, record["date"], record["time"]) is not None:
                raise ConflictError(SLOT_TAKEN)
            row = AppointmentRecord(**record)
            db.add(row)
            db.flush()
            return Appointment.model_validate(row)

    def move(self, appointment_id: str, changes: Dict[str, Any]) -> Appointment:
        """
        Move an appointment to another slot.

        The appointment's own current reservation never conflicts with
        its new slot.

        Args:
            appointment_id: Appointment to move
            changes: Column values to write; must include date and time

        Raises:
            NotFoundError: If the appointment doesn't exist
            ConflictError: If another active appointment holds the new slot
        """
        return self._call(self._move, appointment_id, changes)

    def _move(self, appointment_id: str, changes: Dict[str, Any]) -> Appointment:
        with self._transaction() as db:
            row = db.get(AppointmentRecord, appointment_id)
            if row is None:
                raise NotFoundError(f"appointment {appointment_id} not found")

            holder = self._slot_holder(
                db, changes["date"], changes["time"], exclude_id=appointment_id
            )
            if holder is not None:
                raise ConflictError(SLOT_TAKEN)

            for field, value in changes.items():
                setattr(row, field, value)
            db.flush()
            return Appointment.model_validate(row)

    def update_status(
        self,
        appointment_id: str,
        expected: AppointmentStatus,
        new_status: AppointmentStatus,
        changes: Optional[Dict[str, Any]] = None
    ) -> Appointment:
        """
        Swap status only if the appointment is still in `expected`.

        Args:
            appointment_id: Appointment to update
            expected: Status the caller based its decision on
            new_status: Status to write
            changes: Extra column values (updated_at, doctor_notes)

        Raises:
            NotFoundError: If the appointment doesn't exist
            InvalidTransitionError: If the status changed concurrently
        """
        return self._call(self._update_status, appointment_id, expected, new_status, changes or {})

    def _update_status(self, appointment_id, expected, new_status, changes) -> Appointment:
        with self._transaction() as db:
            result = db.execute(
                update(AppointmentRecord)
                .where(
                    AppointmentRecord.id == appointment_id,
                    AppointmentRecord.status == expected.value,
                )
                .values(status=new_status.value, **changes)
                .execution_options(synchronize_session=False)
            )

            row = db.get(AppointmentRecord, appointment_id, populate_existing=True)
            if row is None:
                raise NotFoundError(f"appointment {appointment_id} not found")
            if result.rowcount == 0:
                raise InvalidTransitionError(
                    f"appointment is now {row.status}, expected {expected.value}"
                )
            return Appointment.model_validate(row)

    # ===== READS =====

    def get(self, appointment_id: str) -> Appointment:
        """
        Get appointment by id.

        Raises:
            NotFoundError: If the appointment doesn't exist
        """
        return self._call(self._get, appointment_id)

    def _get(self, appointment_id: str) -> Appointment:
        with self._transaction() as db:
            row = db.get(AppointmentRecord, appointment_id)
            if row is None:
                raise NotFoundError(f"appointment {appointment_id} not found")
            return Appointment.model_validate(row)

    def query(
        self,
        target_date: date,
        statuses: Iterable[AppointmentStatus] = ACTIVE_STATUSES
    ) -> List[Appointment]:
        """
        Get appointments on a date whose status is in `statuses`.

        Args:
            target_date: Calendar date
            statuses: Statuses to include (default: pending + accepted)

        Returns:
            Appointments ordered by time
        """
        return self._call(self._query, target_date, list(statuses))

    def _query(self, target_date: date, statuses: List[AppointmentStatus]) -> List[Appointment]:
        with self._transaction() as db:
            rows = db.execute(
                select(AppointmentRecord)
                .where(
                    AppointmentRecord.date == target_date,
                    AppointmentRecord.status.in_([s.value for s in statuses]),
                )
                .order_by(AppointmentRecord.time)
            ).scalars().all()
            return [Appointment.model_validate(row) for row in rows]

    def list_appointments(self, patient_id: Optional[str] = None) -> List[Appointment]:
        """
        List appointments ordered by date then time.

        Args:
            patient_id: Only this account's appointments (default: all)
        """
        return self._call(self._list_appointments, patient_id)

    def _list_appointments(self, patient_id: Optional[str]) -> List[Appointment]:
        with self._transaction() as db:
            stmt = select(AppointmentRecord).order_by(
                AppointmentRecord.date, AppointmentRecord.time
            )
            if patient_id is not None:
                stmt = stmt.where(AppointmentRecord.patient_id == patient_id)
            return [Appointment.model_validate(row) for row in db.execute(stmt).scalars().all()]

    def close(self):
        """Dispose of pooled connections."""
        self.engine.dispose()
