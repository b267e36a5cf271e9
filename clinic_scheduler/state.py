"""Appointment state machine.

States:
- pending (initial): slot held, waiting for confirmation
- accepted: confirmed by an approver; may still be cancelled
- rejected, cancelled: terminal, slot released

Rescheduling is not a transition: it is the only operation that moves an
appointment back to pending, and it always changes the slot at the same time
(see rescheduling.py).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from clinic_scheduler.errors import InvalidTransitionError, PermissionDeniedError


class AppointmentStatus(str, Enum):
    """Persisted appointment status."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def holds_slot(self) -> bool:
        """Pending and accepted appointments consume their slot."""
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.REJECTED, AppointmentStatus.CANCELLED)


ACTIVE_STATUSES: FrozenSet[AppointmentStatus] = frozenset({
    AppointmentStatus.PENDING,
    AppointmentStatus.ACCEPTED,
})


class Action(str, Enum):
    """Actions that move an appointment between states."""
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"


class Role(str, Enum):
    """Roles supplied by the external identity provider."""
    PATIENT = "patient"
    DOCTOR = "doctor"


@dataclass(frozen=True)
class Actor:
    """Acting account, as resolved by the auth layer."""
    account_id: str
    role: Role

    @property
    def is_approver(self) -> bool:
        return self.role == Role.DOCTOR


# (current state, action) -> next state
VALID_TRANSITIONS: Dict[Tuple[AppointmentStatus, Action], AppointmentStatus] = {
    (AppointmentStatus.PENDING, Action.ACCEPT): AppointmentStatus.ACCEPTED,
    (AppointmentStatus.PENDING, Action.REJECT): AppointmentStatus.REJECTED,
    (AppointmentStatus.PENDING, Action.CANCEL): AppointmentStatus.CANCELLED,
    (AppointmentStatus.ACCEPTED, Action.CANCEL): AppointmentStatus.CANCELLED,
}

# Actions only approvers may take; everything else is also open to the owner
APPROVER_ONLY_ACTIONS: FrozenSet[Action] = frozenset({Action.ACCEPT, Action.REJECT})


def validate_transition(current: AppointmentStatus, action: Action) -> bool:
    """
    Validate state transition.

    Example:
        >>> validate_transition(AppointmentStatus.PENDING, Action.ACCEPT)
        True
        >>> validate_transition(AppointmentStatus.REJECTED, Action.CANCEL)
        False
    """
    return (current, action) in VALID_TRANSITIONS


def next_status(current: AppointmentStatus, action: Action) -> AppointmentStatus:
    """
    Resolve the state an action leads to.

    Raises:
        InvalidTransitionError: If no transition is defined for the pair
    """
    try:
        return VALID_TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidTransitionError(
            f"cannot {action.value} an appointment that is {current.value}"
        )


def authorize(actor: Actor, action: Action, owner_id: str) -> None:
    """
    Check that an actor may take an action on an appointment.

    Approvers may take any action. Owners may only cancel their own
    appointments.

    Raises:
        PermissionDeniedError: If the actor lacks role or ownership
    """
    if actor.is_approver:
        return

    if action in APPROVER_ONLY_ACTIONS:
        raise PermissionDeniedError(f"only a doctor can {action.value} appointments")

    if actor.account_id != owner_id:
        raise PermissionDeniedError("appointment belongs to another account")


def authorize_owner_or_approver(actor: Actor, owner_id: str) -> None:
    """Check read/reschedule access: approvers, or the owning account."""
    if actor.is_approver or actor.account_id == owner_id:
        return
    raise PermissionDeniedError("appointment belongs to another account")
