"""Unit tests for the appointment state machine."""
import pytest

from clinic_scheduler.errors import InvalidTransitionError, PermissionDeniedError
from clinic_scheduler.state import (
    ACTIVE_STATUSES,
    VALID_TRANSITIONS,
    Action,
    Actor,
    AppointmentStatus,
    Role,
    authorize,
    authorize_owner_or_approver,
    next_status,
    validate_transition,
)

OWNER = Actor(account_id="patient-001", role=Role.PATIENT)
STRANGER = Actor(account_id="patient-002", role=Role.PATIENT)
DOCTOR = Actor(account_id="doctor-001", role=Role.DOCTOR)


def test_pending_transitions():
    assert next_status(AppointmentStatus.PENDING, Action.ACCEPT) == AppointmentStatus.ACCEPTED
    assert next_status(AppointmentStatus.PENDING, Action.REJECT) == AppointmentStatus.REJECTED
    assert next_status(AppointmentStatus.PENDING, Action.CANCEL) == AppointmentStatus.CANCELLED


def test_accepted_can_only_be_cancelled():
    assert next_status(AppointmentStatus.ACCEPTED, Action.CANCEL) == AppointmentStatus.CANCELLED

    for action in (Action.ACCEPT, Action.REJECT):
        with pytest.raises(InvalidTransitionError):
            next_status(AppointmentStatus.ACCEPTED, action)


@pytest.mark.parametrize("status", [AppointmentStatus.REJECTED, AppointmentStatus.CANCELLED])
@pytest.mark.parametrize("action", list(Action))
def test_terminal_states_have_no_transitions(status, action):
    assert status.is_terminal
    assert validate_transition(status, action) is False
    with pytest.raises(InvalidTransitionError):
        next_status(status, action)


def test_no_transition_leads_back_to_pending():
    assert AppointmentStatus.PENDING not in VALID_TRANSITIONS.values()


def test_active_statuses_hold_slots():
    assert ACTIVE_STATUSES == {AppointmentStatus.PENDING, AppointmentStatus.ACCEPTED}
    assert AppointmentStatus.PENDING.holds_slot
    assert not AppointmentStatus.CANCELLED.holds_slot


@pytest.mark.parametrize("action", list(Action))
def test_doctor_may_take_any_action(action):
    authorize(DOCTOR, action, owner_id=OWNER.account_id)


def test_owner_may_cancel():
    authorize(OWNER, Action.CANCEL, owner_id=OWNER.account_id)


@pytest.mark.parametrize("action", [Action.ACCEPT, Action.REJECT])
def test_owner_may_not_approve(action):
    with pytest.raises(PermissionDeniedError):
        authorize(OWNER, action, owner_id=OWNER.account_id)


def test_stranger_may_not_cancel():
    with pytest.raises(PermissionDeniedError):
        authorize(STRANGER, Action.CANCEL, owner_id=OWNER.account_id)


def test_owner_or_approver_access():
    authorize_owner_or_approver(OWNER, OWNER.account_id)
    authorize_owner_or_approver(DOCTOR, OWNER.account_id)
    with pytest.raises(PermissionDeniedError):
        authorize_owner_or_approver(STRANGER, OWNER.account_id)
