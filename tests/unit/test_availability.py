"""Unit tests for availability resolution."""
from datetime import date

from clinic_scheduler.availability import AvailabilityResolver
from clinic_scheduler.state import Action
from clinic_scheduler.slots import generate_slots

MONDAY = "2025-03-10"
SATURDAY = "2025-03-15"


def test_empty_day_offers_every_slot(store):
    resolver = AvailabilityResolver(store)

    assert resolver.available_slots(MONDAY) == generate_slots(MONDAY)
    assert len(resolver.available_slots(SATURDAY)) == 20


def test_booked_slot_is_removed(store, book):
    book(date=MONDAY, time="19:00")
    resolver = AvailabilityResolver(store)

    assert resolver.available_slots(MONDAY) == ["18:00", "18:30", "19:30", "20:00", "20:30"]
    assert resolver.booked_slots(date(2025, 3, 10)) == {"19:00"}


def test_bookings_on_other_dates_do_not_count(store, book):
    book(date="2025-03-11", time="19:00")

    assert "19:00" in AvailabilityResolver(store).available_slots(MONDAY)


def test_accepted_appointment_still_holds_slot(store, scheduler, book, doctor):
    appointment = book(date=SATURDAY, time="11:00")
    scheduler.transition(appointment.id, doctor, Action.ACCEPT)

    assert "11:00" not in AvailabilityResolver(store).available_slots(SATURDAY)


def test_cancelled_slot_reappears(store, scheduler, book, patient):
    appointment = book(date=MONDAY, time="19:00")
    scheduler.transition(appointment.id, patient, Action.CANCEL)

    assert "19:00" in AvailabilityResolver(store).available_slots(MONDAY)


def test_rejected_slot_reappears(store, scheduler, book, doctor):
    appointment = book(date=SATURDAY, time="11:00")
    scheduler.transition(appointment.id, doctor, Action.REJECT)

    assert "11:00" in AvailabilityResolver(store).available_slots(SATURDAY)


def test_excluded_appointment_slot_counts_as_free(store, book):
    mine = book(date=MONDAY, time="19:00")
    book(date=MONDAY, time="20:00", account_id="patient-002")
    resolver = AvailabilityResolver(store)

    slots = resolver.available_slots(MONDAY, exclude_appointment_id=mine.id)

    assert "19:00" in slots
    assert "20:00" not in slots


def test_result_stays_chronological(store, book):
    for slot in ("20:30", "18:00", "19:30"):
        book(date=MONDAY, time=slot)

    assert AvailabilityResolver(store).available_slots(MONDAY) == ["18:30", "19:00", "20:00"]


def test_repeated_reads_agree(store, book):
    """Reading availability twice with no booking in between gives the same slots."""
    book(date=MONDAY, time="19:00")
    resolver = AvailabilityResolver(store)

    first = resolver.available_slots(MONDAY)
    second = resolver.available_slots(MONDAY)

    assert first == second
    assert "19:00" not in first
