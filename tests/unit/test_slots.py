"""Unit tests for slot generation and validation."""
from datetime import datetime

import pytest

from clinic_scheduler.errors import ValidationError
from clinic_scheduler.slots import generate_slots, is_valid_slot, parse_slot, slot_datetime

MONDAY = "2025-03-10"
FRIDAY = "2025-03-14"
SATURDAY = "2025-03-15"
SUNDAY = "2025-03-16"


@pytest.mark.parametrize("day", [MONDAY, FRIDAY])
def test_weekday_slots(day):
    assert generate_slots(day) == ["18:00", "18:30", "19:00", "19:30", "20:00", "20:30"]


@pytest.mark.parametrize("day", [SATURDAY, SUNDAY])
def test_weekend_slots(day):
    slots = generate_slots(day)

    assert len(slots) == 20
    assert slots[0] == "10:00"
    assert slots[-1] == "19:30"


def test_slots_are_chronological():
    slots = generate_slots(SATURDAY)
    assert slots == sorted(slots)


def test_generation_is_idempotent():
    assert generate_slots(SATURDAY) == generate_slots(SATURDAY)


@pytest.mark.parametrize("day, slot, expected", [
    (MONDAY, "18:00", True),
    (MONDAY, "20:30", True),
    (MONDAY, "17:30", False),   # before opening
    (MONDAY, "21:00", False),   # closing hour is exclusive
    (MONDAY, "18:15", False),   # off cadence
    (MONDAY, "10:00", False),   # weekend hours on a weekday
    (SATURDAY, "10:00", True),
    (SATURDAY, "19:30", True),
    (SATURDAY, "20:00", False),
    (SATURDAY, "9:30", False),  # not zero-padded
    (SATURDAY, "noon", False),
    (SATURDAY, "", False),
])
def test_is_valid_slot(day, slot, expected):
    assert is_valid_slot(day, slot) is expected


def test_every_generated_slot_is_valid():
    for day in (MONDAY, SATURDAY):
        assert all(is_valid_slot(day, slot) for slot in generate_slots(day))


def test_parse_slot_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_slot("25:00")


def test_slot_datetime_combines_date_and_time():
    assert slot_datetime(MONDAY, "19:30") == datetime(2025, 3, 10, 19, 30)
