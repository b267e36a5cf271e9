"""Slot generation.

Slots are "HH:MM" strings at a fixed 30-minute cadence between the opening
and closing hour of a date's schedule. Zero-padded strings sort the same way
lexicographically and chronologically.
"""
from datetime import date, datetime, time
from typing import List, Union

from clinic_scheduler import config
from clinic_scheduler.errors import ValidationError
from clinic_scheduler.schedule_rules import parse_date, resolve_config


def generate_slots(target_date: Union[date, str]) -> List[str]:
    """
    Generate candidate slot start times for a date.

    Args:
        target_date: date object or ISO string

    Returns:
        Ascending list of "HH:MM" strings, e.g. 18:00 ... 20:30 on weekdays
    """
    schedule = resolve_config(target_date)
    slots = []
    for hour in range(schedule.open_hour, schedule.close_hour):
        for minute in range(0, 60, config.SLOT_MINUTES):
            slots.append(f"{hour:02d}:{minute:02d}")
    return slots


def parse_slot(value: str) -> time:
    """
    Parse an "HH:MM" slot string.

    Raises:
        ValidationError: If the value is not a zero-padded 24h time
    """
    try:
        parsed = datetime.strptime(value, "%H:%M").time()
    except (TypeError, ValueError):
        raise ValidationError("invalid slot")
    if parsed.strftime("%H:%M") != value:
        raise ValidationError("invalid slot")
    return parsed


def is_valid_slot(target_date: Union[date, str], slot: str) -> bool:
    """
    Check that a slot could have been produced by generate_slots.

    Args:
        target_date: date object or ISO string
        slot: "HH:MM" string

    Returns:
        True if minute is on the slot cadence and hour is within opening hours
    """
    try:
        parsed = parse_slot(slot)
    except ValidationError:
        return False

    if parsed.minute % config.SLOT_MINUTES != 0:
        return False

    schedule = resolve_config(parse_date(target_date))
    return schedule.open_hour <= parsed.hour < schedule.close_hour


def slot_datetime(target_date: Union[date, str], slot: str) -> datetime:
    """Combine a date and slot into a naive local datetime."""
    return datetime.combine(parse_date(target_date), parse_slot(slot))
