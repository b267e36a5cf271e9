"""Day-of-week schedule rules.

Rules:
- Monday to Friday: 18:00 - 21:00 (confirmed without doctor approval)
- Saturday and Sunday: 10:00 - 20:00 (doctor approval required)

This table is the only place opening hours and the approval policy are
defined; slot generation, booking and display all derive from it.
"""
from datetime import date, datetime
from typing import Union

from clinic_scheduler.errors import ValidationError
from clinic_scheduler.models import ScheduleConfig

WEEKDAY_CONFIG = ScheduleConfig(open_hour=18, close_hour=21, approval_required=False)
WEEKEND_CONFIG = ScheduleConfig(open_hour=10, close_hour=20, approval_required=True)

SATURDAY = 5  # date.weekday(): Monday == 0


def parse_date(value: Union[date, str]) -> date:
    """
    Normalize a calendar date.

    Args:
        value: date object or ISO string (YYYY-MM-DD)

    Returns:
        datetime.date

    Raises:
        ValidationError: If the string is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"invalid date: {value!r} (use YYYY-MM-DD)")


def is_weekend(target_date: Union[date, str]) -> bool:
    """Check whether a date falls on Saturday or Sunday."""
    return parse_date(target_date).weekday() >= SATURDAY


def resolve_config(target_date: Union[date, str]) -> ScheduleConfig:
    """
    Get the schedule configuration for a date.

    Args:
        target_date: date object or ISO string

    Returns:
        WEEKEND_CONFIG on Saturday/Sunday, WEEKDAY_CONFIG otherwise
    """
    if is_weekend(target_date):
        return WEEKEND_CONFIG
    return WEEKDAY_CONFIG


def format_time_12h(time_24h: str) -> str:
    """Convert 24h time to 12h format."""
    hour, minute = map(int, time_24h.split(":"))
    period = "AM" if hour < 12 else "PM"
    hour_12 = hour if hour <= 12 else hour - 12
    hour_12 = 12 if hour_12 == 0 else hour_12
    return f"{hour_12}:{minute:02d} {period}"


def describe_schedule(target_date: Union[date, str]) -> str:
    """
    Human-readable opening hours for a date.

    Example:
        >>> describe_schedule("2025-03-15")
        'Saturday: 10:00 AM - 8:00 PM (requires doctor approval)'
    """
    day = parse_date(target_date)
    config = resolve_config(day)
    opens = format_time_12h(f"{config.open_hour}:00")
    closes = format_time_12h(f"{config.close_hour}:00")
    policy = "requires doctor approval" if config.approval_required else "automatic confirmation"
    return f"{day.strftime('%A')}: {opens} - {closes} ({policy})"
