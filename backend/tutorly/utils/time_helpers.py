from datetime import date, datetime, time
from typing import Union


def time_to_string(t: time) -> str:
    """Always return HH:MM format"""
    return t.strftime("%H:%M")


def string_to_time(time_str: str) -> time:
    """Parse HH:MM (or H:MM, HH:MM:SS) into a time."""
    normalized = time_str.strip()
    if len(normalized.split(":")) == 2:
        normalized += ":00"
    return datetime.strptime(normalized, "%H:%M:%S").time()


def time_to_minutes(t: time) -> int:
    """Minutes since midnight."""
    return t.hour * 60 + t.minute


def minutes_to_time(minutes: int) -> time:
    if not 0 <= minutes < 24 * 60:
        raise ValueError(f"minutes out of range: {minutes}")
    return time(minutes // 60, minutes % 60)


def crosses_midnight(start: time, duration_minutes: int) -> bool:
    """True when start + duration ends after 23:59 on the same day.

    An interval ending exactly at 24:00 also counts, since the end time
    would wrap to 00:00 and no longer sort after the start.
    """
    return time_to_minutes(start) + duration_minutes >= 24 * 60


def add_minutes(start: time, duration_minutes: int) -> time:
    """Return start + duration; raises ValueError when the result passes midnight."""
    if crosses_midnight(start, duration_minutes):
        raise ValueError("interval passes midnight")
    return minutes_to_time(time_to_minutes(start) + duration_minutes)


def day_of_week_index(value: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (value.weekday() + 1) % 7


def coerce_date(value: Union[str, date, datetime]) -> date:
    """Accept a date, a datetime or an ISO string and keep only the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if "T" in text or " " in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)
