"""
Venue-local wall-clock timestamps.

Bookings store `slot_time` as a plain "YYYY-MM-DD HH:MM:SS" string in the
venue's local time. Nothing here converts through UTC or attaches a tzinfo:
the value written is the value compared and the value shown.
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

logger = logging.getLogger(__name__)

SLOT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}:\d{2}$")


def normalize_date(value: Union[date, str, None]) -> Optional[str]:
    """
    Normalize a date to "YYYY-MM-DD".

    Accepts:
      - date objects
      - "2025-03-14"
      - "20250314"

    Returns None if the value can't be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")

    date_str = value.strip()
    if "-" not in date_str:
        if len(date_str) != 8:
            return None
        date_str = f"{date_str[0:4]}-{date_str[4:6]}-{date_str[6:8]}"

    if not _DATE_RE.match(date_str):
        return None
    return date_str


def normalize_time(value: Union[time, str, None]) -> Optional[str]:
    """
    Normalize a clock time to "HH:MM:SS".

    Accepts:
      - time objects
      - "18:30:00", "18:30"
      - "1830", "183000"

    Returns None if the value can't be read as a time.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")

    time_str = value.strip()
    if ":" not in time_str:
        if len(time_str) == 4:
            time_str = f"{time_str[0:2]}:{time_str[2:4]}:00"
        elif len(time_str) == 6:
            time_str = f"{time_str[0:2]}:{time_str[2:4]}:{time_str[4:6]}"
        else:
            return None
    elif time_str.count(":") == 1:
        time_str = f"{time_str}:00"

    if not _TIME_RE.match(time_str):
        return None
    return time_str


def build_slot_time(day: Union[date, str, None], start: Union[time, str, None]) -> Optional[str]:
    """Combine a date and start time into a wall-clock slot_time, or None if invalid."""
    date_str = normalize_date(day)
    time_str = normalize_time(start)
    if date_str is None or time_str is None:
        logger.warning(f"Cannot build slot time from date={day!r} time={start!r}")
        return None

    combined = f"{date_str} {time_str}"
    try:
        datetime.strptime(combined, SLOT_TIME_FORMAT)
    except ValueError:
        logger.warning(f"Invalid date/time combination: {combined}")
        return None
    return combined


def slot_time_of(slot) -> Optional[str]:
    """Wall-clock start of a slot (persisted or synthesized), honouring next_day."""
    day = slot.date
    if getattr(slot, "next_day", False) and isinstance(day, date):
        day = day + timedelta(days=1)
    return build_slot_time(day, slot.start_time)


def wall_clock_now() -> str:
    return datetime.now().strftime(SLOT_TIME_FORMAT)
