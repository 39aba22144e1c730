"""Clock-range and day classification helpers used by pricing."""

from datetime import date
from typing import Optional, Tuple, Union

WEEKDAY_GROUP = "weekday"
WEEKEND_GROUP = "weekend"
ALL_DAYS_GROUP = "all"

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# Friday counts as weekend for pricing
WEEKEND_DAYS = frozenset({"friday", "saturday", "sunday"})


def parse_time_range(time_range: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse "A-B" into (A, B) hours, or None if malformed."""
    if not time_range or "-" not in time_range:
        return None
    start_str, _, end_str = time_range.strip().partition("-")
    try:
        start, end = int(start_str), int(end_str)
    except ValueError:
        return None
    if not (0 <= start <= 24 and 0 <= end <= 24):
        return None
    return start, end


def is_time_in_range(hour: int, time_range: Optional[str]) -> bool:
    """True when start <= hour < end; a range with end < start wraps past midnight."""
    bounds = parse_time_range(time_range)
    if bounds is None:
        return False
    start, end = bounds
    if end < start:
        end += 24
        if hour < start:
            hour += 24
    return start <= hour < end


def day_name_of(day: Union[date, str]) -> str:
    if isinstance(day, date):
        return DAY_NAMES[day.weekday()]
    name = day.strip().lower()
    if name not in DAY_NAMES:
        raise ValueError(f"Unknown day of week: '{day}'")
    return name


def day_group_of(day: Union[date, str]) -> str:
    return WEEKEND_GROUP if day_name_of(day) in WEEKEND_DAYS else WEEKDAY_GROUP
