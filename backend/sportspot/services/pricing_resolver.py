"""
Slot price resolution.

Exactly one price per (day, start hour, morning/evening) is picked from a
venue's pricing rules, first match wins:

1. rules for the other half of the day (is_morning mismatch) are ignored
2. a rule for this exact day name
3. a weekday/weekend group rule whose time range covers the hour
4. any rule whose time range covers the hour
5. an "all" days rule
6. the configured default price

A missing rule is never an error; booking is not blocked on pricing gaps.
Pure function, no store access.
"""

from datetime import date
from typing import Callable, Iterable, List, Optional, Union

from sportspot.config import get_booking_config
from sportspot.models.pricing_rule import PricingRule
from sportspot.services.time_ranges import ALL_DAYS_GROUP, day_group_of, day_name_of, is_time_in_range

ALL_DAYS_ALIASES = frozenset({ALL_DAYS_GROUP, "all days", "all_days", "all-days", "daily"})


def _group(rule: PricingRule) -> str:
    return (rule.day_group or "").strip().lower()


def _first(rules: List[PricingRule], predicate: Callable[[PricingRule], bool]) -> Optional[PricingRule]:
    return next((rule for rule in rules if predicate(rule)), None)


def find_matching_rule(
    rules: Iterable[PricingRule], day_of_week: Union[date, str], slot_start_hour: int, is_morning: bool
) -> Optional[PricingRule]:
    """Return the rule that prices this slot, or None when the default applies."""
    day_name = day_name_of(day_of_week)
    day_group = day_group_of(day_name)
    candidates = [rule for rule in rules if bool(rule.is_morning) == bool(is_morning)]

    matchers: List[Callable[[PricingRule], bool]] = [
        lambda r: _group(r) == day_name,
        lambda r: _group(r) == day_group and is_time_in_range(slot_start_hour, r.time_range),
        lambda r: is_time_in_range(slot_start_hour, r.time_range),
        lambda r: _group(r) in ALL_DAYS_ALIASES,
    ]
    for matcher in matchers:
        rule = _first(candidates, matcher)
        if rule is not None:
            return rule
    return None


def resolve_price(
    rules: Iterable[PricingRule], day_of_week: Union[date, str], slot_start_hour: int, is_morning: bool
) -> int:
    rule = find_matching_rule(rules, day_of_week, slot_start_hour, is_morning)
    if rule is None:
        return get_booking_config().default_slot_price
    return rule.price
