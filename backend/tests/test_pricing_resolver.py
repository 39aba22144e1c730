"""Pricing rule precedence: one price per slot, first match wins."""
from sportspot.models.pricing_rule import PricingRule
from sportspot.services.pricing_resolver import find_matching_rule, resolve_price


def rule(day_group, price, time_range=None, is_morning=False):
    return PricingRule(venue_id=1, day_group=day_group, time_range=time_range, is_morning=is_morning, price=price)


def test_exact_day_beats_group_and_time_range():
    rules = [
        rule("weekday", 800, time_range="16-19"),
        rule("all", 600),
        rule("monday", 900),
    ]
    assert resolve_price(rules, "monday", 17, is_morning=False) == 900


def test_group_with_time_range_beats_plain_time_range():
    rules = [
        rule("weekend", 700, time_range="16-19"),
        rule("weekday", 800, time_range="16-19"),
    ]
    assert resolve_price(rules, "tuesday", 16, is_morning=False) == 800
    assert resolve_price(rules, "saturday", 16, is_morning=False) == 700


def test_any_time_range_beats_all_days_rule():
    rules = [rule("all", 600), rule("weekend", 750, time_range="18-22")]
    # Weekend range still matches on a weekday once group matching fails
    assert resolve_price(rules, "wednesday", 19, is_morning=False) == 750
    assert resolve_price(rules, "wednesday", 14, is_morning=False) == 600


def test_rules_for_other_half_of_day_are_ignored():
    rules = [rule("monday", 900, is_morning=True), rule("all", 400, is_morning=False)]
    assert resolve_price(rules, "monday", 8, is_morning=True) == 900
    assert resolve_price(rules, "monday", 14, is_morning=False) == 400


def test_no_matching_rule_falls_back_to_default():
    assert find_matching_rule([], "friday", 10, is_morning=True) is None
    assert resolve_price([], "friday", 10, is_morning=True) == 500

    morning_only = [rule("all", 300, is_morning=True)]
    assert resolve_price(morning_only, "friday", 20, is_morning=False) == 500


def test_all_days_aliases_match():
    assert resolve_price([rule("Daily", 650)], "sunday", 13, is_morning=False) == 650
    assert resolve_price([rule("all days", 450)], "sunday", 13, is_morning=False) == 450


def test_first_rule_in_order_wins_within_a_tier():
    rules = [rule("weekday", 810, time_range="10-14"), rule("weekday", 820, time_range="12-16")]
    assert resolve_price(rules, "monday", 13, is_morning=False) == 810


def test_wrapped_time_range_prices_late_slots():
    rules = [rule("all", 500), rule("weekend", 1200, time_range="22-2")]
    assert resolve_price(rules, "saturday", 23, is_morning=False) == 1200
    assert resolve_price(rules, "saturday", 1, is_morning=False) == 1200
    assert resolve_price(rules, "saturday", 3, is_morning=False) == 500


def test_repeated_lookups_agree():
    rules = [
        rule("weekend", 700, time_range="16-19"),
        rule("weekday", 800, time_range="16-19"),
        rule("all", 600, is_morning=True),
        rule("all", 500),
    ]
    for day_name, hour, is_morning in [("monday", 17, False), ("sunday", 16, False), ("friday", 8, True)]:
        prices = {resolve_price(rules, day_name, hour, is_morning) for _ in range(5)}
        assert len(prices) == 1
    assert resolve_price(rules, "monday", 17, False) == 800
