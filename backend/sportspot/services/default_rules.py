"""
Baseline operating hours and pricing for venues that have none.

Canonical defaults (one policy for every caller):
- morning window 06:00-12:00 and evening window 12:00-23:00, all seven days
- one "all" days rule per half of the day at the configured default price
"""

import logging
from datetime import time
from typing import List

from sportspot.config import get_booking_config
from sportspot.models.operating_hours import OperatingHours
from sportspot.models.pricing_rule import PER_DURATION_30_MIN, PricingRule
from sportspot.services.errors import ProvisioningError
from sportspot.services.time_ranges import ALL_DAYS_GROUP, DAY_NAMES
from sportspot.store import Store

logger = logging.getLogger(__name__)

MORNING_WINDOW = (time(6, 0), time(12, 0))
EVENING_WINDOW = (time(12, 0), time(23, 0))


def default_operating_hours(venue_id: int) -> List[OperatingHours]:
    """Build (without saving) the default windows for every day of the week."""
    windows = []
    for day in DAY_NAMES:
        for (start, end), is_morning in ((MORNING_WINDOW, True), (EVENING_WINDOW, False)):
            windows.append(
                OperatingHours(venue_id=venue_id, day_of_week=day, start_time=start, end_time=end, is_morning=is_morning)
            )
    return windows


def default_pricing_rules(venue_id: int) -> List[PricingRule]:
    """Build (without saving) the flat default pricing rules."""
    price = get_booking_config().default_slot_price
    return [
        PricingRule(
            venue_id=venue_id,
            day_group=ALL_DAYS_GROUP,
            time_range=None,
            is_morning=is_morning,
            price=price,
            per_duration=PER_DURATION_30_MIN,
        )
        for is_morning in (True, False)
    ]


class DefaultRuleProvisioner:
    def __init__(self, store: Store):
        self.store = store

    def ensure_operating_hours(self, venue_id: int) -> bool:
        """Create default windows if the venue has none. Returns True if rows were created.

        Raises:
            ProvisioningError: the insert failed
        """
        existing = self.store.first(OperatingHours, OperatingHours.venue_id == venue_id)
        if existing is not None:
            return False

        try:
            self.store.insert(default_operating_hours(venue_id))
        except Exception as exc:
            logger.exception("Failed to create default operating hours for venue %d", venue_id)
            raise ProvisioningError("Could not set up operating hours for this venue. Please try again later.") from exc

        logger.info(f"Created default operating hours for venue {venue_id}")
        return True

    def ensure_pricing(self, venue_id: int) -> bool:
        """Create default pricing if the venue has none. Returns True if rows were created.

        Raises:
            ProvisioningError: the insert failed
        """
        existing = self.store.first(PricingRule, PricingRule.venue_id == venue_id)
        if existing is not None:
            return False

        try:
            self.store.insert(default_pricing_rules(venue_id))
        except Exception as exc:
            logger.exception("Failed to create default pricing for venue %d", venue_id)
            raise ProvisioningError("Could not set up pricing for this venue. Please try again later.") from exc

        logger.info(f"Created default pricing for venue {venue_id}")
        return True
