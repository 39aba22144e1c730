from sportspot.models.booking import Booking
from sportspot.models.operating_hours import OperatingHours
from sportspot.models.pricing_rule import PricingRule
from sportspot.models.slot import Slot
from sportspot.models.sport import Sport
from sportspot.models.venue import Venue
from sportspot.models.venue_sport import VenueSport

__all__ = [
    "Venue",
    "Sport",
    "VenueSport",
    "OperatingHours",
    "PricingRule",
    "Slot",
    "Booking",
]
