# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from sportspot.models.booking import Booking  # noqa: F401
from sportspot.models.operating_hours import OperatingHours  # noqa: F401
from sportspot.models.pricing_rule import PricingRule  # noqa: F401
from sportspot.models.slot import Slot  # noqa: F401
from sportspot.models.sport import Sport  # noqa: F401
from sportspot.models.venue import Venue  # noqa: F401
from sportspot.models.venue_sport import VenueSport  # noqa: F401
