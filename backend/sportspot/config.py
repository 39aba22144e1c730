"""
Booking configuration for slot generation and pricing.

Values come from the environment (a .env file is honoured) and are frozen
for the lifetime of the process.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the slot/pricing engine.

    Attributes:
        slot_minutes: Length of one bookable slot
        insert_batch_size: Rows per write when persisting a generated day
        default_slot_price: Price used when no pricing rule matches
    """

    slot_minutes: int = 30
    insert_batch_size: int = 10
    default_slot_price: int = 500

    def __post_init__(self):
        if self.slot_minutes <= 0 or (24 * 60) % self.slot_minutes != 0:
            raise ValueError(f"slot_minutes must divide a day evenly, got {self.slot_minutes}")
        if self.insert_batch_size < 1:
            raise ValueError("insert_batch_size must be >= 1")
        if self.default_slot_price <= 0:
            raise ValueError("default_slot_price must be positive")


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get the process-wide booking config (cached)."""
    return BookingConfig(
        slot_minutes=int(os.getenv("SLOT_MINUTES", "30")),
        insert_batch_size=int(os.getenv("INSERT_BATCH_SIZE", "10")),
        default_slot_price=int(os.getenv("DEFAULT_SLOT_PRICE", "500")),
    )
