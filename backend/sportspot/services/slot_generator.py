"""
Slot generation for a (venue, sport, date).

A day's slots are produced once and then reused by every viewer:
- if any persisted slot exists for the day, the stored set is returned as-is
  (never regenerated, never re-priced)
- otherwise the 30-minute grid is derived from the venue's operating hours and
  priced with the venue's pricing rules, then saved in small batches; starts
  that were already booked are saved unavailable

preview_slots() builds the same grid without writing anything. Its results are
SynthesizedSlot values; consumers tell them apart from persisted Slot rows by
type, never by inspecting an id.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Set, Tuple, Union

from sqlalchemy.exc import IntegrityError

from sportspot.config import BookingConfig, get_booking_config
from sportspot.models.booking import BOOKING_CANCELLED, Booking
from sportspot.models.operating_hours import OperatingHours
from sportspot.models.pricing_rule import PricingRule
from sportspot.models.slot import Slot
from sportspot.services.default_rules import DefaultRuleProvisioner, default_operating_hours, default_pricing_rules
from sportspot.services.pricing_resolver import resolve_price
from sportspot.services.time_ranges import day_name_of
from sportspot.store import Store
from sportspot.utils.wall_clock import slot_time_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynthesizedSlot:
    """A slot computed on demand that has no stored row (yet)."""

    venue_id: int
    sport_id: int
    date: date
    start_time: time
    end_time: time
    price: int
    next_day: bool = False
    available: bool = True


AnySlot = Union[Slot, SynthesizedSlot]


@dataclass
class SlotGenerationResult:
    slots: List[Slot]
    generated: bool  # False when the stored set was returned unchanged
    warnings: List[str] = field(default_factory=list)


def window_bounds(day: date, window: OperatingHours) -> Tuple[datetime, datetime]:
    """Start/end datetimes of a window; an end before the start belongs to the next day."""
    start = datetime.combine(day, window.start_time)
    end = datetime.combine(day, window.end_time)
    if end < start:
        end += timedelta(days=1)
    return start, end


def build_slot_grid(
    venue_id: int,
    sport_id: int,
    day: date,
    windows: Iterable[OperatingHours],
    rules: Iterable[PricingRule],
    slot_minutes: Optional[int] = None,
) -> List[SynthesizedSlot]:
    """Step every window in fixed increments and price each step.

    Only whole steps are emitted. A start already produced by an earlier
    window is skipped so overlapping windows never yield duplicate slots.
    """
    step = timedelta(minutes=slot_minutes or get_booking_config().slot_minutes)
    rules = list(rules)
    day_name = day_name_of(day)

    seen: Set[Tuple[time, bool]] = set()
    slots: List[SynthesizedSlot] = []
    for window in sorted(windows, key=lambda w: (w.start_time, w.end_time)):
        cursor, end = window_bounds(day, window)
        while cursor + step <= end:
            slot_end = cursor + step
            next_day = cursor.date() > day
            key = (cursor.time(), next_day)
            if key not in seen:
                seen.add(key)
                slots.append(
                    SynthesizedSlot(
                        venue_id=venue_id,
                        sport_id=sport_id,
                        date=day,
                        start_time=cursor.time(),
                        end_time=slot_end.time(),
                        price=resolve_price(rules, day_name, cursor.hour, window.is_morning),
                        next_day=next_day,
                    )
                )
            cursor = slot_end

    slots.sort(key=lambda s: (s.next_day, s.start_time))
    return slots


def to_slot_row(slot: SynthesizedSlot) -> Slot:
    return Slot(
        venue_id=slot.venue_id,
        sport_id=slot.sport_id,
        date=slot.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        next_day=slot.next_day,
        price=slot.price,
        available=slot.available,
    )


class SlotGenerator:
    def __init__(self, store: Store, config: Optional[BookingConfig] = None):
        self.store = store
        self.config = config or get_booking_config()

    def persisted_slots(self, venue_id: int, sport_id: int, day: date) -> List[Slot]:
        return self.store.select(
            Slot,
            Slot.venue_id == venue_id,
            Slot.sport_id == sport_id,
            Slot.date == day,
            order_by=(Slot.next_day, Slot.start_time),
        )

    def get_slots(self, venue_id: int, sport_id: int, day: date) -> SlotGenerationResult:
        """
        Return the day's slots, generating and saving them on first request.

        Raises:
            ProvisioningError: default hours/pricing could not be created
        """
        existing = self.persisted_slots(venue_id, sport_id, day)
        if existing:
            return SlotGenerationResult(slots=existing, generated=False)

        provisioner = DefaultRuleProvisioner(self.store)
        provisioner.ensure_operating_hours(venue_id)
        provisioner.ensure_pricing(venue_id)

        windows = self.store.select(
            OperatingHours,
            OperatingHours.venue_id == venue_id,
            OperatingHours.day_of_week == day_name_of(day),
            order_by=(OperatingHours.start_time,),
        )
        rules = self.store.select(PricingRule, PricingRule.venue_id == venue_id, order_by=(PricingRule.id,))

        grid = build_slot_grid(venue_id, sport_id, day, windows, rules, self.config.slot_minutes)
        if not grid:
            logger.info(f"No operating hours on {day} for venue {venue_id}; nothing to generate")
            return SlotGenerationResult(slots=[], generated=True)

        # Starts booked before the day was generated are saved unavailable
        grid = self._mark_booked(venue_id, sport_id, grid)

        try:
            saved, warnings = self._persist(grid)
        except IntegrityError:
            # Another request generated the same day first; its rows are the day
            logger.info(f"Slots for venue={venue_id} sport={sport_id} date={day} were generated concurrently")
            return SlotGenerationResult(slots=self.persisted_slots(venue_id, sport_id, day), generated=False)

        logger.info(
            f"Generated {len(saved)}/{len(grid)} slots for venue={venue_id} sport={sport_id} date={day}"
        )
        return SlotGenerationResult(slots=saved, generated=True, warnings=warnings)

    def _persist(self, grid: List[SynthesizedSlot]) -> Tuple[List[Slot], List[str]]:
        """Insert in fixed-size batches; a failed batch is dropped, not retried.

        Raises:
            IntegrityError: a batch collided with slots already stored for the day
        """
        saved: List[Slot] = []
        warnings: List[str] = []
        size = self.config.insert_batch_size

        for batch_number, offset in enumerate(range(0, len(grid), size), start=1):
            batch = [to_slot_row(slot) for slot in grid[offset : offset + size]]
            try:
                saved.extend(self.store.insert(batch))
            except IntegrityError:
                raise
            except Exception as exc:
                logger.error(f"Slot batch {batch_number} failed ({len(batch)} slots dropped): {exc}")
                warnings.append(f"{len(batch)} slots could not be saved. Refresh to see the latest availability.")

        return saved, warnings

    def _mark_booked(self, venue_id: int, sport_id: int, grid: List[SynthesizedSlot]) -> List[SynthesizedSlot]:
        """Copy of the grid with starts holding a live booking marked unavailable."""
        slot_times = [slot_time_of(slot) for slot in grid]
        booked = {
            booking.slot_time
            for booking in self.store.select(
                Booking,
                Booking.venue_id == venue_id,
                Booking.sport_id == sport_id,
                Booking.status != BOOKING_CANCELLED,
                Booking.slot_time.in_([t for t in slot_times if t]),
            )
        }
        return [replace(slot, available=slot_time not in booked) for slot, slot_time in zip(grid, slot_times)]

    def preview_slots(self, venue_id: int, sport_id: int, day: date) -> List[SynthesizedSlot]:
        """Synthesize the day's grid without writing anything.

        Stored hours and pricing are used when present, the defaults otherwise.
        Starts that already have a live booking come back unavailable.
        """
        day_name = day_name_of(day)
        windows = self.store.select(
            OperatingHours, OperatingHours.venue_id == venue_id, OperatingHours.day_of_week == day_name
        )
        if not windows:
            windows = [w for w in default_operating_hours(venue_id) if w.day_of_week == day_name]

        rules = self.store.select(PricingRule, PricingRule.venue_id == venue_id, order_by=(PricingRule.id,))
        if not rules:
            rules = default_pricing_rules(venue_id)

        grid = build_slot_grid(venue_id, sport_id, day, windows, rules, self.config.slot_minutes)
        if not grid:
            return []
        return self._mark_booked(venue_id, sport_id, grid)
