"""
Live "is this slot booked?" tracking.

Two sources of truth, chosen by slot type:
- persisted Slot: its `available` flag
- SynthesizedSlot: whether a live booking exists for the same venue, sport
  and wall-clock slot_time (there is no row to carry a flag yet)

AvailabilityWatcher keeps the answer current from change notifications on
the slot and booking tables, so open views see concurrent bookings without
refetching. Always close() a watcher (or use it as a context manager) when
its view goes away.
"""

import logging
import threading
from typing import Callable, List, Optional

from sportspot.models.booking import BOOKING_CANCELLED, Booking
from sportspot.models.slot import Slot
from sportspot.services.slot_generator import AnySlot
from sportspot.store import EVENT_INSERT, EVENT_UPDATE, ChangeEvent, Store, Subscription
from sportspot.utils.wall_clock import slot_time_of

logger = logging.getLogger(__name__)


def booking_exists(store: Store, venue_id: int, sport_id: int, slot_time: Optional[str]) -> bool:
    """True if a non-cancelled booking holds this venue/sport/start."""
    if not slot_time:
        return False
    booking = store.first(
        Booking,
        Booking.venue_id == venue_id,
        Booking.sport_id == sport_id,
        Booking.slot_time == slot_time,
        Booking.status != BOOKING_CANCELLED,
    )
    return booking is not None


def is_slot_booked(store: Store, slot: AnySlot) -> bool:
    if isinstance(slot, Slot):
        return not slot.available
    return booking_exists(store, slot.venue_id, slot.sport_id, slot_time_of(slot))


class AvailabilityWatcher:
    def __init__(self, store: Store, slot: AnySlot, on_change: Optional[Callable[[bool], None]] = None):
        self.store = store
        self.on_change = on_change
        self.venue_id = slot.venue_id
        self.sport_id = slot.sport_id
        self.slot_id: Optional[int] = slot.id if isinstance(slot, Slot) else None
        self.slot_time = slot_time_of(slot)

        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []
        self.is_booked = is_slot_booked(store, slot)

    def _check_now(self) -> bool:
        if self.slot_id is not None:
            slot = self.store.get(Slot, self.slot_id, refresh=True)
            return slot is not None and not slot.available
        return booking_exists(self.store, self.venue_id, self.sport_id, self.slot_time)

    @property
    def watching(self) -> bool:
        return bool(self._subscriptions)

    def start(self) -> "AvailabilityWatcher":
        if self._subscriptions:
            return self
        if self.slot_id is not None:
            self._subscriptions.append(self.store.subscribe(Slot, self._on_slot_change, id=self.slot_id))
        self._subscriptions.append(
            self.store.subscribe(Booking, self._on_booking_change, venue_id=self.venue_id, sport_id=self.sport_id)
        )
        # Re-check once subscribed so a change made before start() is not missed
        booked = self._check_now()
        with self._lock:
            self.is_booked = booked
        return self

    def close(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.unsubscribe()

    def __enter__(self) -> "AvailabilityWatcher":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_slot_change(self, event: ChangeEvent) -> None:
        if event.event_type not in (EVENT_INSERT, EVENT_UPDATE):
            return
        self._set_booked(not event.new.get("available", True))

    def _on_booking_change(self, event: ChangeEvent) -> None:
        if event.event_type not in (EVENT_INSERT, EVENT_UPDATE):
            return
        booking = event.new
        if booking.get("status") == BOOKING_CANCELLED:
            return
        if self._targets_this_slot(booking):
            self._set_booked(True)

    def _targets_this_slot(self, booking: dict) -> bool:
        if self.slot_id is not None and booking.get("slot_id") == self.slot_id:
            return True
        return self.slot_time is not None and booking.get("slot_time") == self.slot_time

    def _set_booked(self, booked: bool) -> None:
        with self._lock:
            changed = booked != self.is_booked
            self.is_booked = booked
        if not changed:
            return
        logger.debug(f"Slot {self.slot_id or self.slot_time} at venue {self.venue_id} is_booked -> {booked}")
        if self.on_change is not None:
            self.on_change(booked)
