"""
Booking creation.

Validates the user's details against the chosen slot, writes the booking and
marks a persisted slot unavailable. Both writes share one transaction, and the
confirmed-booking unique index on (venue, sport, slot_time) turns a lost race
for the same start into SlotUnavailableError instead of a double booking.
"""

import logging
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError

from sportspot.models.booking import BOOKING_CONFIRMED, Booking
from sportspot.models.slot import Slot
from sportspot.models.sport import Sport
from sportspot.models.venue import Venue
from sportspot.services.availability import is_slot_booked
from sportspot.services.errors import (
    AuthRequiredError,
    BookingValidationError,
    BookingWriteError,
    SlotUnavailableError,
)
from sportspot.services.slot_generator import AnySlot, SynthesizedSlot
from sportspot.store import Store
from sportspot.utils.wall_clock import slot_time_of, wall_clock_now

logger = logging.getLogger(__name__)

PHONE_DIGITS = 10

INVALID_DATE_TIME_MESSAGE = "Invalid date/time for this slot. Please pick another slot."
_DATE_TIME_ERROR_RE = re.compile(r"date/time|datetime|timestamp|out of range", re.IGNORECASE)


def normalize_phone(raw: Optional[str]) -> str:
    """Keep digits only, truncated to PHONE_DIGITS."""
    if not raw:
        return ""
    return re.sub(r"\D", "", raw)[:PHONE_DIGITS]


def friendly_write_error(exc: Exception) -> str:
    """Store message shown verbatim, except date/time range failures."""
    message = str(getattr(exc, "orig", None) or exc)
    if _DATE_TIME_ERROR_RE.search(message):
        return INVALID_DATE_TIME_MESSAGE
    return message


class BookingWriter:
    def __init__(self, store: Store):
        self.store = store

    def _resolve_slot(self, slot: AnySlot) -> AnySlot:
        """Prefer the stored row when a synthesized slot has since been persisted."""
        if not isinstance(slot, SynthesizedSlot):
            return slot
        stored = self.store.first(
            Slot,
            Slot.venue_id == slot.venue_id,
            Slot.sport_id == slot.sport_id,
            Slot.date == slot.date,
            Slot.start_time == slot.start_time,
            Slot.next_day == slot.next_day,
        )
        return stored or slot

    def create_booking(
        self,
        user_id: Optional[str],
        slot: AnySlot,
        venue: Venue,
        sport: Sport,
        full_name: Optional[str],
        phone: Optional[str],
    ) -> Booking:
        """
        Book a slot for the signed-in user.

        Raises:
            AuthRequiredError: no signed-in user
            BookingValidationError: missing/invalid name or phone, slot/venue mismatch
            SlotUnavailableError: slot already booked (before or during the write)
            BookingWriteError: the store rejected the write
        """
        if not user_id:
            raise AuthRequiredError()

        full_name = (full_name or "").strip()
        phone_digits = normalize_phone(phone)
        if not full_name or not phone_digits:
            raise BookingValidationError("Please fill in all required fields.")
        if len(phone_digits) < PHONE_DIGITS:
            raise BookingValidationError(f"Please enter a valid {PHONE_DIGITS}-digit phone number.")

        if slot.venue_id != venue.id or slot.sport_id != sport.id:
            raise BookingValidationError("The selected slot does not belong to this venue and sport.")

        slot = self._resolve_slot(slot)
        if is_slot_booked(self.store, slot):
            raise SlotUnavailableError()

        slot_time = slot_time_of(slot)
        if slot_time is None:
            slot_time = wall_clock_now()
            logger.warning(f"Falling back to current time {slot_time} for booking at venue {venue.id}")

        booking = Booking(
            user_id=user_id,
            venue_id=venue.id,
            sport_id=sport.id,
            slot_id=slot.id if isinstance(slot, Slot) else None,
            slot_time=slot_time,
            status=BOOKING_CONFIRMED,
            full_name=full_name,
            phone=phone_digits,
            amount=slot.price or 0,
        )

        try:
            with self.store.transaction() as pending:
                pending.add(booking)
                if isinstance(slot, Slot):
                    pending.patch(slot, available=False)
        except IntegrityError as exc:
            logger.warning(f"Booking race lost for venue={venue.id} sport={sport.id} at {slot_time}: {exc}")
            raise SlotUnavailableError() from exc
        except Exception as exc:
            logger.exception("Booking write failed for venue=%s sport=%s at %s", venue.id, sport.id, slot_time)
            raise BookingWriteError(friendly_write_error(exc)) from exc

        logger.info(f"Booking {booking.id} confirmed: venue={venue.id} sport={sport.id} at {slot_time}")
        return booking
