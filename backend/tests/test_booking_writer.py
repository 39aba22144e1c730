"""Booking creation: validation, slot locking and the no-double-booking guarantee."""
from datetime import date, time

import pytest

from sportspot.models.booking import BOOKING_CONFIRMED, Booking
from sportspot.models.slot import Slot
from sportspot.services.booking_writer import (
    INVALID_DATE_TIME_MESSAGE,
    BookingWriter,
    friendly_write_error,
    normalize_phone,
)
from sportspot.services.errors import AuthRequiredError, BookingValidationError, SlotUnavailableError
from sportspot.services.slot_generator import SlotGenerator

MONDAY = date(2026, 3, 16)


@pytest.fixture
def persisted_slot(store, venue_and_sport):
    venue, sport = venue_and_sport
    slots = SlotGenerator(store).get_slots(venue.id, sport.id, MONDAY).slots
    return next(s for s in slots if s.start_time == time(18, 0))


@pytest.fixture
def synthesized_slot(store, venue_and_sport):
    venue, sport = venue_and_sport
    preview = SlotGenerator(store).preview_slots(venue.id, sport.id, MONDAY)
    return next(s for s in preview if s.start_time == time(18, 0))


def test_normalize_phone_keeps_digits_and_truncates():
    assert normalize_phone("(987) 654-3210") == "9876543210"
    assert normalize_phone("+91 98765 43210") == "9198765432"
    assert normalize_phone(None) == ""


def test_booking_persisted_slot_flips_availability(store, venue_and_sport, persisted_slot):
    venue, sport = venue_and_sport
    booking = BookingWriter(store).create_booking("user-1", persisted_slot, venue, sport, " Asha Rao ", "98765-43210")

    assert booking.id is not None
    assert booking.status == BOOKING_CONFIRMED
    assert booking.slot_id == persisted_slot.id
    assert booking.slot_time == "2026-03-16 18:00:00"
    assert booking.full_name == "Asha Rao"
    assert booking.phone == "9876543210"
    assert booking.amount == 500

    assert store.get(Slot, persisted_slot.id).available is False


def test_second_booking_same_slot_is_rejected(store, venue_and_sport, persisted_slot):
    venue, sport = venue_and_sport
    writer = BookingWriter(store)
    writer.create_booking("user-1", persisted_slot, venue, sport, "Asha", "9876543210")

    with pytest.raises(SlotUnavailableError):
        writer.create_booking("user-2", persisted_slot, venue, sport, "Ravi", "9123456780")
    assert len(store.select(Booking)) == 1


def test_booking_synthesized_slot_has_no_slot_id(store, venue_and_sport, synthesized_slot):
    venue, sport = venue_and_sport
    booking = BookingWriter(store).create_booking("user-1", synthesized_slot, venue, sport, "Asha", "9876543210")

    assert booking.slot_id is None
    assert booking.slot_time == "2026-03-16 18:00:00"
    assert store.select(Slot) == []

    with pytest.raises(SlotUnavailableError):
        BookingWriter(store).create_booking("user-2", synthesized_slot, venue, sport, "Ravi", "9123456780")


def test_synthesized_slot_resolves_to_stored_row(store, venue_and_sport, synthesized_slot):
    """A slot previewed before generation books (and locks) the stored row."""
    venue, sport = venue_and_sport
    SlotGenerator(store).get_slots(venue.id, sport.id, MONDAY)

    booking = BookingWriter(store).create_booking("user-1", synthesized_slot, venue, sport, "Asha", "9876543210")

    stored = store.get(Slot, booking.slot_id)
    assert stored.start_time == time(18, 0)
    assert stored.available is False


def test_lost_race_reports_unavailable_and_leaves_slot_open(store, venue_and_sport, persisted_slot):
    """A confirmed booking committed elsewhere wins; the slot flag is rolled back."""
    venue, sport = venue_and_sport
    store.insert(
        [
            Booking(user_id="other", venue_id=venue.id, sport_id=sport.id, slot_time="2026-03-16 18:00:00",
                    status=BOOKING_CONFIRMED, full_name="Other", phone="9000000000")
        ]
    )

    with pytest.raises(SlotUnavailableError):
        BookingWriter(store).create_booking("user-1", persisted_slot, venue, sport, "Asha", "9876543210")

    assert len(store.select(Booking)) == 1
    assert store.get(Slot, persisted_slot.id).available is True


def test_booking_requires_user(store, venue_and_sport, persisted_slot):
    venue, sport = venue_and_sport
    with pytest.raises(AuthRequiredError):
        BookingWriter(store).create_booking(None, persisted_slot, venue, sport, "Asha", "9876543210")


@pytest.mark.parametrize(
    "full_name,phone",
    [("", "9876543210"), ("   ", "9876543210"), ("Asha", ""), ("Asha", "no digits")],
)
def test_booking_requires_name_and_phone(store, venue_and_sport, persisted_slot, full_name, phone):
    venue, sport = venue_and_sport
    with pytest.raises(BookingValidationError, match="required fields"):
        BookingWriter(store).create_booking("user-1", persisted_slot, venue, sport, full_name, phone)


def test_phone_needs_ten_digits(store, venue_and_sport, persisted_slot):
    venue, sport = venue_and_sport
    writer = BookingWriter(store)

    with pytest.raises(BookingValidationError, match="10-digit"):
        writer.create_booking("user-1", persisted_slot, venue, sport, "Asha", "987654321")
    assert store.select(Booking) == []

    booking = writer.create_booking("user-1", persisted_slot, venue, sport, "Asha", "9876543210")
    assert booking.phone == "9876543210"


def test_slot_from_other_venue_is_rejected(store, venue_and_sport, persisted_slot):
    from sportspot.models.venue import Venue

    _, sport = venue_and_sport
    other = Venue(name="Hilltop Courts", location="Mumbai")
    store.insert([other])

    with pytest.raises(BookingValidationError):
        BookingWriter(store).create_booking("user-1", persisted_slot, other, sport, "Asha", "9876543210")


def test_friendly_write_error():
    assert friendly_write_error(Exception("date/time field value out of range")) == INVALID_DATE_TIME_MESSAGE
    assert friendly_write_error(Exception("disk I/O error")) == "disk I/O error"


def test_slot_without_start_falls_back_to_current_time(store, venue_and_sport, persisted_slot, monkeypatch):
    venue, sport = venue_and_sport
    monkeypatch.setattr("sportspot.services.booking_writer.slot_time_of", lambda slot: None)
    monkeypatch.setattr("sportspot.services.booking_writer.wall_clock_now", lambda: "2026-03-16 12:34:56")

    booking = BookingWriter(store).create_booking("user-1", persisted_slot, venue, sport, "Asha", "9876543210")

    assert booking.slot_time == "2026-03-16 12:34:56"
    assert booking.slot_id == persisted_slot.id
    assert store.get(Slot, persisted_slot.id).available is False
