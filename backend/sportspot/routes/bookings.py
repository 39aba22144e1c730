import logging
from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import func, or_
from sqlmodel import select

from sportspot.auth import get_current_user_id, require_admin
from sportspot.database import get_store
from sportspot.models.booking import BOOKING_STATUSES, Booking
from sportspot.models.slot import Slot
from sportspot.models.sport import Sport
from sportspot.models.venue import Venue
from sportspot.routes.venues import get_sport_or_404, get_venue_or_404
from sportspot.services.booking_writer import BookingWriter
from sportspot.services.errors import (
    AuthRequiredError,
    BookingValidationError,
    BookingWriteError,
    SlotUnavailableError,
)
from sportspot.services.slot_generator import AnySlot, SlotGenerator
from sportspot.store import Store

logger = logging.getLogger(__name__)

router = APIRouter()


class BookingCreate(BaseModel):
    """Book a stored slot by `slot_id`, or a synthesized one by venue/sport/date/start."""

    slot_id: Optional[int] = None
    venue_id: Optional[int] = None
    sport_id: Optional[int] = None
    day: Optional[date] = Field(default=None, alias="date")
    start_time: Optional[time] = None
    next_day: bool = False
    full_name: str = ""
    phone: str = ""

    @model_validator(mode="after")
    def validate_slot_reference(self):
        if self.slot_id is None and None in (self.venue_id, self.sport_id, self.day, self.start_time):
            raise ValueError("slot_id or venue_id, sport_id, date and start_time are required")
        return self


class BookingResponse(BaseModel):
    id: int
    user_id: str
    venue_id: int
    sport_id: int
    slot_id: Optional[int]
    slot_time: str
    status: str
    full_name: str
    phone: str
    amount: int
    created_at: datetime

    class Config:
        from_attributes = True


class AdminBookingResponse(BookingResponse):
    venue_name: str
    sport_name: str


def _resolve_booking_slot(store: Store, data: BookingCreate) -> AnySlot:
    if data.slot_id is not None:
        slot = store.get(Slot, data.slot_id)
        if not slot:
            raise HTTPException(status_code=404, detail="Slot not found")
        return slot

    # Synthesized slots carry the price the grid would give them
    preview = SlotGenerator(store).preview_slots(data.venue_id, data.sport_id, data.day)
    for slot in preview:
        if slot.start_time == data.start_time and slot.next_day == data.next_day:
            return slot
    raise HTTPException(status_code=404, detail="Slot not found")


@router.post("/bookings", response_model=BookingResponse, status_code=201)
def create_booking(
    data: BookingCreate,
    user_id: Optional[str] = Depends(get_current_user_id),
    store: Store = Depends(get_store),
):
    """Book a slot for the signed-in user

    Returns 401 when not signed in, 422 for invalid details, 409 when the slot
    is already booked and 500 when the store rejects the write.
    """
    if user_id is None:
        raise HTTPException(status_code=401, detail=str(AuthRequiredError()))

    slot = _resolve_booking_slot(store, data)
    venue = get_venue_or_404(store.session, slot.venue_id)
    sport = get_sport_or_404(store.session, slot.sport_id)

    try:
        return BookingWriter(store).create_booking(user_id, slot, venue, sport, data.full_name, data.phone)
    except AuthRequiredError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SlotUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except BookingWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/bookings/me", response_model=List[BookingResponse])
def get_my_bookings(user_id: Optional[str] = Depends(get_current_user_id), store: Store = Depends(get_store)):
    """Get the signed-in user's bookings, newest first"""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    return store.select(Booking, Booking.user_id == user_id, order_by=(Booking.created_at.desc(), Booking.id.desc()))


@router.get("/admin/bookings", response_model=List[AdminBookingResponse])
def list_bookings_admin(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    admin_id: str = Depends(require_admin),
    store: Store = Depends(get_store),
):
    """List all bookings for admins

    `search` matches customer name, phone, venue name or sport name;
    `status` filters by booking status ("all" or omitted for every status).
    """
    query = (
        select(Booking, Venue.name, Sport.name)
        .join(Venue, Venue.id == Booking.venue_id)
        .join(Sport, Sport.id == Booking.sport_id)
    )

    if status and status != "all":
        if status not in BOOKING_STATUSES:
            raise HTTPException(status_code=400, detail=f"status must be one of {list(BOOKING_STATUSES)} or 'all'")
        query = query.where(Booking.status == status)

    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.where(
            or_(
                func.lower(Booking.full_name).like(term),
                Booking.phone.like(term),
                func.lower(Venue.name).like(term),
                func.lower(Sport.name).like(term),
            )
        )

    rows = store.session.exec(query.order_by(Booking.created_at.desc(), Booking.id.desc())).all()
    return [
        AdminBookingResponse(
            **BookingResponse.model_validate(booking).model_dump(), venue_name=venue_name, sport_name=sport_name
        )
        for booking, venue_name, sport_name in rows
    ]
