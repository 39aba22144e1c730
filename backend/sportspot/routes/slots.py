import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from sportspot.config import get_booking_config
from sportspot.database import get_store
from sportspot.models.slot import Slot
from sportspot.routes.venues import get_sport_or_404, get_venue_or_404, require_venue_offers_sport
from sportspot.services.errors import ProvisioningError
from sportspot.services.slot_generator import AnySlot, SlotGenerator, SynthesizedSlot
from sportspot.store import Store
from sportspot.utils.wall_clock import slot_time_of

logger = logging.getLogger(__name__)

router = APIRouter()

SLOT_KIND_PERSISTED = "persisted"
SLOT_KIND_SYNTHESIZED = "synthesized"


class SlotResponse(BaseModel):
    kind: str  # "persisted" or "synthesized"
    id: Optional[int] = None  # only for persisted slots
    venue_id: int
    sport_id: int
    date: date
    start_time: time
    end_time: time
    next_day: bool
    slot_time: Optional[str]
    price: int
    available: bool


class SlotListResponse(BaseModel):
    date: date
    generated: bool
    slots: List[SlotResponse]
    warnings: List[str] = []


def slot_to_response(slot: AnySlot) -> SlotResponse:
    persisted = isinstance(slot, Slot)
    return SlotResponse(
        kind=SLOT_KIND_PERSISTED if persisted else SLOT_KIND_SYNTHESIZED,
        id=slot.id if persisted else None,
        venue_id=slot.venue_id,
        sport_id=slot.sport_id,
        date=slot.date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        next_day=slot.next_day,
        slot_time=slot_time_of(slot),
        price=slot.price,
        available=slot.available,
    )


def synthesized_slot_at(
    venue_id: int, sport_id: int, day: date, start_time: time, next_day: bool = False, price: int = 0
) -> SynthesizedSlot:
    """A synthesized slot identified only by its venue, sport and start."""
    end = datetime.combine(day, start_time) + timedelta(minutes=get_booking_config().slot_minutes)
    return SynthesizedSlot(
        venue_id=venue_id,
        sport_id=sport_id,
        date=day,
        start_time=start_time,
        end_time=end.time(),
        price=price,
        next_day=next_day,
    )


@router.get("/venues/{venue_id}/sports/{sport_id}/slots", response_model=SlotListResponse)
def get_slots(
    venue_id: int,
    sport_id: int,
    day: date = Query(..., alias="date"),
    store: Store = Depends(get_store),
):
    """Get the day's slots, generating and saving them on first request

    Slots already stored for the day are returned unchanged. Batches that
    fail to save are dropped and reported in `warnings`.
    Returns 503 if default hours/pricing could not be set up for the venue.
    """
    get_venue_or_404(store.session, venue_id)
    get_sport_or_404(store.session, sport_id)
    require_venue_offers_sport(store.session, venue_id, sport_id)

    try:
        result = SlotGenerator(store).get_slots(venue_id, sport_id, day)
    except ProvisioningError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return SlotListResponse(
        date=day,
        generated=result.generated,
        slots=[slot_to_response(slot) for slot in result.slots],
        warnings=result.warnings,
    )


@router.get("/venues/{venue_id}/sports/{sport_id}/slots/preview", response_model=List[SlotResponse])
def preview_slots(
    venue_id: int,
    sport_id: int,
    day: date = Query(..., alias="date"),
    store: Store = Depends(get_store),
):
    """Preview the day's slots without saving anything"""
    get_venue_or_404(store.session, venue_id)
    get_sport_or_404(store.session, sport_id)
    require_venue_offers_sport(store.session, venue_id, sport_id)

    return [slot_to_response(slot) for slot in SlotGenerator(store).preview_slots(venue_id, sport_id, day)]


@router.get("/slots/{slot_id}", response_model=SlotResponse)
def get_slot(slot_id: int, store: Store = Depends(get_store)):
    """Get a stored slot"""
    slot = store.get(Slot, slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    return slot_to_response(slot)
