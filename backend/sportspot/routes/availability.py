import asyncio
import logging
from datetime import date, time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from sportspot.database import get_store
from sportspot.models.slot import Slot
from sportspot.routes.slots import synthesized_slot_at
from sportspot.services.availability import AvailabilityWatcher, is_slot_booked
from sportspot.services.slot_generator import AnySlot
from sportspot.store import Store
from sportspot.utils.wall_clock import slot_time_of

logger = logging.getLogger(__name__)

router = APIRouter()


class AvailabilityResponse(BaseModel):
    slot_id: Optional[int] = None
    slot_time: Optional[str] = None
    is_booked: bool


def _watch_target(
    store: Store,
    slot_id: Optional[int],
    venue_id: Optional[int],
    sport_id: Optional[int],
    day: Optional[date],
    start_time: Optional[time],
    next_day: bool,
) -> Optional[AnySlot]:
    """Stored slot by id, else a synthesized slot from venue/sport/date/start."""
    if slot_id is not None:
        return store.get(Slot, slot_id)
    if None in (venue_id, sport_id, day, start_time):
        return None
    return synthesized_slot_at(venue_id, sport_id, day, start_time, next_day)


@router.get("/slots/{slot_id}/availability", response_model=AvailabilityResponse)
def get_slot_availability(slot_id: int, store: Store = Depends(get_store)):
    """Is a stored slot booked (from its availability flag)"""
    slot = store.get(Slot, slot_id)
    if not slot:
        raise HTTPException(status_code=404, detail="Slot not found")
    return AvailabilityResponse(slot_id=slot.id, slot_time=slot_time_of(slot), is_booked=is_slot_booked(store, slot))


@router.get("/venues/{venue_id}/sports/{sport_id}/availability", response_model=AvailabilityResponse)
def get_start_availability(
    venue_id: int,
    sport_id: int,
    day: date = Query(..., alias="date"),
    start_time: time = Query(...),
    next_day: bool = Query(False),
    store: Store = Depends(get_store),
):
    """Is a start booked, inferred from bookings (for slots with no stored row)"""
    slot = synthesized_slot_at(venue_id, sport_id, day, start_time, next_day)
    return AvailabilityResponse(slot_time=slot_time_of(slot), is_booked=is_slot_booked(store, slot))


@router.websocket("/ws/availability")
async def watch_availability(
    websocket: WebSocket,
    slot_id: Optional[int] = None,
    venue_id: Optional[int] = None,
    sport_id: Optional[int] = None,
    day: Optional[date] = Query(None, alias="date"),
    start_time: Optional[time] = None,
    next_day: bool = False,
    store: Store = Depends(get_store),
):
    """Stream {"is_booked": bool} on connect and on every change

    Identify the slot with `slot_id`, or with venue_id/sport_id/date/start_time
    for a slot that has no stored row.
    """
    slot = _watch_target(store, slot_id, venue_id, sport_id, day, start_time, next_day)
    if slot is None:
        await websocket.close(code=1008)
        return

    loop = asyncio.get_running_loop()
    changes: asyncio.Queue = asyncio.Queue()
    watcher = AvailabilityWatcher(store, slot, on_change=lambda booked: loop.call_soon_threadsafe(changes.put_nowait, booked))
    # Subscribe before the check that feeds the first message; the session is
    # only needed for that check
    watcher.start()
    store.session.close()

    try:
        await websocket.accept()
    except Exception:
        watcher.close()
        raise

    async def push_changes():
        while True:
            booked = await changes.get()
            await websocket.send_json({"is_booked": booked})

    async def wait_for_disconnect():
        while True:
            await websocket.receive_text()

    with watcher:
        await websocket.send_json({"is_booked": watcher.is_booked})
        tasks = {asyncio.create_task(push_changes()), asyncio.create_task(wait_for_disconnect())}
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.error(f"Availability stream failed: {exc}")

    logger.debug(f"Availability watcher closed for {slot_time_of(slot)}")
