from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class Slot(SQLModel, table=True):
    """A persisted, bookable 30-minute slot.

    `date` is the venue's operating day. Slots from a window that runs past
    midnight keep that date and set `next_day`, so a whole operating day is
    always fetched (and generated) together.
    """

    __table_args__ = (
        SAUniqueConstraint(
            "venue_id", "sport_id", "date", "start_time", "next_day", name="uq_slot_venue_sport_day_time"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    sport_id: int = Field(foreign_key="sport.id", index=True)
    date: date
    start_time: time
    end_time: time
    next_day: bool = Field(default=False)
    price: int  # fixed when the slot is generated
    available: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
