from datetime import datetime
from typing import Optional

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"
BOOKING_PENDING = "pending"
BOOKING_STATUSES = (BOOKING_CONFIRMED, BOOKING_CANCELLED, BOOKING_PENDING)


class Booking(SQLModel, table=True):
    __table_args__ = (
        # Only one confirmed booking per venue/sport/start
        Index(
            "uq_booking_confirmed_slot_time",
            "venue_id",
            "sport_id",
            "slot_time",
            unique=True,
            sqlite_where=text("status = 'confirmed'"),
            postgresql_where=text("status = 'confirmed'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    sport_id: int = Field(foreign_key="sport.id", index=True)
    slot_id: Optional[int] = Field(default=None, foreign_key="slot.id", index=True)  # None for synthesized slots
    slot_time: str = Field(index=True)  # "YYYY-MM-DD HH:MM:SS", venue-local wall clock
    status: str = Field(default=BOOKING_CONFIRMED)
    full_name: str
    phone: str
    amount: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
