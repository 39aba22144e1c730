from datetime import datetime, time
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from sportspot.models.venue import Venue


class OperatingHours(SQLModel, table=True):
    """One opening window of a venue on a weekday.

    end_time earlier than start_time means the window closes on the next day.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    day_of_week: str = Field(index=True)  # lowercase day name: "monday".."sunday"
    start_time: time
    end_time: time
    is_morning: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    venue: "Venue" = Relationship(back_populates="operating_hours")
