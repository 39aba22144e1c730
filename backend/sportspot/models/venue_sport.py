from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from sportspot.models.sport import Sport
    from sportspot.models.venue import Venue


class VenueSport(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("venue_id", "sport_id", name="uq_venue_sport"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    sport_id: int = Field(foreign_key="sport.id", index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    venue: "Venue" = Relationship(back_populates="sport_links")
    sport: "Sport" = Relationship(back_populates="venue_links")
