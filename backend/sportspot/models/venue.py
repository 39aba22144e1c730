from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from sportspot.models.operating_hours import OperatingHours
    from sportspot.models.pricing_rule import PricingRule
    from sportspot.models.venue_sport import VenueSport


class Venue(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    location: str
    address: str = Field(default="")
    image: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    operating_hours: List["OperatingHours"] = Relationship(back_populates="venue")
    pricing_rules: List["PricingRule"] = Relationship(back_populates="venue")
    sport_links: List["VenueSport"] = Relationship(back_populates="venue")
