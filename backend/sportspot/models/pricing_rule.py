from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from sportspot.models.venue import Venue

PER_DURATION_30_MIN = "30min"


class PricingRule(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    venue_id: int = Field(foreign_key="venue.id", index=True)
    day_group: str  # day name, "weekday", "weekend" or "all"
    time_range: Optional[str] = None  # hour bounds "A-B", e.g. "16-19"; B < A wraps past midnight
    is_morning: bool = Field(default=False)
    price: int  # whole currency units per slot
    per_duration: str = Field(default=PER_DURATION_30_MIN)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    venue: "Venue" = Relationship(back_populates="pricing_rules")
