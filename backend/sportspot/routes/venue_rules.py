from datetime import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator, model_validator
from sqlmodel import Session, select

from sportspot.auth import require_admin
from sportspot.database import get_session
from sportspot.models.operating_hours import OperatingHours
from sportspot.models.pricing_rule import PER_DURATION_30_MIN, PricingRule
from sportspot.routes.venues import get_venue_or_404
from sportspot.services.pricing_resolver import ALL_DAYS_ALIASES
from sportspot.services.time_ranges import DAY_NAMES, WEEKDAY_GROUP, WEEKEND_GROUP, parse_time_range

router = APIRouter()

ALLOWED_DAY_GROUPS = set(DAY_NAMES) | {WEEKDAY_GROUP, WEEKEND_GROUP} | ALL_DAYS_ALIASES


class OperatingHoursCreate(BaseModel):
    day_of_week: str
    start_time: time
    end_time: time
    is_morning: bool = True

    @field_validator("day_of_week")
    @classmethod
    def validate_day(cls, v):
        day = v.strip().lower()
        if day not in DAY_NAMES:
            raise ValueError(f"day_of_week must be one of {list(DAY_NAMES)}")
        return day

    @model_validator(mode="after")
    def validate_times(self):
        # end_time < start_time is an overnight window; equal times are empty
        if self.end_time == self.start_time:
            raise ValueError("end_time must differ from start_time")
        return self


class OperatingHoursResponse(BaseModel):
    id: int
    venue_id: int
    day_of_week: str
    start_time: time
    end_time: time
    is_morning: bool

    class Config:
        from_attributes = True


class PricingRuleCreate(BaseModel):
    day_group: str
    time_range: Optional[str] = None
    is_morning: bool = False
    price: int

    @field_validator("day_group")
    @classmethod
    def validate_day_group(cls, v):
        group = v.strip().lower()
        if group not in ALLOWED_DAY_GROUPS:
            raise ValueError(f"day_group must be a day name, '{WEEKDAY_GROUP}', '{WEEKEND_GROUP}' or 'all'")
        return group

    @field_validator("time_range")
    @classmethod
    def validate_time_range(cls, v):
        if v is None or not v.strip():
            return None
        if parse_time_range(v) is None:
            raise ValueError("time_range must look like 'A-B' with hours between 0 and 24")
        return v.strip()

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v <= 0:
            raise ValueError("price must be > 0")
        return v


class PricingRuleResponse(BaseModel):
    id: int
    venue_id: int
    day_group: str
    time_range: Optional[str]
    is_morning: bool
    price: int
    per_duration: str

    class Config:
        from_attributes = True


@router.get("/venues/{venue_id}/operating-hours", response_model=List[OperatingHoursResponse])
def get_operating_hours(venue_id: int, session: Session = Depends(get_session)):
    """Get all operating-hour windows for a venue"""
    get_venue_or_404(session, venue_id)
    return session.exec(
        select(OperatingHours)
        .where(OperatingHours.venue_id == venue_id)
        .order_by(OperatingHours.day_of_week, OperatingHours.start_time)
    ).all()


@router.post("/venues/{venue_id}/operating-hours", response_model=OperatingHoursResponse, status_code=201)
def create_operating_hours(
    venue_id: int,
    data: OperatingHoursCreate,
    admin_id: str = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Add an operating-hour window (already generated days keep their slots)"""
    get_venue_or_404(session, venue_id)

    window = OperatingHours(venue_id=venue_id, **data.model_dump())
    session.add(window)
    session.commit()
    session.refresh(window)
    return window


@router.delete("/operating-hours/{window_id}")
def delete_operating_hours(
    window_id: int, admin_id: str = Depends(require_admin), session: Session = Depends(get_session)
):
    """Delete an operating-hour window"""
    window = session.get(OperatingHours, window_id)
    if not window:
        raise HTTPException(status_code=404, detail="Operating hours not found")

    session.delete(window)
    session.commit()
    return {"message": "Operating hours deleted successfully"}


@router.get("/venues/{venue_id}/pricing-rules", response_model=List[PricingRuleResponse])
def get_pricing_rules(venue_id: int, session: Session = Depends(get_session)):
    """Get all pricing rules for a venue"""
    get_venue_or_404(session, venue_id)
    return session.exec(
        select(PricingRule).where(PricingRule.venue_id == venue_id).order_by(PricingRule.id)
    ).all()


@router.post("/venues/{venue_id}/pricing-rules", response_model=PricingRuleResponse, status_code=201)
def create_pricing_rule(
    venue_id: int,
    data: PricingRuleCreate,
    admin_id: str = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Add a pricing rule (existing slots keep the price they were generated with)"""
    get_venue_or_404(session, venue_id)

    rule = PricingRule(venue_id=venue_id, per_duration=PER_DURATION_30_MIN, **data.model_dump())
    session.add(rule)
    session.commit()
    session.refresh(rule)
    return rule


@router.delete("/pricing-rules/{rule_id}")
def delete_pricing_rule(rule_id: int, admin_id: str = Depends(require_admin), session: Session = Depends(get_session)):
    """Delete a pricing rule"""
    rule = session.get(PricingRule, rule_id)
    if not rule:
        raise HTTPException(status_code=404, detail="Pricing rule not found")

    session.delete(rule)
    session.commit()
    return {"message": "Pricing rule deleted successfully"}
