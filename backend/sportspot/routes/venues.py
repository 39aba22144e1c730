from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, field_validator
from sqlalchemy import func, or_
from sqlmodel import Session, select

from sportspot.auth import require_admin
from sportspot.database import get_session
from sportspot.models.sport import Sport
from sportspot.models.venue import Venue
from sportspot.models.venue_sport import VenueSport

router = APIRouter()


class SportCreate(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class SportResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class VenueCreate(BaseModel):
    name: str
    location: str
    address: str = ""
    image: Optional[str] = None

    @field_validator("name", "location")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("name and location are required")
        return v.strip()


class VenueResponse(BaseModel):
    id: int
    name: str
    location: str
    address: str
    image: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class VenueSportLink(BaseModel):
    sport_id: int


def get_venue_or_404(session: Session, venue_id: int) -> Venue:
    venue = session.get(Venue, venue_id)
    if not venue:
        raise HTTPException(status_code=404, detail="Venue not found")
    return venue


def get_sport_or_404(session: Session, sport_id: int) -> Sport:
    sport = session.get(Sport, sport_id)
    if not sport:
        raise HTTPException(status_code=404, detail="Sport not found")
    return sport


def require_venue_offers_sport(session: Session, venue_id: int, sport_id: int) -> None:
    link = session.exec(
        select(VenueSport).where(VenueSport.venue_id == venue_id, VenueSport.sport_id == sport_id)
    ).first()
    if not link:
        raise HTTPException(status_code=404, detail="Sport is not offered at this venue")


@router.get("/sports", response_model=List[SportResponse])
def list_sports(session: Session = Depends(get_session)):
    """List all sports"""
    return session.exec(select(Sport).order_by(Sport.name)).all()


@router.post("/sports", response_model=SportResponse, status_code=201)
def create_sport(data: SportCreate, admin_id: str = Depends(require_admin), session: Session = Depends(get_session)):
    """Create a sport"""
    sport = Sport(**data.model_dump())
    session.add(sport)
    session.commit()
    session.refresh(sport)
    return sport


@router.get("/venues", response_model=List[VenueResponse])
def list_venues(
    sport_id: Optional[int] = Query(None),
    location: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    """List venues, optionally filtered by sport, exact location and a search term

    The search term matches name, location or address (case-insensitive).
    """
    query = select(Venue)

    if sport_id is not None:
        query = query.where(Venue.id.in_(select(VenueSport.venue_id).where(VenueSport.sport_id == sport_id)))

    if location:
        query = query.where(Venue.location == location)

    if search and search.strip():
        term = f"%{search.strip().lower()}%"
        query = query.where(
            or_(
                func.lower(Venue.name).like(term),
                func.lower(Venue.location).like(term),
                func.lower(Venue.address).like(term),
            )
        )

    return session.exec(query.order_by(Venue.name, Venue.id)).all()


@router.post("/venues", response_model=VenueResponse, status_code=201)
def create_venue(data: VenueCreate, admin_id: str = Depends(require_admin), session: Session = Depends(get_session)):
    """Create a venue (hours and pricing are provisioned on first slot request)"""
    venue = Venue(**data.model_dump())
    session.add(venue)
    session.commit()
    session.refresh(venue)
    return venue


@router.get("/venues/{venue_id}", response_model=VenueResponse)
def get_venue(venue_id: int, session: Session = Depends(get_session)):
    """Get a venue"""
    return get_venue_or_404(session, venue_id)


@router.get("/venues/{venue_id}/sports", response_model=List[SportResponse])
def list_venue_sports(venue_id: int, session: Session = Depends(get_session)):
    """List sports offered at a venue"""
    get_venue_or_404(session, venue_id)
    return session.exec(
        select(Sport)
        .join(VenueSport, VenueSport.sport_id == Sport.id)
        .where(VenueSport.venue_id == venue_id)
        .order_by(Sport.name)
    ).all()


@router.post("/venues/{venue_id}/sports", response_model=SportResponse, status_code=201)
def add_venue_sport(
    venue_id: int,
    data: VenueSportLink,
    admin_id: str = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Offer a sport at a venue"""
    get_venue_or_404(session, venue_id)
    sport = get_sport_or_404(session, data.sport_id)

    existing = session.exec(
        select(VenueSport).where(VenueSport.venue_id == venue_id, VenueSport.sport_id == data.sport_id)
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="Sport already offered at this venue")

    session.add(VenueSport(venue_id=venue_id, sport_id=data.sport_id))
    session.commit()
    session.refresh(sport)
    return sport
