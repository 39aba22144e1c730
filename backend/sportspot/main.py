import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sportspot.database import init_db
from sportspot.routes import availability, bookings, slots, venue_rules, venues
from sportspot.store import ChangeFeed

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

APP_NAME = "SportSpot Booking API"

app = FastAPI(title=APP_NAME)

# In-process change feed shared by every request's Store
app.state.change_feed = ChangeFeed()

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(venues.router, prefix="/api", tags=["venues"])
app.include_router(venue_rules.router, prefix="/api", tags=["venue-rules"])
app.include_router(slots.router, prefix="/api", tags=["slots"])

# Availability (REST checks + websocket stream)
app.include_router(availability.router, prefix="/api", tags=["availability"])

# Bookings (user + admin listings)
app.include_router(bookings.router, prefix="/api", tags=["bookings"])


@app.on_event("startup")
def on_startup():
    init_db()  # imports models and creates tables


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify the API is up"""
    return {"app_name": APP_NAME, "status": "healthy"}
