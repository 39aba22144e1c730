import os
from pathlib import Path
from typing import Generator

from dotenv import load_dotenv
from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine
from starlette.requests import HTTPConnection

from sportspot.store import Store

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sportspot.db")

_is_sqlite = DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
_echo = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")

if _is_sqlite:
    db_path = DATABASE_URL.replace("sqlite:///", "", 1)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine: Engine = create_engine(
    DATABASE_URL,
    echo=_echo,
    connect_args=_connect_args,
)


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from sportspot.models.booking import Booking  # noqa: F401
    from sportspot.models.operating_hours import OperatingHours  # noqa: F401
    from sportspot.models.pricing_rule import PricingRule  # noqa: F401
    from sportspot.models.slot import Slot  # noqa: F401
    from sportspot.models.sport import Sport  # noqa: F401
    from sportspot.models.venue import Venue  # noqa: F401
    from sportspot.models.venue_sport import VenueSport  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_store(connection: HTTPConnection, session: Session = Depends(get_session)) -> Store:
    """Get a store bound to the request session and the app's change feed"""
    return Store(session, connection.app.state.change_feed)
