import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from sportspot.database import get_session
from sportspot.main import app
from sportspot.store import ChangeFeed, Store

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. Use sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. All models MUST be imported before create_all() (see session_fixture)
# 4. App dependency overridden to use test_engine (see client_fixture)
# 5. Tables are dropped after every test so each test starts empty
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session on freshly created tables"""
    # Import all models to ensure they're registered BEFORE create_all
    from sportspot.models.booking import Booking  # noqa: F401
    from sportspot.models.operating_hours import OperatingHours  # noqa: F401
    from sportspot.models.pricing_rule import PricingRule  # noqa: F401
    from sportspot.models.slot import Slot  # noqa: F401
    from sportspot.models.sport import Sport  # noqa: F401
    from sportspot.models.venue import Venue  # noqa: F401
    from sportspot.models.venue_sport import VenueSport  # noqa: F401

    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="feed")
def feed_fixture():
    return ChangeFeed()


@pytest.fixture(name="store")
def store_fixture(session: Session, feed: ChangeFeed):
    """Store over the test session, as services receive it in production"""
    return Store(session, feed)


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Provide a test client with overridden database session

    Override MUST be set BEFORE TestClient() and stay in place for the entire
    duration so the app never uses its own engine. Each client gets its own
    change feed.
    """
    app.dependency_overrides[get_session] = override_get_session
    app.state.change_feed = ChangeFeed()

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def venue_and_sport(session: Session):
    """A venue offering one sport, with no hours or pricing configured"""
    from sportspot.models.sport import Sport
    from sportspot.models.venue import Venue
    from sportspot.models.venue_sport import VenueSport

    venue = Venue(name="Riverside Arena", location="Pune", address="12 River Rd")
    sport = Sport(name="Badminton")
    session.add(venue)
    session.add(sport)
    session.commit()
    session.refresh(venue)
    session.refresh(sport)

    session.add(VenueSport(venue_id=venue.id, sport_id=sport.id))
    session.commit()
    return venue, sport
