"""Shared test fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import date  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import Base  # noqa: E402
from app.domain.availability import (  # noqa: E402
    CalendarEvent,
    Channel,
    EventKind,
    EventStatus,
)
from app.domain.pricing import FeeConfig  # noqa: E402
from app.main import create_application  # noqa: E402
from app.models.calendar import CalendarEventRecord  # noqa: E402,F401
from app.repositories.memory import InMemoryCalendarRepository  # noqa: E402
from app.repositories.sql import SqlCalendarRepository  # noqa: E402
from app.services.booking_service import BookingService  # noqa: E402
from app.services.calendar_import_service import CalendarImportService  # noqa: E402
from app.services.commission_service import CommissionService  # noqa: E402


AIRBNB_FEED = (
    "BEGIN:VCALENDAR\r\n"
    "VERSION:2.0\r\n"
    "PRODID:-//Airbnb Inc//Hosting Calendar 1.0//EN\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTAMP:20250201T120000Z\r\n"
    "DTSTART;VALUE=DATE:20250301\r\n"
    "DTEND;VALUE=DATE:20250304\r\n"
    "SUMMARY:Reserved\r\n"
    "UID:abc123@airbnb.com\r\n"
    "URL:https://www.airbnb.com/hosting/reservations/details/HMABC\r\n"
    "END:VEVENT\r\n"
    "BEGIN:VEVENT\r\n"
    "DTSTAMP:20250201T120000Z\r\n"
    "DTSTART;VALUE=DATE:20250320\r\n"
    "DTEND;VALUE=DATE:20250322\r\n"
    "SUMMARY:Airbnb (Not available)\r\n"
    "UID:def456@airbnb.com\r\n"
    "END:VEVENT\r\n"
    "END:VCALENDAR\r\n"
)


BROKEN_DATE_FEED = AIRBNB_FEED.replace(
    "DTSTART;VALUE=DATE:20250320", "DTSTART;VALUE=DATE:20251301"
)


def make_event(
    start: date,
    end: date,
    channel: Channel = Channel.DIRECT,
    kind: EventKind = EventKind.BOOKING,
    status: EventStatus | None = None,
    listing_id: str = "listing-1",
    uid: str | None = None,
) -> CalendarEvent:
    return CalendarEvent(
        listing_id=listing_id,
        start_date=start,
        end_date=end,
        channel=channel,
        kind=kind,
        status=status,
        uid=uid,
    )


def feed_handler(request: httpx.Request) -> httpx.Response:
    """Fake upstream serving iCal feeds by path."""
    if request.url.path == "/airbnb.ics":
        return httpx.Response(200, text=AIRBNB_FEED)
    if request.url.path == "/broken.ics":
        return httpx.Response(200, text=BROKEN_DATE_FEED)
    if request.url.path == "/down.ics":
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.Response(404, text="not found")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fee_config():
    """Standard 12% tier fee model."""
    return FeeConfig(
        platform_fee_bps=1200,
        stripe_var_bps=150,
        stripe_fixed_minor=20,
        min_guest_total_minor=500,
    )


@pytest.fixture
def test_settings():
    return Settings()


@pytest.fixture
def commission_service(test_settings):
    return CommissionService(test_settings)


@pytest.fixture
def import_service():
    return CalendarImportService(transport=httpx.MockTransport(feed_handler))


@pytest.fixture(params=["memory", "sql"])
async def repository(request, tmp_path):
    """Each calendar repository implementation."""
    if request.param == "memory":
        yield InMemoryCalendarRepository()
        return

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'calendar.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SqlCalendarRepository(async_sessionmaker(engine, expire_on_commit=False))
    await engine.dispose()


@pytest.fixture
def booking_service(repository, commission_service):
    return BookingService(repository, commission_service)


@pytest.fixture
def client(import_service):
    """API client over an in-memory calendar."""
    application = create_application(
        calendar_repository=InMemoryCalendarRepository(),
        calendar_import_service=import_service,
    )
    with TestClient(application) as test_client:
        yield test_client
