"""External calendar (iCal) import service.

Turns Airbnb / Vrbo / Booking.com / Expedia iCal exports into events the
availability resolver understands. Parsing is best-effort: a broken VEVENT
is skipped and counted, never fatal. A feed that cannot be fetched yields
nothing at all, never a partial set.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

import httpx
from icalendar import Event
from icalendar.error import BrokenCalendarProperty

from app.config import settings
from app.core.exceptions import UpstreamFetchError
from app.domain.availability import CalendarEvent, Channel, EventKind

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

# Summaries channels use for host-closed dates rather than guest stays
BLOCK_SUMMARY_MARKERS = ("not available", "unavailable", "blocked", "closed")

CHANNEL_MARKERS: list[tuple[str, Channel]] = [
    ("airbnb", Channel.AIRBNB),
    ("vrbo", Channel.VRBO),
    ("homeaway", Channel.VRBO),
    ("booking", Channel.BOOKINGCOM),
    ("expedia", Channel.EXPEDIA),
]


@dataclass(frozen=True)
class ParsedEvent:
    """A feed event with UTC instants and an inclusive end."""

    start: datetime
    end: datetime
    nights: int
    uid: str | None = None
    summary: str | None = None
    url: str | None = None


@dataclass
class FeedImport:
    """Result of parsing one feed."""

    events: list[ParsedEvent] = field(default_factory=list)
    skipped: int = 0


def _to_utc(value: object) -> datetime | None:
    """Normalize an iCal date or date-time to a UTC instant."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    return None


def _date_value(component: Event, name: str) -> date | datetime | None:
    prop = component.get(name)
    if prop is None:
        return None
    try:
        return prop.dt
    except (BrokenCalendarProperty, ValueError, AttributeError):
        # unparseable value kept as a broken property
        return None


def _text(component: Event, name: str) -> str | None:
    value = component.get(name)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def compute_nights(start: datetime, inclusive_end: datetime) -> int:
    """Count nights between a start and an inclusive end, minimum one."""
    seconds = int((inclusive_end - start).total_seconds())
    rounded_days = (2 * seconds + SECONDS_PER_DAY) // (2 * SECONDS_PER_DAY)
    return max(1, rounded_days + 1)


def _split_vevents(feed_text: str) -> list[str]:
    chunks = feed_text.split("BEGIN:VEVENT")[1:]
    blocks = []
    for chunk in chunks:
        body = chunk.split("END:VEVENT")[0].strip("\r\n")
        blocks.append(f"BEGIN:VEVENT\r\n{body}\r\nEND:VEVENT\r\n")
    return blocks


def parse_event_block(block: str) -> ParsedEvent | None:
    """Parse a single VEVENT block; None if it has no usable start or end."""
    try:
        component = Event.from_ical(block)
    except ValueError:
        return None

    start = _to_utc(_date_value(component, "DTSTART"))
    end = _to_utc(_date_value(component, "DTEND"))
    if start is None or end is None:
        return None

    # DTEND is exclusive
    inclusive_end = end - timedelta(days=1)
    return ParsedEvent(
        start=start,
        end=inclusive_end,
        nights=compute_nights(start, inclusive_end),
        uid=_text(component, "UID"),
        summary=_text(component, "SUMMARY"),
        url=_text(component, "URL"),
    )


def parse_feed(feed_text: str) -> FeedImport:
    """Parse raw iCal text into events, counting the blocks that were dropped."""
    result = FeedImport()
    for block in _split_vevents(feed_text):
        parsed = parse_event_block(block)
        if parsed is None:
            result.skipped += 1
            continue
        result.events.append(parsed)
    if result.skipped:
        logger.info(f"Skipped {result.skipped} iCal events without a usable DTSTART/DTEND")
    return result


def guess_channel(url: str | None = None, summary: str | None = None) -> Channel:
    """Infer the syndication channel from a feed URL or event summary."""
    for text in (url, summary):
        haystack = (text or "").lower()
        for marker, channel in CHANNEL_MARKERS:
            if marker in haystack:
                return channel
    return Channel.OTHER


def is_block_summary(summary: str | None) -> bool:
    lowered = (summary or "").lower()
    return any(marker in lowered for marker in BLOCK_SUMMARY_MARKERS)


def to_calendar_events(
    parsed: list[ParsedEvent],
    listing_id: str,
    channel: Channel,
) -> list[CalendarEvent]:
    """Convert parsed feed events back to half-open calendar days."""
    events = []
    for item in parsed:
        start_date = item.start.date()
        end_date = item.end.date() + timedelta(days=1)
        if end_date <= start_date:
            end_date = start_date + timedelta(days=1)
        events.append(
            CalendarEvent(
                listing_id=listing_id,
                start_date=start_date,
                end_date=end_date,
                channel=channel,
                kind=EventKind.BLOCK if is_block_summary(item.summary) else EventKind.BOOKING,
                uid=item.uid,
                summary=item.summary,
            )
        )
    return events


class CalendarImportService:
    """Service for fetching and importing external iCal feeds."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.ical_fetch_timeout_seconds
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch_feed(self, url: str) -> str:
        """Download raw iCal text.

        Raises:
            UpstreamFetchError: On network failure or a non-2xx response
        """
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as e:
            raise UpstreamFetchError(url, str(e) or e.__class__.__name__) from e
        if response.status_code >= 400:
            raise UpstreamFetchError(
                url, f"upstream returned {response.status_code}", upstream_status=response.status_code
            )
        return response.text

    async def import_feed(self, url: str) -> FeedImport:
        """Fetch and parse a feed. Fetch failures propagate."""
        payload = await self.fetch_feed(url)
        result = parse_feed(payload)
        logger.info(f"Imported {len(result.events)} events from {url}")
        return result

    async def sync_listing_feed(
        self,
        listing_id: str,
        url: str,
        channel: Channel | None = None,
    ) -> list[CalendarEvent]:
        """Fetch a listing's feed as calendar events, degrading to none on failure."""
        try:
            result = await self.import_feed(url)
        except UpstreamFetchError as e:
            logger.warning(f"Calendar sync for listing {listing_id} failed: {e.detail}")
            return []
        return to_calendar_events(result.events, listing_id, channel or guess_channel(url))


calendar_import_service = CalendarImportService()
