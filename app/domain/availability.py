"""Day-level availability resolution.

Every calendar event covers a half-open date range ``[start_date, end_date)``.
For a single day, the events covering it are sorted into occupancy buckets and
the day resolves to exactly one DayState. Two or more occupied buckets on the
same day is a conflict between booking sources.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum

from app.core.exceptions import ConflictError, ConflictReason, ValidationError


class Channel(str, Enum):
    """Where a calendar event came from."""

    DIRECT = "direct"
    AIRBNB = "airbnb"
    VRBO = "vrbo"
    BOOKINGCOM = "bookingcom"
    EXPEDIA = "expedia"
    MANUAL = "manual"
    BLOCKED = "blocked"
    OTHER = "other"


EXTERNAL_CHANNELS = frozenset(
    {Channel.AIRBNB, Channel.VRBO, Channel.BOOKINGCOM, Channel.EXPEDIA, Channel.OTHER}
)


class EventKind(str, Enum):
    BOOKING = "booking"
    BLOCK = "block"


class EventStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class DayState(str, Enum):
    """Resolved occupancy of one day. Derived, never stored."""

    FREE = "free"
    DIRECT_CONFIRMED = "direct_confirmed"
    DIRECT_PENDING = "direct_pending"
    BLOCKED = "blocked"
    EXTERNAL = "external"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class CalendarEvent:
    """One booking or block on a listing's calendar."""

    listing_id: str
    start_date: date
    end_date: date
    channel: Channel
    kind: EventKind = EventKind.BOOKING
    status: EventStatus | None = None
    uid: str | None = None
    summary: str | None = None

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    def with_status(self, status: EventStatus) -> "CalendarEvent":
        return replace(self, status=status)


@dataclass(frozen=True)
class AvailabilitySummary:
    """Non-free days of a window, bucketed for guest-facing calendars."""

    booked: list[date]
    blocked: list[date]


def classify_event(event: CalendarEvent) -> DayState | None:
    """Return the occupancy bucket an event belongs to, if any.

    Cancelled direct bookings and manual-channel bookings occupy nothing.
    """
    if event.channel == Channel.DIRECT and event.kind == EventKind.BOOKING:
        if event.status == EventStatus.CONFIRMED:
            return DayState.DIRECT_CONFIRMED
        if event.status == EventStatus.PENDING:
            return DayState.DIRECT_PENDING
    if event.channel == Channel.BLOCKED or event.kind == EventKind.BLOCK:
        return DayState.BLOCKED
    if event.channel in EXTERNAL_CHANNELS:
        return DayState.EXTERNAL
    return None


def event_covers(event: CalendarEvent, day: date) -> bool:
    return event.start_date <= day < event.end_date


def resolve_day_state(events: Iterable[CalendarEvent]) -> DayState:
    """Resolve the state of a day from the events covering it.

    Depends only on which buckets are occupied, so the order of ``events``
    never changes the result.
    """
    buckets = {bucket for bucket in map(classify_event, events) if bucket is not None}
    if len(buckets) > 1:
        return DayState.CONFLICT
    if not buckets:
        return DayState.FREE
    return buckets.pop()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day of ``[start, end)``."""
    day = start
    while day < end:
        yield day
        day += timedelta(days=1)


def resolve_range(events: Iterable[CalendarEvent], start: date, end: date) -> dict[date, DayState]:
    """Resolve each day of ``[start, end)`` independently."""
    relevant = [e for e in events if e.start_date < end and e.end_date > start]
    return {
        day: resolve_day_state(e for e in relevant if event_covers(e, day))
        for day in iter_days(start, end)
    }


def first_unavailable_day(
    events: Iterable[CalendarEvent], check_in: date, check_out: date
) -> tuple[date, DayState] | None:
    """Return the earliest non-free day of a stay, or None if all are free."""
    for day, state in resolve_range(events, check_in, check_out).items():
        if state != DayState.FREE:
            return day, state
    return None


_REASON_BY_STATE: dict[DayState, ConflictReason] = {
    DayState.DIRECT_CONFIRMED: ConflictReason.BOOKED,
    DayState.DIRECT_PENDING: ConflictReason.BOOKED,
    DayState.BLOCKED: ConflictReason.BLOCKED,
    DayState.EXTERNAL: ConflictReason.EXTERNAL,
    DayState.CONFLICT: ConflictReason.CONFLICT,
}


def assert_range_free(events: Iterable[CalendarEvent], check_in: date, check_out: date) -> None:
    """Require every night of ``[check_in, check_out)`` to be free.

    Raises:
        ValidationError: If check_out is not after check_in
        ConflictError: If any night is taken; no partial bookings
    """
    if check_out <= check_in:
        raise ValidationError("check_out must be after check_in")
    unavailable = first_unavailable_day(events, check_in, check_out)
    if unavailable is not None:
        day, state = unavailable
        raise ConflictError(_REASON_BY_STATE[state], day)


def summarize_availability(events: Iterable[CalendarEvent], start: date, end: date) -> AvailabilitySummary:
    """Bucket the non-free days of ``[start, end)`` into booked and blocked.

    A conflict day is listed under every category one of its events falls in.
    """
    relevant = [e for e in events if e.start_date < end and e.end_date > start]
    booked: list[date] = []
    blocked: list[date] = []
    for day in iter_days(start, end):
        covering = [e for e in relevant if event_covers(e, day)]
        state = resolve_day_state(covering)
        if state == DayState.FREE:
            continue
        if state == DayState.CONFLICT:
            buckets = {classify_event(e) for e in covering}
        else:
            buckets = {state}
        if buckets & {DayState.DIRECT_CONFIRMED, DayState.DIRECT_PENDING, DayState.EXTERNAL}:
            booked.append(day)
        if DayState.BLOCKED in buckets:
            blocked.append(day)
    return AvailabilitySummary(booked=booked, blocked=blocked)
