"""Booking creation use case.

Glues pricing, availability and external calendars to a calendar repository.
A direct booking is only created through ``CalendarRepository.reserve``, which
checks that every night is free and inserts the pending event atomically.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from app.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.domain.availability import (
    EXTERNAL_CHANNELS,
    AvailabilitySummary,
    CalendarEvent,
    Channel,
    EventKind,
    EventStatus,
    summarize_availability,
)
from app.domain.booking_state import assert_booking_transition
from app.repositories.base import CalendarRepository
from app.services.commission_service import CommissionService, StayQuote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingReservation:
    """A freshly reserved direct booking and the price it was quoted at."""

    event: CalendarEvent
    quote: StayQuote


def validate_stay_dates(check_in: date, check_out: date) -> int:
    """Return the number of nights, rejecting empty or inverted ranges."""
    if check_out <= check_in:
        raise ValidationError("check_out must be after check_in")
    return (check_out - check_in).days


class BookingService:
    """Service for quoting, reserving and blocking listing dates."""

    def __init__(self, repository: CalendarRepository, commission_service: CommissionService) -> None:
        self.repository = repository
        self.commission_service = commission_service

    def quote(
        self,
        host_net_nightly_minor: int,
        nights: int,
        is_first_completed_booking: bool = False,
    ) -> StayQuote:
        """Price a stay without touching the calendar."""
        if nights < 1:
            raise ValidationError("nights must be at least 1")
        return self.commission_service.quote_stay(
            host_net_nightly_minor, nights, is_first_completed_booking
        )

    async def get_availability(self, listing_id: str, start: date, end: date) -> AvailabilitySummary:
        """Booked and blocked nights of ``[start, end)``."""
        if end <= start:
            raise ValidationError("`to` must be after `from`")
        if (end - start).days > settings.availability_max_range_days:
            raise ValidationError("Date window too large")
        events = await self.repository.list_events(listing_id, start, end)
        return summarize_availability(events, start, end)

    async def create_booking(
        self,
        listing_id: str,
        check_in: date,
        check_out: date,
        host_net_nightly_minor: int,
        is_first_completed_booking: bool = False,
        guest_reference: str | None = None,
    ) -> BookingReservation:
        """Quote and reserve a direct booking in pending state.

        Raises:
            ValidationError: On bad dates or prices
            ConflictError: If any night is no longer free
        """
        nights = validate_stay_dates(check_in, check_out)
        quote = self.quote(host_net_nightly_minor, nights, is_first_completed_booking)

        event = CalendarEvent(
            listing_id=listing_id,
            start_date=check_in,
            end_date=check_out,
            channel=Channel.DIRECT,
            kind=EventKind.BOOKING,
            status=EventStatus.PENDING,
            uid=uuid.uuid4().hex,
            summary=guest_reference,
        )
        reserved = await self.repository.reserve(event)
        logger.info(
            f"Reserved {nights} nights on listing {listing_id} "
            f"({check_in.isoformat()} to {check_out.isoformat()}) as {reserved.uid}"
        )
        return BookingReservation(event=reserved, quote=quote)

    async def _transition(self, listing_id: str, uid: str, target: EventStatus) -> CalendarEvent:
        event = await self.repository.get_event(listing_id, uid)
        if event is None or event.channel != Channel.DIRECT or event.kind != EventKind.BOOKING:
            raise NotFoundError("Booking", uid)
        current = event.status.value if event.status else "pending"
        assert_booking_transition(current, target.value)
        return await self.repository.update_status(listing_id, uid, target)

    async def confirm_booking(self, listing_id: str, uid: str) -> CalendarEvent:
        return await self._transition(listing_id, uid, EventStatus.CONFIRMED)

    async def cancel_booking(self, listing_id: str, uid: str) -> CalendarEvent:
        return await self._transition(listing_id, uid, EventStatus.CANCELLED)

    async def create_block(
        self,
        listing_id: str,
        start: date,
        end: date,
        summary: str | None = None,
    ) -> CalendarEvent:
        """Block nights on behalf of the host. Refused if any night is taken."""
        validate_stay_dates(start, end)
        event = CalendarEvent(
            listing_id=listing_id,
            start_date=start,
            end_date=end,
            channel=Channel.MANUAL,
            kind=EventKind.BLOCK,
            uid=uuid.uuid4().hex,
            summary=(summary or "").strip() or "Manual block",
        )
        return await self.repository.reserve(event)

    async def import_external_events(
        self,
        listing_id: str,
        channel: Channel,
        events: list[CalendarEvent],
    ) -> int:
        """Store a channel's latest feed for a listing.

        Imports are never refused; overlaps with other sources show up as
        conflict days for the host to reconcile.
        """
        if channel not in EXTERNAL_CHANNELS:
            raise ValidationError(f"Cannot import {channel.value} events from a feed")
        stored = await self.repository.replace_channel_events(listing_id, channel, events)
        logger.info(f"Stored {stored} {channel.value} events for listing {listing_id}")
        return stored
