"""Calendar repository interface.

The booking use case depends on this interface only. Implementations must make
``reserve`` atomic: the free-range check and the insert happen under one lock
or one transaction, so two overlapping reservations cannot both succeed.
"""

from abc import ABC, abstractmethod
from datetime import date

from app.domain.availability import CalendarEvent, Channel, EventStatus


class CalendarRepository(ABC):
    """Storage for a listing's calendar events."""

    @abstractmethod
    async def list_events(
        self,
        listing_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CalendarEvent]:
        """List events overlapping ``[start, end)``; all events if unbounded."""
        pass

    @abstractmethod
    async def reserve(self, event: CalendarEvent) -> CalendarEvent:
        """Insert an event if every night it covers is free.

        Raises:
            ConflictError: If any covered night is not free
        """
        pass

    @abstractmethod
    async def get_event(self, listing_id: str, uid: str) -> CalendarEvent | None:
        pass

    @abstractmethod
    async def update_status(self, listing_id: str, uid: str, status: EventStatus) -> CalendarEvent:
        """Record a new status for an event.

        Raises:
            NotFoundError: If no event has this uid
        """
        pass

    @abstractmethod
    async def replace_channel_events(
        self,
        listing_id: str,
        channel: Channel,
        events: list[CalendarEvent],
    ) -> int:
        """Swap a channel's imported events for a fresh set. Returns the count stored."""
        pass
