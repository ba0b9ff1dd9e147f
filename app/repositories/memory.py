"""In-process calendar repository."""

import asyncio
from collections import defaultdict
from datetime import date
from weakref import WeakValueDictionary

from app.core.exceptions import NotFoundError
from app.domain.availability import CalendarEvent, Channel, EventStatus, assert_range_free
from app.repositories.base import CalendarRepository


class InMemoryCalendarRepository(CalendarRepository):
    """Dict-backed repository; a per-listing lock serializes reservations."""

    def __init__(self, events: list[CalendarEvent] | None = None) -> None:
        self._events: dict[str, list[CalendarEvent]] = defaultdict(list)
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()
        for event in events or []:
            self._events[event.listing_id].append(event)

    def _lock_for(self, listing_id: str) -> asyncio.Lock:
        # held only while a caller references it, so idle listings drop out
        lock = self._locks.get(listing_id)
        if lock is None:
            lock = self._locks[listing_id] = asyncio.Lock()
        return lock

    async def list_events(
        self,
        listing_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CalendarEvent]:
        events = self._events.get(listing_id, [])
        return [
            e
            for e in events
            if (end is None or e.start_date < end) and (start is None or e.end_date > start)
        ]

    async def reserve(self, event: CalendarEvent) -> CalendarEvent:
        async with self._lock_for(event.listing_id):
            existing = await self.list_events(event.listing_id, event.start_date, event.end_date)
            assert_range_free(existing, event.start_date, event.end_date)
            self._events[event.listing_id].append(event)
        return event

    async def get_event(self, listing_id: str, uid: str) -> CalendarEvent | None:
        for event in self._events.get(listing_id, []):
            if event.uid == uid:
                return event
        return None

    async def update_status(self, listing_id: str, uid: str, status: EventStatus) -> CalendarEvent:
        async with self._lock_for(listing_id):
            events = self._events.get(listing_id, [])
            for index, event in enumerate(events):
                if event.uid == uid:
                    events[index] = event.with_status(status)
                    return events[index]
        raise NotFoundError("Calendar event", uid)

    async def replace_channel_events(
        self,
        listing_id: str,
        channel: Channel,
        events: list[CalendarEvent],
    ) -> int:
        async with self._lock_for(listing_id):
            kept = [e for e in self._events.get(listing_id, []) if e.channel != channel]
            self._events[listing_id] = kept + list(events)
        return len(events)
