"""SQLAlchemy-backed calendar repository."""

import asyncio
from datetime import date
from weakref import WeakValueDictionary

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import NotFoundError
from app.domain.availability import CalendarEvent, Channel, EventStatus, assert_range_free
from app.models.calendar import CalendarEventRecord
from app.repositories.base import CalendarRepository


class SqlCalendarRepository(CalendarRepository):
    """Repository over the calendar_events table.

    ``reserve`` reads and inserts in one transaction. On PostgreSQL a
    transaction-scoped advisory lock keyed on the listing serializes
    reservations across processes; within a process a per-listing asyncio
    lock does the same for every backend.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def _lock_for(self, listing_id: str) -> asyncio.Lock:
        # held only while a caller references it, so idle listings drop out
        lock = self._locks.get(listing_id)
        if lock is None:
            lock = self._locks[listing_id] = asyncio.Lock()
        return lock

    @staticmethod
    def _overlapping(listing_id: str, start: date | None, end: date | None):
        query = select(CalendarEventRecord).where(CalendarEventRecord.listing_id == listing_id)
        if end is not None:
            query = query.where(CalendarEventRecord.start_date < end)
        if start is not None:
            query = query.where(CalendarEventRecord.end_date > start)
        return query.order_by(CalendarEventRecord.start_date)

    async def list_events(
        self,
        listing_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CalendarEvent]:
        async with self.session_factory() as session:
            result = await session.execute(self._overlapping(listing_id, start, end))
            return [record.to_event() for record in result.scalars().all()]

    async def reserve(self, event: CalendarEvent) -> CalendarEvent:
        async with self._lock_for(event.listing_id):
            async with self.session_factory() as session, session.begin():
                if session.get_bind().dialect.name == "postgresql":
                    await session.execute(
                        select(func.pg_advisory_xact_lock(func.hashtext(event.listing_id)))
                    )
                result = await session.execute(
                    self._overlapping(event.listing_id, event.start_date, event.end_date)
                )
                existing = [record.to_event() for record in result.scalars().all()]
                assert_range_free(existing, event.start_date, event.end_date)
                session.add(CalendarEventRecord.from_event(event))
        return event

    async def get_event(self, listing_id: str, uid: str) -> CalendarEvent | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(CalendarEventRecord).where(
                    CalendarEventRecord.listing_id == listing_id,
                    CalendarEventRecord.uid == uid,
                )
            )
            record = result.scalars().first()
            return record.to_event() if record else None

    async def update_status(self, listing_id: str, uid: str, status: EventStatus) -> CalendarEvent:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                select(CalendarEventRecord).where(
                    CalendarEventRecord.listing_id == listing_id,
                    CalendarEventRecord.uid == uid,
                )
            )
            record = result.scalars().first()
            if record is None:
                raise NotFoundError("Calendar event", uid)
            record.status = status.value
            return record.to_event()

    async def replace_channel_events(
        self,
        listing_id: str,
        channel: Channel,
        events: list[CalendarEvent],
    ) -> int:
        async with self.session_factory() as session, session.begin():
            await session.execute(
                delete(CalendarEventRecord).where(
                    CalendarEventRecord.listing_id == listing_id,
                    CalendarEventRecord.channel == channel.value,
                )
            )
            session.add_all([CalendarEventRecord.from_event(e) for e in events])
        return len(events)
