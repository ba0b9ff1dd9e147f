"""Calendar event database model."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.database import Base
from app.domain.availability import CalendarEvent, Channel, EventKind, EventStatus


class CalendarEventRecord(Base):
    """Bookings and blocks on a listing's calendar, half-open date ranges."""

    __tablename__ = "calendar_events"
    __table_args__ = (
        Index("ix_calendar_events_listing_range", "listing_id", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    uid: Mapped[str | None] = mapped_column(String(255), index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)  # exclusive
    channel: Mapped[str] = mapped_column(
        String(20), nullable=False
    )  # direct, airbnb, vrbo, bookingcom, expedia, manual, blocked, other
    kind: Mapped[str] = mapped_column(String(10), default="booking")  # booking, block
    status: Mapped[str | None] = mapped_column(String(20))  # pending, confirmed, cancelled
    summary: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def to_event(self) -> CalendarEvent:
        return CalendarEvent(
            listing_id=self.listing_id,
            start_date=self.start_date,
            end_date=self.end_date,
            channel=Channel(self.channel),
            kind=EventKind(self.kind),
            status=EventStatus(self.status) if self.status else None,
            uid=self.uid,
            summary=self.summary,
        )

    @classmethod
    def from_event(cls, event: CalendarEvent) -> CalendarEventRecord:
        return cls(
            listing_id=event.listing_id,
            uid=event.uid,
            start_date=event.start_date,
            end_date=event.end_date,
            channel=event.channel.value,
            kind=event.kind.value,
            status=event.status.value if event.status else None,
            summary=event.summary,
        )
