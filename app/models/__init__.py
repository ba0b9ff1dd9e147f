"""Database models."""

from app.models.calendar import CalendarEventRecord

__all__ = [
    "CalendarEventRecord",
]
