"""Pydantic schemas for API validation."""

from app.schemas.booking import BookingCreate, BookingResponse
from app.schemas.calendar import (
    AvailabilityResponse,
    BlockCreate,
    CalendarEventResponse,
    CalendarImportRequest,
    CalendarImportResponse,
    ImportedEvent,
)
from app.schemas.pricing import PricingQuoteRequest, PricingQuoteResponse

__all__ = [
    # Pricing
    "PricingQuoteRequest",
    "PricingQuoteResponse",
    # Calendar
    "AvailabilityResponse",
    "BlockCreate",
    "CalendarEventResponse",
    "CalendarImportRequest",
    "CalendarImportResponse",
    "ImportedEvent",
    # Booking
    "BookingCreate",
    "BookingResponse",
]
