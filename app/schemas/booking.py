"""Booking-related Pydantic schemas."""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from app.schemas.calendar import CalendarEventResponse
from app.schemas.pricing import PricingQuoteResponse


class BookingCreate(BaseModel):
    """Schema for creating a direct booking."""

    listing_id: str = Field(..., min_length=1, max_length=64)
    check_in: date
    check_out: date
    host_net_nightly_minor: int = Field(..., gt=0)
    is_first_completed_booking: bool = False
    guest_reference: str | None = Field(None, max_length=200)

    @field_validator("check_out")
    @classmethod
    def validate_checkout(cls, v: date, info) -> date:
        check_in = info.data.get("check_in")
        if check_in and v <= check_in:
            raise ValueError("check_out must be after check_in")
        return v


class BookingResponse(BaseModel):
    """Schema for a reserved booking and its quote."""

    booking: CalendarEventResponse
    quote: PricingQuoteResponse
