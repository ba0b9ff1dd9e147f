"""Booking endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import get_booking_service
from app.schemas.booking import BookingCreate, BookingResponse
from app.schemas.calendar import CalendarEventResponse
from app.schemas.pricing import PricingQuoteResponse
from app.services.booking_service import BookingService

router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
) -> BookingResponse:
    """Create a pending direct booking if every night is free."""
    reservation = await booking_service.create_booking(
        listing_id=booking_data.listing_id,
        check_in=booking_data.check_in,
        check_out=booking_data.check_out,
        host_net_nightly_minor=booking_data.host_net_nightly_minor,
        is_first_completed_booking=booking_data.is_first_completed_booking,
        guest_reference=booking_data.guest_reference,
    )
    label = booking_service.commission_service.commission_label(
        reservation.quote.total.platform_fee_bps
    )
    return BookingResponse(
        booking=CalendarEventResponse.model_validate(reservation.event),
        quote=PricingQuoteResponse.from_quote(reservation.quote, commission_label=label),
    )


@router.post("/{listing_id}/{booking_uid}/confirm", response_model=CalendarEventResponse)
async def confirm_booking(
    listing_id: str,
    booking_uid: str,
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
) -> CalendarEventResponse:
    """Confirm a pending booking (host only)."""
    event = await booking_service.confirm_booking(listing_id, booking_uid)
    return CalendarEventResponse.model_validate(event)


@router.post("/{listing_id}/{booking_uid}/cancel", response_model=CalendarEventResponse)
async def cancel_booking(
    listing_id: str,
    booking_uid: str,
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
) -> CalendarEventResponse:
    """Cancel a booking, freeing its nights."""
    event = await booking_service.cancel_booking(listing_id, booking_uid)
    return CalendarEventResponse.model_validate(event)
