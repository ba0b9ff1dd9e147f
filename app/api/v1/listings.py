"""Listing calendar endpoints: availability and host blocks."""

from datetime import UTC, date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from app.api.deps import get_booking_service
from app.schemas.calendar import AvailabilityResponse, BlockCreate, CalendarEventResponse
from app.services.booking_service import BookingService

router = APIRouter()

ListingId = Annotated[str, Path(min_length=1, max_length=64)]


@router.get("/{listing_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    listing_id: ListingId,
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
    from_date: date = Query(..., alias="from"),
    to_date: date = Query(..., alias="to"),
) -> AvailabilityResponse:
    """Get booked and blocked nights for a listing between two dates."""
    summary = await booking_service.get_availability(listing_id, from_date, to_date)
    return AvailabilityResponse(
        listing_id=listing_id,
        from_date=from_date,
        to_date=to_date,
        booked=summary.booked,
        blocked=summary.blocked,
        generated_at=datetime.now(UTC),
    )


@router.post(
    "/{listing_id}/blocks",
    response_model=CalendarEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_block(
    listing_id: ListingId,
    block: BlockCreate,
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
) -> CalendarEventResponse:
    """Block nights on a listing (host only)."""
    event = await booking_service.create_block(
        listing_id, block.start_date, block.end_date, block.summary
    )
    return CalendarEventResponse.model_validate(event)
