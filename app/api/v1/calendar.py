"""External calendar (iCal) import endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_booking_service, get_calendar_import_service
from app.schemas.calendar import CalendarImportRequest, CalendarImportResponse, ImportedEvent
from app.services.booking_service import BookingService
from app.services.calendar_import_service import (
    CalendarImportService,
    guess_channel,
    to_calendar_events,
)

router = APIRouter()


@router.post("/import-ical", response_model=CalendarImportResponse)
async def import_ical(
    request: CalendarImportRequest,
    import_service: Annotated[CalendarImportService, Depends(get_calendar_import_service)],
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
) -> CalendarImportResponse:
    """Fetch and parse an iCal feed.

    When a listing is given, the feed replaces that channel's events on the
    listing's calendar.
    """
    result = await import_service.import_feed(request.url)

    stored = None
    if request.listing_id:
        channel = request.channel or guess_channel(request.url)
        events = to_calendar_events(result.events, request.listing_id, channel)
        stored = await booking_service.import_external_events(request.listing_id, channel, events)

    return CalendarImportResponse(
        events=[ImportedEvent.model_validate(e) for e in result.events],
        skipped=result.skipped,
        stored=stored,
    )
