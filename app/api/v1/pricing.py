"""Pricing quote endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_booking_service
from app.schemas.pricing import PricingQuoteRequest, PricingQuoteResponse
from app.services.booking_service import BookingService

router = APIRouter()


@router.post("/quote", response_model=PricingQuoteResponse)
async def quote_stay(
    request: PricingQuoteRequest,
    booking_service: Annotated[BookingService, Depends(get_booking_service)],
) -> PricingQuoteResponse:
    """Quote the all-in guest price for a host's nightly net rate."""
    quote = booking_service.quote(
        host_net_nightly_minor=request.host_net_nightly_minor,
        nights=request.nights,
        is_first_completed_booking=request.is_first_completed_booking,
    )
    label = booking_service.commission_service.commission_label(quote.total.platform_fee_bps)
    return PricingQuoteResponse.from_quote(quote, commission_label=label)
