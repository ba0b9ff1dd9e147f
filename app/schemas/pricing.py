"""Pricing quote Pydantic schemas."""

from pydantic import BaseModel, Field

from app.services.commission_service import StayQuote


class PricingQuoteRequest(BaseModel):
    """Schema for quoting a stay from the host's nightly net rate."""

    host_net_nightly_minor: int = Field(..., gt=0)
    nights: int = Field(..., ge=1)
    is_first_completed_booking: bool = False


class PricingQuoteResponse(BaseModel):
    """Schema for an all-in pricing quote (amounts in pence)."""

    currency: str
    nights: int
    host_net_nightly_minor: int
    host_net_total_minor: int
    guest_total_minor: int
    guest_unit_price_minor: int
    platform_fee_est_minor: int
    platform_fee_capped: bool
    stripe_fee_est_minor: int
    platform_margin_est_minor: int
    platform_fee_bps: int
    stripe_var_bps: int
    stripe_fixed_minor: int
    commission_label: str | None = None
    pricing_version: str

    @classmethod
    def from_quote(cls, quote: StayQuote, commission_label: str | None = None) -> "PricingQuoteResponse":
        total = quote.total
        return cls(
            currency=quote.currency,
            nights=quote.nights,
            host_net_nightly_minor=quote.host_net_nightly_minor,
            host_net_total_minor=total.host_net_total_minor,
            guest_total_minor=total.guest_total_minor,
            guest_unit_price_minor=quote.guest_unit_price_minor,
            platform_fee_est_minor=total.platform_fee_est_minor,
            platform_fee_capped=total.platform_fee_capped,
            stripe_fee_est_minor=total.stripe_fee_est_minor,
            platform_margin_est_minor=total.platform_margin_est_minor,
            platform_fee_bps=total.platform_fee_bps,
            stripe_var_bps=total.stripe_var_bps,
            stripe_fixed_minor=total.stripe_fixed_minor,
            commission_label=commission_label,
            pricing_version=total.pricing_version,
        )
