"""Commission calculation service.

CRITICAL BUSINESS LOGIC:
- Platform commission is tiered by stay length:
  12% for 1-6 nights, 10% for 7-27 nights, 8% for 28+ nights
- A host's first completed booking carries 0% commission
  (processor fees still apply)
- The reported platform fee is capped per booking (£150 by default);
  the cap never changes the guest total
- This is the only place fee constants are resolved. Quote and
  booking-create both go through it.
"""

import logging
from dataclasses import dataclass

from app.config import Settings, get_settings
from app.core.exceptions import ValidationError
from app.domain.pricing import BookingQuote, FeeConfig, cached_guest_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StayQuote:
    """Quote for a whole stay plus the per-night guest price."""

    nights: int
    host_net_nightly_minor: int
    total: BookingQuote
    guest_unit_price_minor: int
    currency: str

    @property
    def host_net_total_minor(self) -> int:
        return self.total.host_net_total_minor


class CommissionService:
    """Service for resolving commission tiers and pricing stays."""

    def __init__(self, config: Settings | None = None):
        self.settings = config or get_settings()

    def resolve_platform_fee_bps(self, nights: int, is_first_completed_booking: bool = False) -> int:
        """Get platform commission in basis points for a stay.

        Args:
            nights: Number of nights booked
            is_first_completed_booking: True if the host has no completed bookings yet

        Returns:
            int: Commission in basis points (e.g., 1200 for 12%)
        """
        if nights < 1:
            raise ValidationError("nights must be at least 1")
        if is_first_completed_booking:
            return self.settings.first_booking_commission_bps
        if nights >= self.settings.commission_month_min_nights:
            return self.settings.commission_month_stay_bps
        if nights >= self.settings.commission_week_min_nights:
            return self.settings.commission_week_stay_bps
        return self.settings.commission_short_stay_bps

    def get_fee_config(self, nights: int, is_first_completed_booking: bool = False) -> FeeConfig:
        """Build the fee model for a stay."""
        platform_fee_bps = self.resolve_platform_fee_bps(nights, is_first_completed_booking)
        return FeeConfig(
            platform_fee_bps=platform_fee_bps,
            stripe_var_bps=self.settings.stripe_var_bps,
            stripe_fixed_minor=self.settings.stripe_fixed_minor,
            min_guest_total_minor=self.settings.min_guest_total_minor,
            platform_fee_cap_minor=self.settings.platform_fee_cap_minor if platform_fee_bps else None,
        )

    def quote_stay(
        self,
        host_net_nightly_minor: int,
        nights: int,
        is_first_completed_booking: bool = False,
    ) -> StayQuote:
        """Price a stay from the host's nightly net rate.

        The unit price is the nightly net priced alone under the same fee
        model, so guests see a per-night figure consistent with the tier.

        Args:
            host_net_nightly_minor: Host's desired nightly payout in pence
            nights: Number of nights
            is_first_completed_booking: True for the host's first completed booking

        Returns:
            StayQuote: Total and per-night quotes
        """
        if host_net_nightly_minor <= 0:
            raise ValidationError("host_net_nightly_minor must be a positive integer")
        config = self.get_fee_config(nights, is_first_completed_booking)
        version = self.settings.pricing_version
        total = cached_guest_total(host_net_nightly_minor * nights, config, version)
        unit = cached_guest_total(host_net_nightly_minor, config, version)
        logger.debug(
            f"Quoted {nights} nights at {host_net_nightly_minor}p net: "
            f"guest_total={total.guest_total_minor}p bps={config.platform_fee_bps}"
        )
        return StayQuote(
            nights=nights,
            host_net_nightly_minor=host_net_nightly_minor,
            total=total,
            guest_unit_price_minor=unit.guest_total_minor,
            currency=self.settings.currency,
        )

    def commission_label(self, platform_fee_bps: int) -> str:
        """Get human-readable description of a commission tier."""
        s = self.settings
        if platform_fee_bps == s.first_booking_commission_bps:
            return "Commission: Free for first completed booking"
        if platform_fee_bps == s.commission_month_stay_bps:
            return f"Commission: {s.commission_month_stay_bps / 100:g}% ({s.commission_month_min_nights}+ nights)"
        if platform_fee_bps == s.commission_week_stay_bps:
            return f"Commission: {s.commission_week_stay_bps / 100:g}% ({s.commission_week_min_nights}+ nights)"
        return (
            f"Commission: {s.commission_short_stay_bps / 100:g}% "
            f"(1–{s.commission_week_min_nights - 1} nights)"
        )


commission_service = CommissionService()
