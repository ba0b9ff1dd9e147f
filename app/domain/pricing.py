"""All-in guest pricing.

Inverts the fee-inclusive pricing formula so the host receives at least the
net amount they asked for, after the platform commission and the payment
processor fee are taken from what the guest pays.

All arithmetic is integer-only, in minor currency units (pence).
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from app.core.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

BPS_DENOMINATOR = 10_000
MINOR_PER_MAJOR = 100
MAX_MARGIN_CORRECTIONS = 10
DEFAULT_PRICING_VERSION = "all_in_v2_tiers_cap_firstfree"


@dataclass(frozen=True)
class FeeConfig:
    """Fee model resolved once per quote."""

    platform_fee_bps: int
    stripe_var_bps: int
    stripe_fixed_minor: int
    min_guest_total_minor: int
    platform_fee_cap_minor: int | None = None

    @property
    def retained_bps(self) -> int:
        """Share of the guest total left after percentage fees."""
        return BPS_DENOMINATOR - self.platform_fee_bps - self.stripe_var_bps

    def validate(self) -> None:
        """Raise ConfigurationError unless the fee model can price a booking."""
        for name in ("platform_fee_bps", "stripe_var_bps", "stripe_fixed_minor", "min_guest_total_minor"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative")
        if self.platform_fee_cap_minor is not None and self.platform_fee_cap_minor < 0:
            raise ConfigurationError("platform_fee_cap_minor must not be negative")
        if self.retained_bps <= 0:
            raise ConfigurationError(
                f"Fee rates exceed 100%: platform {self.platform_fee_bps} bps + "
                f"processor {self.stripe_var_bps} bps"
            )


@dataclass(frozen=True)
class BookingQuote:
    """Guest-facing total with every intermediate figure kept for audit."""

    host_net_total_minor: int
    guest_total_minor: int
    platform_fee_est_minor: int
    platform_fee_capped: bool
    stripe_fee_est_minor: int
    platform_margin_est_minor: int
    config: FeeConfig
    pricing_version: str = DEFAULT_PRICING_VERSION

    @property
    def platform_fee_bps(self) -> int:
        return self.config.platform_fee_bps

    @property
    def stripe_var_bps(self) -> int:
        return self.config.stripe_var_bps

    @property
    def stripe_fixed_minor(self) -> int:
        return self.config.stripe_fixed_minor


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer division rounding towards positive infinity."""
    return -(-numerator // denominator)


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounding to nearest, halves away from zero (non-negative inputs)."""
    return (2 * numerator + denominator) // (2 * denominator)


def round_to_major(amount_minor: int) -> int:
    """Round to the nearest whole currency unit."""
    return round_half_up(amount_minor, MINOR_PER_MAJOR) * MINOR_PER_MAJOR


def _estimate_fees(guest_total: int, host_net_total: int, config: FeeConfig) -> tuple[int, int, int]:
    platform_fee = round_half_up(guest_total * config.platform_fee_bps, BPS_DENOMINATOR)
    stripe_fee = (
        round_half_up(guest_total * config.stripe_var_bps, BPS_DENOMINATOR)
        + config.stripe_fixed_minor
    )
    margin = guest_total - host_net_total - stripe_fee
    return platform_fee, stripe_fee, margin


def compute_guest_total(
    host_net_total_minor: int,
    config: FeeConfig,
    pricing_version: str = DEFAULT_PRICING_VERSION,
) -> BookingQuote:
    """Compute the all-in guest total for a host's desired net payout.

    Args:
        host_net_total_minor: Amount the host must receive, in pence (zero allowed)
        config: Fee model to price under
        pricing_version: Tag stored with the quote for schema evolution

    Returns:
        BookingQuote: Guest total (a whole number of pounds) and fee estimates

    Raises:
        ConfigurationError: If the fee model is malformed or the margin
            correction does not converge
        ValidationError: If the host net total is negative
    """
    config.validate()
    if host_net_total_minor < 0:
        raise ValidationError("host_net_total_minor must not be negative")

    floor = host_net_total_minor + config.stripe_fixed_minor
    guest_total = ceil_div(floor * BPS_DENOMINATOR, config.retained_bps)
    guest_total = max(guest_total, floor, config.min_guest_total_minor)

    guest_total = round_to_major(guest_total)
    if guest_total < config.min_guest_total_minor:
        guest_total = ceil_div(config.min_guest_total_minor, MINOR_PER_MAJOR) * MINOR_PER_MAJOR

    platform_fee, stripe_fee, margin = _estimate_fees(guest_total, host_net_total_minor, config)

    corrections = 0
    while margin < 0:
        if corrections >= MAX_MARGIN_CORRECTIONS:
            logger.error(
                f"Margin correction did not converge for host_net={host_net_total_minor} "
                f"with {config}"
            )
            raise ConfigurationError("Margin correction exceeded its iteration bound")
        guest_total += MINOR_PER_MAJOR
        platform_fee, stripe_fee, margin = _estimate_fees(guest_total, host_net_total_minor, config)
        corrections += 1

    capped = False
    cap = config.platform_fee_cap_minor
    if cap is not None and platform_fee > cap:
        platform_fee = cap
        capped = True

    return BookingQuote(
        host_net_total_minor=host_net_total_minor,
        guest_total_minor=guest_total,
        platform_fee_est_minor=platform_fee,
        platform_fee_capped=capped,
        stripe_fee_est_minor=stripe_fee,
        platform_margin_est_minor=margin,
        config=config,
        pricing_version=pricing_version,
    )


@lru_cache(maxsize=4096)
def cached_guest_total(
    host_net_total_minor: int,
    config: FeeConfig,
    pricing_version: str = DEFAULT_PRICING_VERSION,
) -> BookingQuote:
    """Memoized compute_guest_total; quotes are pure so cache hits are exact."""
    return compute_guest_total(host_net_total_minor, config, pricing_version)
