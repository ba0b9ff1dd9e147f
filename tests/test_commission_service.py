"""Tests for commission tier resolution and stay quotes."""

import pytest

from app.config import Settings
from app.core.exceptions import ConfigurationError, ValidationError
from app.services.commission_service import CommissionService


class TestTierResolution:
    @pytest.mark.parametrize(
        "nights,expected_bps",
        [(1, 1200), (6, 1200), (7, 1000), (27, 1000), (28, 800), (90, 800)],
    )
    def test_tier_by_stay_length(self, commission_service, nights, expected_bps):
        assert commission_service.resolve_platform_fee_bps(nights) == expected_bps

    @pytest.mark.parametrize("nights", [1, 7, 28])
    def test_first_completed_booking_is_free(self, commission_service, nights):
        assert commission_service.resolve_platform_fee_bps(nights, is_first_completed_booking=True) == 0

    def test_zero_nights_rejected(self, commission_service):
        with pytest.raises(ValidationError):
            commission_service.resolve_platform_fee_bps(0)

    def test_fee_config_uses_settings(self, commission_service):
        config = commission_service.get_fee_config(3)

        assert config.platform_fee_bps == 1200
        assert config.stripe_var_bps == 150
        assert config.stripe_fixed_minor == 20
        assert config.min_guest_total_minor == 500
        assert config.platform_fee_cap_minor == 15000

    def test_first_booking_config_keeps_processor_fees(self, commission_service):
        config = commission_service.get_fee_config(3, is_first_completed_booking=True)

        assert config.platform_fee_bps == 0
        assert config.stripe_var_bps == 150
        assert config.stripe_fixed_minor == 20
        assert config.platform_fee_cap_minor is None

    def test_tiers_overridable(self):
        service = CommissionService(Settings(commission_short_stay_bps=1500, platform_fee_cap_minor=None))
        config = service.get_fee_config(2)

        assert config.platform_fee_bps == 1500
        assert config.platform_fee_cap_minor is None


class TestQuoteStay:
    def test_total_and_unit_price(self, commission_service):
        quote = commission_service.quote_stay(6000, 3)

        assert quote.nights == 3
        assert quote.host_net_total_minor == 18000
        assert quote.total.guest_total_minor == 20800
        assert quote.guest_unit_price_minor == 7000
        assert quote.total.platform_fee_bps == 1200
        assert quote.currency == "GBP"
        assert quote.total.pricing_version == "all_in_v2_tiers_cap_firstfree"

    def test_long_stay_uses_lower_tier(self, commission_service):
        short = commission_service.quote_stay(6000, 6)
        long = commission_service.quote_stay(6000, 7)

        assert long.total.platform_fee_bps == 1000
        assert long.guest_unit_price_minor <= short.guest_unit_price_minor

    def test_cap_applied_on_long_stay(self, commission_service):
        quote = commission_service.quote_stay(10000, 30)

        assert quote.total.platform_fee_capped is True
        assert quote.total.platform_fee_est_minor == 15000

    def test_non_positive_nightly_rejected(self, commission_service):
        with pytest.raises(ValidationError):
            commission_service.quote_stay(0, 3)

    def test_broken_fee_table(self):
        service = CommissionService(Settings(stripe_var_bps=9000))
        with pytest.raises(ConfigurationError):
            service.quote_stay(6000, 2)


class TestCommissionLabel:
    def test_labels(self, commission_service):
        assert commission_service.commission_label(0) == "Commission: Free for first completed booking"
        assert commission_service.commission_label(800) == "Commission: 8% (28+ nights)"
        assert commission_service.commission_label(1000) == "Commission: 10% (7+ nights)"
        assert commission_service.commission_label(1200) == "Commission: 12% (1–6 nights)"
