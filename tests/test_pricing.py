"""Tests for all-in guest pricing."""

import pytest

from app.core.exceptions import ConfigurationError, ValidationError
from app.domain import pricing
from app.domain.pricing import (
    FeeConfig,
    cached_guest_total,
    ceil_div,
    compute_guest_total,
    round_half_up,
    round_to_major,
)


# =============================================================================
# Integer helpers
# =============================================================================


class TestIntegerHelpers:
    def test_ceil_div(self):
        assert ceil_div(10, 5) == 2
        assert ceil_div(11, 5) == 3
        assert ceil_div(0, 7) == 0

    def test_round_half_up(self):
        assert round_half_up(75000, 10000) == 8
        assert round_half_up(74999, 10000) == 7
        assert round_half_up(0, 10000) == 0

    def test_round_to_major(self):
        assert round_to_major(6960) == 7000
        assert round_to_major(6950) == 7000
        assert round_to_major(6949) == 6900
        assert round_to_major(0) == 0


# =============================================================================
# compute_guest_total
# =============================================================================


class TestComputeGuestTotal:
    def test_standard_tier_scenario(self, fee_config):
        """£60 net at 12% + 1.5% + 20p prices to £70."""
        quote = compute_guest_total(6000, fee_config)

        assert quote.guest_total_minor == 7000
        assert quote.guest_total_minor % 100 == 0
        assert quote.guest_total_minor >= 6020
        assert quote.platform_fee_est_minor == 840
        assert quote.stripe_fee_est_minor == 125
        assert quote.platform_margin_est_minor == 875
        assert quote.platform_fee_capped is False
        assert quote.config == fee_config

    def test_zero_net_is_clamped_to_floor(self, fee_config):
        quote = compute_guest_total(0, fee_config)

        assert quote.guest_total_minor == 500
        assert quote.stripe_fee_est_minor == 28
        assert quote.platform_margin_est_minor == 472

    def test_rounding_down_triggers_margin_correction(self):
        """With no commission, rounding to 6100 leaves a negative margin."""
        config = FeeConfig(
            platform_fee_bps=0,
            stripe_var_bps=150,
            stripe_fixed_minor=20,
            min_guest_total_minor=500,
        )
        quote = compute_guest_total(6000, config)

        assert quote.guest_total_minor == 6200
        assert quote.stripe_fee_est_minor == 113
        assert quote.platform_margin_est_minor == 87
        assert quote.platform_fee_est_minor == 0

    def test_floor_not_multiple_of_100(self):
        config = FeeConfig(
            platform_fee_bps=0,
            stripe_var_bps=0,
            stripe_fixed_minor=0,
            min_guest_total_minor=520,
        )
        quote = compute_guest_total(0, config)

        assert quote.guest_total_minor == 600

    def test_cap_limits_reported_fee_only(self, fee_config):
        capped_config = FeeConfig(
            platform_fee_bps=1200,
            stripe_var_bps=150,
            stripe_fixed_minor=20,
            min_guest_total_minor=500,
            platform_fee_cap_minor=15000,
        )
        uncapped = compute_guest_total(200000, fee_config)
        capped = compute_guest_total(200000, capped_config)

        assert capped.platform_fee_capped is True
        assert capped.platform_fee_est_minor == 15000
        assert uncapped.platform_fee_est_minor > 15000
        assert capped.guest_total_minor == uncapped.guest_total_minor

    def test_cap_not_reached(self):
        config = FeeConfig(1200, 150, 20, 500, platform_fee_cap_minor=15000)
        quote = compute_guest_total(6000, config)

        assert quote.platform_fee_capped is False
        assert quote.platform_fee_est_minor == 840

    def test_pricing_version_is_carried(self, fee_config):
        quote = compute_guest_total(6000, fee_config, pricing_version="all_in_v1")
        assert quote.pricing_version == "all_in_v1"

    def test_negative_net_rejected(self, fee_config):
        with pytest.raises(ValidationError):
            compute_guest_total(-1, fee_config)


class TestInvariants:
    CONFIGS = [
        FeeConfig(1200, 150, 20, 500),
        FeeConfig(1000, 150, 20, 500),
        FeeConfig(800, 150, 20, 500),
        FeeConfig(0, 150, 20, 500),
        FeeConfig(0, 290, 20, 550),
        FeeConfig(2500, 400, 35, 1000),
    ]
    NETS = [0, 1, 49, 50, 99, 100, 101, 999, 4321, 6000, 12345, 99999, 250000]

    @pytest.mark.parametrize("config", CONFIGS)
    def test_quote_invariants(self, config):
        for host_net in self.NETS:
            quote = compute_guest_total(host_net, config)
            guest = quote.guest_total_minor

            assert guest % 100 == 0
            assert guest >= config.min_guest_total_minor
            assert guest >= host_net + config.stripe_fixed_minor
            assert guest - host_net - quote.stripe_fee_est_minor >= 0
            assert quote.platform_margin_est_minor >= 0

    def test_identical_inputs_identical_output(self, fee_config):
        assert compute_guest_total(4321, fee_config) == compute_guest_total(4321, fee_config)

    def test_cached_matches_uncached(self, fee_config):
        assert cached_guest_total(4321, fee_config) == compute_guest_total(4321, fee_config)


# =============================================================================
# Configuration errors
# =============================================================================


class TestConfigurationErrors:
    def test_fee_rates_at_100_percent(self):
        config = FeeConfig(9000, 1000, 20, 500)
        with pytest.raises(ConfigurationError):
            compute_guest_total(6000, config)

    def test_fee_rates_above_100_percent(self):
        config = FeeConfig(9500, 1000, 20, 500)
        with pytest.raises(ConfigurationError):
            compute_guest_total(6000, config)

    def test_negative_fee_rejected(self):
        config = FeeConfig(-100, 150, 20, 500)
        with pytest.raises(ConfigurationError):
            compute_guest_total(6000, config)

    def test_margin_loop_bound(self, monkeypatch):
        monkeypatch.setattr(pricing, "MAX_MARGIN_CORRECTIONS", 0)
        config = FeeConfig(0, 150, 20, 500)
        with pytest.raises(ConfigurationError, match="iteration bound"):
            compute_guest_total(6000, config)
