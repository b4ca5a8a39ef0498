"""Tests for round-trip profit estimation."""

from decimal import Decimal

import pytest

from arbwatch.arbitrage.estimator import ProfitEstimator
from arbwatch.errors import DegenerateQuote
from arbwatch.models import Quote


class TestProfitEstimator:
    """Tests for ProfitEstimator."""

    @pytest.fixture
    def estimator(self, settings) -> ProfitEstimator:
        """Create an estimator for 1 WETH with a 0.50 USDC cost offset."""
        return ProfitEstimator(settings)

    def test_trade_amount_in_base_units(self, estimator: ProfitEstimator) -> None:
        """Test the configured trade size is scaled by the base decimals."""
        assert estimator.trade_amount_base_units == 10**18

    def test_profitable_round_trip(
        self, estimator: ProfitEstimator, quote1: Quote, quote2: Quote
    ) -> None:
        """Test 1 WETH -> 3000 USDC -> 1.02 WETH yields 0.02 * 3000 - 0.50."""
        estimate = estimator.estimate(quote1, quote2)

        assert estimate.price_1 == Decimal("3000")
        assert estimate.round_trip_delta == 2 * 10**16
        assert estimate.simulated_profit == Decimal("59.5")
        assert estimate.actionable is True

    def test_implied_prices(
        self, estimator: ProfitEstimator, quote1: Quote, quote2: Quote
    ) -> None:
        """Test buy price is 1 / price_1 and sell price is price_2."""
        estimate = estimator.estimate(quote1, quote2)

        assert estimate.implied_buy_price == Decimal(1) / Decimal(3000)
        assert estimate.price_2 == Decimal("0.00034")  # 1.02 WETH / 3000 USDC
        assert estimate.implied_sell_price == estimate.price_2

    def test_estimate_is_deterministic(
        self, estimator: ProfitEstimator, quote1: Quote, quote2: Quote
    ) -> None:
        """Test identical inputs give identical estimates."""
        assert estimator.estimate(quote1, quote2) == estimator.estimate(quote1, quote2)

    def test_losing_round_trip_is_clamped(
        self, estimator: ProfitEstimator, quote1: Quote
    ) -> None:
        """Test a round trip returning less than the trade amount has zero delta."""
        quote2 = Quote(
            venue_id="Venue B",
            input_amount=3000 * 10**6,
            output_amount=990_000_000_000_000_000,  # 0.99 WETH
        )

        estimate = estimator.estimate(quote1, quote2)

        assert estimate.round_trip_delta == 0
        assert estimate.simulated_profit == Decimal("-0.50")

    def test_venue_b_sentinel_gives_negative_profit(
        self, estimator: ProfitEstimator, quote1: Quote
    ) -> None:
        """Test a failed leg 2 yields -cost_offset and a non-actionable estimate."""
        sentinel = Quote.sentinel("Venue B", 3000 * 10**6, error="timed out")

        estimate = estimator.estimate(quote1, sentinel)

        assert estimate.round_trip_delta == 0
        assert estimate.simulated_profit == Decimal("-0.50")
        assert estimate.simulated_profit <= 0
        assert estimate.actionable is False

    def test_venue_a_sentinel_is_degenerate(self, estimator: ProfitEstimator) -> None:
        """Test a failed leg 1 leaves leg 2 with no input and raises DegenerateQuote."""
        sentinel1 = Quote.sentinel("Venue A", 10**18, error="request failed")
        sentinel2 = Quote.sentinel("Venue B", 0, error="no input amount to quote")

        with pytest.raises(DegenerateQuote):
            estimator.estimate(sentinel1, sentinel2)

    def test_zero_leg1_price_is_degenerate(
        self, estimator: ProfitEstimator, quote2: Quote
    ) -> None:
        """Test a zero leg 1 output cannot be inverted into a buy price."""
        quote1 = Quote.sentinel("Venue A", 10**18)

        with pytest.raises(DegenerateQuote):
            estimator.estimate(quote1, quote2)

    def test_zero_leg1_input_is_degenerate(
        self, estimator: ProfitEstimator, quote2: Quote
    ) -> None:
        """Test a zero leg 1 input is rejected rather than divided by."""
        quote1 = Quote(venue_id="Venue A", input_amount=0, output_amount=3000 * 10**6)

        with pytest.raises(DegenerateQuote):
            estimator.estimate(quote1, quote2)

    def test_cost_offset_is_applied(
        self, settings_factory, quote1: Quote, quote2: Quote
    ) -> None:
        """Test a custom cost offset is subtracted from the gross profit."""
        estimator = ProfitEstimator(settings_factory(cost_offset=Decimal("5")))

        assert estimator.estimate(quote1, quote2).simulated_profit == Decimal("55")
