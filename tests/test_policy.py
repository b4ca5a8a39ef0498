"""Tests for the opportunity decision policy."""

from decimal import Decimal

import pytest

from arbwatch.arbitrage.policy import OpportunityPolicy
from arbwatch.models import ProfitEstimate

EPSILON = Decimal("0.000001")


def _estimate(profit: Decimal, actionable: bool = True) -> ProfitEstimate:
    return ProfitEstimate(
        simulated_profit=profit,
        implied_buy_price=Decimal("0.000333"),
        implied_sell_price=Decimal("0.00034"),
        actionable=actionable,
    )


class TestOpportunityPolicy:
    """Tests for OpportunityPolicy."""

    @pytest.fixture
    def policy(self, settings_factory) -> OpportunityPolicy:
        """Policy with a 59.5 threshold."""
        return OpportunityPolicy(settings_factory(profit_threshold=Decimal("59.5")))

    def test_rejects_at_threshold(self, policy: OpportunityPolicy) -> None:
        """Test a profit exactly equal to the threshold is rejected."""
        assert policy.should_record(_estimate(Decimal("59.5"))) is False

    def test_accepts_just_above_threshold(self, policy: OpportunityPolicy) -> None:
        """Test a profit strictly above the threshold is accepted."""
        assert policy.should_record(_estimate(Decimal("59.5") + EPSILON)) is True

    def test_rejects_just_below_threshold(self, policy: OpportunityPolicy) -> None:
        """Test a profit just below the threshold is rejected."""
        assert policy.should_record(_estimate(Decimal("59.5") - EPSILON)) is False

    def test_accepts_scenario_profit_at_default_threshold(self, settings) -> None:
        """Test 59.5 clears a threshold of 10."""
        assert OpportunityPolicy(settings).should_record(_estimate(Decimal("59.5"))) is True

    def test_never_accepts_non_actionable(self, settings_factory) -> None:
        """Test a sentinel-derived estimate is rejected even under a negative threshold."""
        policy = OpportunityPolicy(settings_factory(profit_threshold=Decimal("-100")))

        assert policy.should_record(_estimate(Decimal("-0.50"), actionable=False)) is False
        assert policy.should_record(_estimate(Decimal("-0.50"), actionable=True)) is True

    def test_is_pure(self, policy: OpportunityPolicy) -> None:
        """Test repeated decisions on the same estimate agree."""
        estimate = _estimate(Decimal("60"))
        assert [policy.should_record(estimate) for _ in range(3)] == [True, True, True]

    def test_rejects_excess_lost_in_storage(self, settings_factory) -> None:
        """Test a profit above the threshold only beyond float precision is rejected."""
        policy = OpportunityPolicy(settings_factory(profit_threshold=Decimal("10")))

        assert policy.should_record(_estimate(Decimal("10.000000000000000001"))) is False
        assert policy.should_record(_estimate(Decimal("10.00000000000001"))) is True
