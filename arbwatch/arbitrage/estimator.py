"""Round-trip profit estimation."""

import logging
from decimal import Decimal

from arbwatch.config.settings import Settings, get_settings
from arbwatch.errors import DegenerateQuote
from arbwatch.models import ProfitEstimate, Quote
from arbwatch.utils.units import from_base_units, to_base_units

logger = logging.getLogger(__name__)


class ProfitEstimator:
    """Turns two quotes into a simulated profit in quote-token units.

    Leg 1 is base -> quote on the first venue, leg 2 is quote -> base on
    the second venue using leg 1's output as its input. Amounts stay as raw
    integers until they are scaled through ``arbwatch.utils.units``.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.base_decimals = self.settings.tokens.base_decimals
        self.quote_decimals = self.settings.tokens.quote_decimals
        self.trade_amount = self.settings.arbitrage.trade_amount
        self.cost_offset = self.settings.arbitrage.cost_offset

    @property
    def trade_amount_base_units(self) -> int:
        """Configured trade size in base-token base units."""
        return to_base_units(self.trade_amount, self.base_decimals)

    def estimate(self, quote1: Quote, quote2: Quote) -> ProfitEstimate:
        """
        Compute the simulated profit of selling then buying back the base token.

        price_1 = leg 1 output / input   (quote per base)
        price_2 = leg 2 output / input   (base per quote)
        delta   = max(0, leg 2 output - trade amount)   (base units)
        profit  = delta * price_1 - cost_offset

        Sentinel quotes are not special-cased; they yield a non-positive
        profit and an estimate marked not actionable.

        Args:
            quote1: Leg 1 quote (base -> quote)
            quote2: Leg 2 quote (quote -> base)

        Returns:
            ProfitEstimate

        Raises:
            DegenerateQuote: A ratio would divide by zero
        """
        if quote1.input_amount <= 0:
            raise DegenerateQuote(f"{quote1.venue_id}: leg 1 input amount is zero")
        if quote2.input_amount <= 0:
            raise DegenerateQuote(
                f"{quote2.venue_id}: leg 2 input amount is zero (no leg 1 output)"
            )

        price_1 = from_base_units(quote1.output_amount, self.quote_decimals) / from_base_units(
            quote1.input_amount, self.base_decimals
        )
        price_2 = from_base_units(quote2.output_amount, self.base_decimals) / from_base_units(
            quote2.input_amount, self.quote_decimals
        )
        if price_1 == 0:
            raise DegenerateQuote(f"{quote1.venue_id}: leg 1 price is zero")

        round_trip_delta = max(0, quote2.output_amount - self.trade_amount_base_units)
        simulated_profit = (
            from_base_units(round_trip_delta, self.base_decimals) * price_1 - self.cost_offset
        )

        estimate = ProfitEstimate(
            simulated_profit=simulated_profit,
            implied_buy_price=Decimal(1) / price_1,
            implied_sell_price=price_2,
            price_1=price_1,
            price_2=price_2,
            round_trip_delta=round_trip_delta,
            actionable=not (quote1.is_sentinel or quote2.is_sentinel),
        )
        logger.debug(f"Estimate: {estimate.to_dict()}")
        return estimate
