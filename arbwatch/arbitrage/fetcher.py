"""Quote fetcher for the two venues."""

import asyncio
import logging

from aiohttp import ClientError
from web3.exceptions import Web3Exception

from arbwatch.config.settings import Settings, get_settings
from arbwatch.data_sources.base import BaseQuoteSource
from arbwatch.errors import QuoteEmpty, QuoteError, QuoteUnavailable
from arbwatch.models import Quote, RoundTrip

logger = logging.getLogger(__name__)


class QuoteFetcher:
    """Fetches the forward leg from venue A and the return leg from venue B.

    A failed leg is replaced by a sentinel zero quote. Nothing is retried
    within a cycle and no venue error escapes ``fetch_round_trip``.
    """

    def __init__(
        self,
        venue_a: BaseQuoteSource,
        venue_b: BaseQuoteSource,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.venue_a = venue_a
        self.venue_b = venue_b
        self.timeout = self.settings.arbitrage.quote_timeout
        self.forward_path = self.settings.tokens.forward_path
        self.return_path = self.settings.tokens.return_path

    async def fetch_quote(
        self,
        source: BaseQuoteSource,
        amount_in: int,
        path: list[str],
    ) -> Quote:
        """Query one venue for a single quote.

        Args:
            source: Venue to query
            amount_in: Input amount in base units of ``path[0]``
            path: Token addresses, first is input and last is output

        Returns:
            Quote with the realized output amount

        Raises:
            QuoteUnavailable: Network error, timeout, or malformed response
            QuoteEmpty: No input to quote, or the router returned zero output
        """
        if amount_in <= 0:
            raise QuoteEmpty(source.name, "no input amount to quote")

        try:
            amounts = await asyncio.wait_for(
                source.get_amounts_out(amount_in, path),
                timeout=self.timeout,
            )
        except TimeoutError as e:
            raise QuoteUnavailable(source.name, f"timed out after {self.timeout:g}s") from e
        except (Web3Exception, ClientError, OSError, ValueError) as e:
            raise QuoteUnavailable(source.name, f"request failed: {e}") from e

        output_amount = self._parse_output(source.name, amounts, len(path))

        logger.debug(f"{source.name}: {amount_in} -> {output_amount}")
        return Quote(
            venue_id=source.name,
            input_amount=amount_in,
            output_amount=output_amount,
            path=tuple(path),
        )

    @staticmethod
    def _parse_output(venue: str, amounts: object, hops: int) -> int:
        """Validate the router's amounts list and return its last element."""
        if not isinstance(amounts, (list, tuple)) or len(amounts) != hops:
            raise QuoteUnavailable(venue, f"malformed response: {amounts!r}")
        for amount in amounts:
            if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
                raise QuoteUnavailable(venue, f"malformed amount in response: {amount!r}")

        output_amount = amounts[-1]
        if output_amount == 0:
            raise QuoteEmpty(venue, "router returned zero output")
        return output_amount

    async def _fetch_or_sentinel(
        self,
        source: BaseQuoteSource,
        amount_in: int,
        path: list[str],
        step: str,
    ) -> Quote:
        try:
            return await self.fetch_quote(source, amount_in, path)
        except QuoteError as e:
            logger.warning(f"{step} quote from {source.name} failed: {e.reason}")
            return Quote.sentinel(source.name, amount_in, tuple(path), error=e.reason)
        except Exception as e:
            logger.exception(f"{step} quote from {source.name} failed unexpectedly: {e}")
            return Quote.sentinel(
                source.name, amount_in, tuple(path), error=f"unexpected error: {e}"
            )

    async def fetch_round_trip(self, amount_in: int) -> RoundTrip:
        """Fetch both legs of the round trip.

        Leg 1 sells ``amount_in`` base tokens on venue A. Leg 2 sells leg 1's
        output back to base tokens on venue B. When leg 1 yields nothing
        there is nothing to sell, so leg 2 is marked skipped instead of
        being sent to venue B.
        """
        first = await self._fetch_or_sentinel(
            self.venue_a, amount_in, self.forward_path, step="leg 1"
        )
        if first.is_sentinel:
            reason = f"skipped, no output from leg 1 on {first.venue_id}"
            logger.warning(f"leg 2 quote from {self.venue_b.name} {reason}")
            second = Quote.sentinel(
                self.venue_b.name, 0, tuple(self.return_path), error=reason, skipped=True
            )
        else:
            second = await self._fetch_or_sentinel(
                self.venue_b, first.output_amount, self.return_path, step="leg 2"
            )
        return RoundTrip(first=first, second=second)
