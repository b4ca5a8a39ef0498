"""Data models for the opportunity watcher."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Quote:
    """One venue's answer to "how much output for this input".

    Amounts are raw integers in each token's base units. A quote with a zero
    output amount is the sentinel substituted when a fetch fails.
    """

    venue_id: str
    input_amount: int
    output_amount: int
    path: tuple[str, ...] = ()
    error: str | None = None
    skipped: bool = False  # never sent to the venue

    @classmethod
    def sentinel(
        cls,
        venue_id: str,
        input_amount: int,
        path: tuple[str, ...] = (),
        error: str | None = None,
        skipped: bool = False,
    ) -> "Quote":
        """Placeholder quote for a failed or skipped fetch."""
        return cls(
            venue_id=venue_id,
            input_amount=input_amount,
            output_amount=0,
            path=path,
            error=error,
            skipped=skipped,
        )

    @property
    def is_sentinel(self) -> bool:
        """True when this quote carries no price signal."""
        return self.output_amount == 0


@dataclass(frozen=True)
class RoundTrip:
    """Both legs fetched in one cycle."""

    first: Quote
    second: Quote

    @property
    def failed_venues(self) -> list[str]:
        """Venues that were queried and returned no usable quote."""
        return [
            q.venue_id for q in (self.first, self.second) if q.is_sentinel and not q.skipped
        ]

    @property
    def complete(self) -> bool:
        return not (self.first.is_sentinel or self.second.is_sentinel)


@dataclass(frozen=True)
class ProfitEstimate:
    """Simulated round-trip profit derived from two quotes."""

    simulated_profit: Decimal
    implied_buy_price: Decimal
    implied_sell_price: Decimal
    price_1: Decimal = Decimal("0")
    price_2: Decimal = Decimal("0")
    round_trip_delta: int = 0  # base-token units
    actionable: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for display/JSON."""
        return {
            "simulated_profit": str(self.simulated_profit),
            "implied_buy_price": str(self.implied_buy_price),
            "implied_sell_price": str(self.implied_sell_price),
            "price_1": str(self.price_1),
            "price_2": str(self.price_2),
            "round_trip_delta": self.round_trip_delta,
            "actionable": self.actionable,
        }


@dataclass(frozen=True)
class Opportunity:
    """A persisted opportunity record. Append-only once written."""

    timestamp: str
    profit: Decimal
    buy_venue: str
    sell_venue: str
    buy_price: Decimal
    sell_price: Decimal
    id: int | None = field(default=None, compare=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "profit": str(self.profit),
            "buy_venue": self.buy_venue,
            "sell_venue": self.sell_venue,
            "buy_price": str(self.buy_price),
            "sell_price": str(self.sell_price),
        }


def local_timestamp(now: datetime | None = None) -> str:
    """Wall-clock timestamp string used for stored records."""
    now = now or datetime.now().astimezone()
    return now.isoformat(sep=" ", timespec="microseconds")
