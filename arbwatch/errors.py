"""Exception hierarchy for arbwatch.

Only ``ConfigError`` (and RPC connection failure at startup) is fatal.
Everything else is caught by the cycle driver and isolated to one cycle.
"""


class ArbwatchError(Exception):
    """Base class for all arbwatch errors."""


class ConfigError(ArbwatchError):
    """Configuration is missing, malformed, or references an unset variable."""


class QuoteError(ArbwatchError):
    """A venue could not produce a usable quote."""

    def __init__(self, venue: str, message: str) -> None:
        super().__init__(f"{venue}: {message}")
        self.venue = venue
        self.reason = message


class QuoteUnavailable(QuoteError):
    """Network failure, timeout, or malformed router response."""


class QuoteEmpty(QuoteError):
    """Router answered but there is no usable output amount."""


class DegenerateQuote(ArbwatchError):
    """Quote amounts would force a division by zero in the estimator."""


class PersistenceError(ArbwatchError):
    """The opportunity store rejected or could not accept a write."""
