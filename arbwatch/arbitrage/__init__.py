"""Round-trip arbitrage pipeline: fetch, estimate, decide, record."""

from arbwatch.arbitrage.estimator import ProfitEstimator
from arbwatch.arbitrage.fetcher import QuoteFetcher
from arbwatch.arbitrage.policy import OpportunityPolicy
from arbwatch.arbitrage.recorder import OpportunityRecorder

__all__ = [
    "OpportunityPolicy",
    "OpportunityRecorder",
    "ProfitEstimator",
    "QuoteFetcher",
]
