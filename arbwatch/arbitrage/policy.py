"""Decision policy for recording opportunities."""

from decimal import Decimal

from arbwatch.config.settings import Settings, get_settings
from arbwatch.models import ProfitEstimate


class OpportunityPolicy:
    """Accepts an estimate only when its profit strictly beats the threshold."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.threshold: Decimal = self.settings.arbitrage.profit_threshold

    def should_record(self, estimate: ProfitEstimate) -> bool:
        """Decide whether ``estimate`` becomes a stored opportunity.

        Equality is rejected. Estimates built from a sentinel quote are
        rejected whatever the threshold. Profit is stored as a REAL, so the
        comparison is made on the float that will be written.
        """
        if not estimate.actionable:
            return False
        return float(estimate.simulated_profit) > float(self.threshold)
