"""Fixed-interval opportunity watcher.

Each cycle: fetch both legs, estimate profit, apply the policy, then record
or skip, then sleep. Per-cycle failures are reported and the loop carries
on; only startup failures (configuration, RPC connection) stop the process.
"""

import asyncio
import logging
import signal
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from web3 import AsyncWeb3

from arbwatch.arbitrage.estimator import ProfitEstimator
from arbwatch.arbitrage.fetcher import QuoteFetcher
from arbwatch.arbitrage.policy import OpportunityPolicy
from arbwatch.arbitrage.recorder import OpportunityRecorder
from arbwatch.config.settings import Settings, get_settings
from arbwatch.data_sources.router import RouterClient, close_rpc, connect_rpc
from arbwatch.db.connection import Database
from arbwatch.errors import DegenerateQuote, PersistenceError
from arbwatch.models import Opportunity, ProfitEstimate, RoundTrip

logger = logging.getLogger(__name__)


class CycleState(str, Enum):
    """Watcher state machine states."""

    IDLE = "idle"
    FETCHING = "fetching"
    ESTIMATING = "estimating"
    DECIDING = "deciding"
    RECORDING = "recording"
    SKIPPING = "skipping"
    SLEEPING = "sleeping"
    STOPPING = "stopping"


class CycleStatus(str, Enum):
    """How a cycle ended."""

    RECORDED = "recorded"
    SKIPPED = "skipped"
    DEGENERATE = "degenerate"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass
class CycleOutcome:
    """Result of one cycle, consumed by the reporter."""

    status: CycleStatus
    round_trip: RoundTrip | None = None
    estimate: ProfitEstimate | None = None
    opportunity: Opportunity | None = None
    error: str | None = None
    finished_at: datetime = field(default_factory=datetime.now)

    @property
    def failed_venues(self) -> list[str]:
        return self.round_trip.failed_venues if self.round_trip else []


class OpportunityWatcher:
    """Polls both venues and records round trips that beat the threshold."""

    def __init__(
        self,
        fetcher: QuoteFetcher,
        estimator: ProfitEstimator,
        policy: OpportunityPolicy,
        recorder: OpportunityRecorder,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.fetcher = fetcher
        self.estimator = estimator
        self.policy = policy
        self.recorder = recorder

        self.state = CycleState.IDLE
        self._running = False
        self._shutdown_event = asyncio.Event()

        # Connection handles owned by create()
        self._w3: AsyncWeb3 | None = None
        self._db: Database | None = None

        # Counters for the status line
        self.cycle_count = 0
        self.opportunity_count = 0
        self.failed_cycle_count = 0

    @classmethod
    async def create(cls, settings: Settings | None = None) -> "OpportunityWatcher":
        """Open the store and the RPC connection, then build the pipeline.

        Raises:
            ConfigError: RPC connection string is not set
            ConnectionError: RPC endpoint is unreachable
        """
        settings = settings or get_settings()
        rpc_url = settings.resolve_rpc_url()

        db = Database(settings.database_url)
        recorder = OpportunityRecorder(db)
        try:
            await recorder.ensure_schema()
        except PersistenceError as e:
            # Not fatal: each cycle will report the store as unavailable
            logger.error(f"Opportunity store unavailable: {e}")

        try:
            w3 = await connect_rpc(rpc_url, request_timeout=settings.arbitrage.quote_timeout)
        except Exception:
            await db.close()
            raise

        try:
            venue_a = RouterClient(w3, settings.venues.venue_a_address, settings.venues.venue_a_name)
            venue_b = RouterClient(w3, settings.venues.venue_b_address, settings.venues.venue_b_name)
            await venue_a.connect()
            await venue_b.connect()
        except Exception:
            await close_rpc(w3)
            await db.close()
            raise

        watcher = cls(
            fetcher=QuoteFetcher(venue_a, venue_b, settings),
            estimator=ProfitEstimator(settings),
            policy=OpportunityPolicy(settings),
            recorder=recorder,
            settings=settings,
        )
        watcher._w3 = w3
        watcher._db = db
        return watcher

    def _print_banner(self) -> None:
        """Print startup banner."""
        venues = self.settings.venues
        tokens = self.settings.tokens
        arb = self.settings.arbitrage
        print(f"""
═══════════════════════════════════════════════════════════════
  DEX ROUND-TRIP OPPORTUNITY WATCHER
═══════════════════════════════════════════════════════════════
  Pair:          {tokens.base_symbol}/{tokens.quote_symbol}
  Leg 1:         {tokens.base_symbol} -> {tokens.quote_symbol} on {venues.venue_a_name}
  Leg 2:         {tokens.quote_symbol} -> {tokens.base_symbol} on {venues.venue_b_name}
  Trade amount:  {arb.trade_amount} {tokens.base_symbol}
  Threshold:     {arb.profit_threshold} {tokens.quote_symbol}
  Cost offset:   {arb.cost_offset} {tokens.quote_symbol}
  Poll interval: {arb.polling_interval_seconds}s (quote timeout {arb.quote_timeout:g}s)
═══════════════════════════════════════════════════════════════
""")

    async def run_cycle(self) -> CycleOutcome:
        """Run one fetch-estimate-decide-record pass. Never raises for per-cycle failures."""
        self.cycle_count += 1

        self.state = CycleState.FETCHING
        round_trip = await self.fetcher.fetch_round_trip(self.estimator.trade_amount_base_units)

        self.state = CycleState.ESTIMATING
        try:
            estimate = self.estimator.estimate(round_trip.first, round_trip.second)
        except DegenerateQuote as e:
            logger.warning(f"Estimate not actionable: {e}")
            self.state = CycleState.SKIPPING
            return CycleOutcome(CycleStatus.DEGENERATE, round_trip=round_trip, error=str(e))

        self.state = CycleState.DECIDING
        if not self.policy.should_record(estimate):
            self.state = CycleState.SKIPPING
            return CycleOutcome(CycleStatus.SKIPPED, round_trip=round_trip, estimate=estimate)

        self.state = CycleState.RECORDING
        try:
            opportunity = await self.recorder.record(
                estimate,
                buy_venue=round_trip.first.venue_id,
                sell_venue=round_trip.second.venue_id,
            )
        except PersistenceError as e:
            logger.error(f"Recording skipped: {e}")
            return CycleOutcome(
                CycleStatus.PERSISTENCE_FAILED,
                round_trip=round_trip,
                estimate=estimate,
                error=str(e),
            )

        self.opportunity_count += 1
        return CycleOutcome(
            CycleStatus.RECORDED,
            round_trip=round_trip,
            estimate=estimate,
            opportunity=opportunity,
        )

    def report(self, outcome: CycleOutcome) -> None:
        """Print a human-readable line for the cycle outcome."""
        ts = outcome.finished_at.strftime("%H:%M:%S")
        quote_symbol = self.settings.tokens.quote_symbol
        base_symbol = self.settings.tokens.base_symbol

        if outcome.round_trip:
            for quote in (outcome.round_trip.first, outcome.round_trip.second):
                if quote.skipped:
                    print(f"[{ts}] ⏭️  Leg 2 on {quote.venue_id} {quote.error}")
                elif quote.is_sentinel:
                    print(f"[{ts}] ⚠️  No quote from {quote.venue_id}: {quote.error}")

        if outcome.status == CycleStatus.RECORDED and outcome.opportunity:
            opp = outcome.opportunity
            print(f"[{ts}] 💰 Potential Arbitrage Opportunity Found! Profit: {opp.profit:.4f} {quote_symbol}")
            print(f"  - Buy {base_symbol} on {opp.buy_venue}: {opp.buy_price:.6f}")
            print(f"  - Sell {base_symbol} on {opp.sell_venue}: {opp.sell_price:.6f}")
            print(f"  - Logged to database (row {opp.id}).")
        elif outcome.status == CycleStatus.PERSISTENCE_FAILED and outcome.estimate:
            print(
                f"[{ts}] ❌ Opportunity found (Profit: {outcome.estimate.simulated_profit:.4f} "
                f"{quote_symbol}) but could not be stored: {outcome.error}"
            )
        elif outcome.status == CycleStatus.DEGENERATE:
            print(f"[{ts}] ⚠️  Estimate skipped: {outcome.error}")
        elif outcome.estimate:
            print(
                f"[{ts}] 📉 No significant arbitrage opportunity found. "
                f"(Profit: {outcome.estimate.simulated_profit:.4f} {quote_symbol})"
            )

    async def _sleep(self) -> None:
        """Wait out the polling interval, waking early on shutdown."""
        self.state = CycleState.SLEEPING
        try:
            await asyncio.wait_for(
                self._shutdown_event.wait(),
                timeout=self.settings.arbitrage.polling_interval_seconds,
            )
        except TimeoutError:
            pass
        self.state = CycleState.IDLE

    async def start(self) -> None:
        """Run cycles until a shutdown signal arrives."""
        self._print_banner()
        self._running = True

        # Setup signal handlers
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, self._handle_shutdown)

        logger.info("Watcher starting...")

        while self._running and not self._shutdown_event.is_set():
            print(f"[{datetime.now().strftime('%H:%M:%S')}] 🔍 Checking for arbitrage opportunities...")
            try:
                outcome = await self.run_cycle()
                if outcome.status in (CycleStatus.DEGENERATE, CycleStatus.PERSISTENCE_FAILED):
                    self.failed_cycle_count += 1
                self.report(outcome)
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.failed_cycle_count += 1
                logger.exception(f"Error in cycle {self.cycle_count}: {e}")

            await self._sleep()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
        await self.shutdown()

    def _handle_shutdown(self) -> None:
        """Handle shutdown signal."""
        logger.info("Shutdown signal received...")
        self._running = False
        self._shutdown_event.set()

    def stop(self) -> None:
        """Request a stop after the current cycle."""
        self._handle_shutdown()

    async def run_once(self) -> CycleOutcome:
        """Run a single cycle (for testing and --once)."""
        outcome = await self.run_cycle()
        self.report(outcome)
        self.state = CycleState.IDLE
        return outcome

    async def shutdown(self) -> None:
        """Clean shutdown."""
        self.state = CycleState.STOPPING
        logger.info(
            f"Shutting down after {self.cycle_count} cycles: "
            f"{self.opportunity_count} opportunities recorded, "
            f"{self.failed_cycle_count} cycles failed"
        )
        await self.close()
        logger.info("Watcher stopped.")

    async def close(self) -> None:
        """Release the RPC and database connections opened by create()."""
        if self._w3 is not None:
            await close_rpc(self._w3)
            self._w3 = None
        if self._db is not None:
            await self._db.close()
            self._db = None


async def run_watcher(settings: Settings | None = None) -> None:
    """Run the opportunity watcher until stopped."""
    watcher = await OpportunityWatcher.create(settings)
    await watcher.start()
