"""Command-line interface for the opportunity watcher."""

import argparse
import asyncio
import logging
import os
import sys

from arbwatch.arbitrage.recorder import OpportunityRecorder
from arbwatch.bots.watcher import OpportunityWatcher, run_watcher
from arbwatch.config.settings import CONFIG_FILE_ENV, get_settings
from arbwatch.db.connection import Database
from arbwatch.errors import ConfigError, PersistenceError


def setup_logging() -> None:
    """Configure logging for the application."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Reduce noise from external libraries
    logging.getLogger("web3").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def print_banner() -> None:
    """Print application banner."""
    print("""
╔═══════════════════════════════════════════════════════════════╗
║           arbwatch                                            ║
║           Two-venue DEX round-trip opportunity watcher        ║
╚═══════════════════════════════════════════════════════════════╝
    """)


async def run_continuous() -> None:
    """Run the watcher until interrupted."""
    await run_watcher()


async def run_single_cycle() -> None:
    """Run exactly one cycle."""
    print_banner()
    watcher = await OpportunityWatcher.create()
    try:
        await watcher.run_once()
    finally:
        await watcher.close()


async def show_history(limit: int) -> None:
    """Print the most recent stored opportunities."""
    settings = get_settings()
    db = Database(settings.database_url)
    recorder = OpportunityRecorder(db)
    try:
        await recorder.ensure_schema()
        opportunities = await recorder.recent(limit)
    finally:
        await db.close()

    if not opportunities:
        print("No opportunities recorded yet.")
        return

    quote_symbol = settings.tokens.quote_symbol
    print(f"\n{'=' * 90}")
    print(f"Last {len(opportunities)} opportunities")
    print(f"{'=' * 90}")
    print(f"  {'ID':>6} {'Timestamp':<32} {'Profit':>12} {'Buy venue':<16} {'Sell venue':<16}")
    for opp in opportunities:
        print(
            f"  {opp.id:>6} {opp.timestamp:<32} "
            f"{opp.profit:>8.4f} {quote_symbol:<3} "
            f"{opp.buy_venue:<16} {opp.sell_venue:<16}"
        )


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="arbwatch: two-venue DEX round-trip opportunity watcher",
    )
    parser.add_argument(
        "--config",
        help="Path to the TOML configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit",
    )
    parser.add_argument(
        "--history",
        type=int,
        metavar="N",
        help="Print the last N recorded opportunities and exit",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.config:
        os.environ[CONFIG_FILE_ENV] = args.config
    if args.debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    try:
        setup_logging()

        if args.history is not None:
            asyncio.run(show_history(args.history))
        elif args.once:
            asyncio.run(run_single_cycle())
        else:
            asyncio.run(run_continuous())
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except ConnectionError as e:
        print(f"Connection error: {e}", file=sys.stderr)
        sys.exit(1)
    except PersistenceError as e:
        print(f"Database error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted by user")


if __name__ == "__main__":
    main()
