"""Pytest configuration and fixtures."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from arbwatch.config.settings import (
    CONFIG_FILE_ENV,
    ArbitrageConfig,
    Settings,
    TokensConfig,
    VenuesConfig,
    get_settings,
)
from arbwatch.data_sources.base import BaseQuoteSource
from arbwatch.db.connection import Database
from arbwatch.models import Quote

ROUTER_A = "0x1111111111111111111111111111111111111111"
ROUTER_B = "0x2222222222222222222222222222222222222222"
WETH = "0x7ceb23fd6bc0add59e62ac25578270cff1b9f619"
USDC = "0x2791bca1f2de4661ed88a30c99a7a9449aa84174"

ONE_WETH = 10**18
WETH_3000_USDC = 3000 * 10**6
WETH_1_02 = 1_020_000_000_000_000_000


def make_settings(**arbitrage_overrides) -> Settings:
    """Settings for a WETH/USDC pair, 1 WETH trade, 10 USDC threshold."""
    arbitrage = {
        "trade_amount": Decimal("1.0"),
        "profit_threshold": Decimal("10.0"),
        "polling_interval_seconds": 10,
        "cost_offset": Decimal("0.50"),
    }
    arbitrage.update(arbitrage_overrides)
    return Settings(
        rpc_url_key="TEST_RPC_URL",
        venues=VenuesConfig(
            venue_a_address=ROUTER_A,
            venue_b_address=ROUTER_B,
            venue_a_name="Venue A",
            venue_b_name="Venue B",
        ),
        tokens=TokensConfig(
            base_token_address=WETH,
            quote_token_address=USDC,
            base_decimals=18,
            quote_decimals=6,
            base_symbol="WETH",
            quote_symbol="USDC",
        ),
        arbitrage=ArbitrageConfig(**arbitrage),
        database_url="sqlite+aiosqlite:///:memory:",
    )


def make_source(name: str, amounts=None, error: Exception | None = None) -> MagicMock:
    """A quote source whose get_amounts_out returns ``amounts`` or raises ``error``."""
    source = MagicMock(spec=BaseQuoteSource)
    source.name = name
    if error is not None:
        source.get_amounts_out = AsyncMock(side_effect=error)
    else:
        source.get_amounts_out = AsyncMock(return_value=amounts)
    return source


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep a developer's config.toml or cached settings out of the tests."""
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "absent.toml"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Default test settings."""
    return make_settings()


@pytest.fixture
def quote1() -> Quote:
    """Leg 1: 1 WETH -> 3000 USDC."""
    return Quote(venue_id="Venue A", input_amount=ONE_WETH, output_amount=WETH_3000_USDC)


@pytest.fixture
def quote2() -> Quote:
    """Leg 2: 3000 USDC -> 1.02 WETH."""
    return Quote(venue_id="Venue B", input_amount=WETH_3000_USDC, output_amount=WETH_1_02)


@pytest.fixture
async def db(tmp_path):
    """Throwaway SQLite opportunity store."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'opportunities.db'}")
    yield database
    await database.close()


@pytest.fixture
def settings_factory():
    """Build settings with arbitrage overrides."""
    return make_settings


@pytest.fixture
def source_factory():
    """Build fake quote sources."""
    return make_source
