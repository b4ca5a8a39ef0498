"""Application settings using Pydantic."""

import os
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from web3 import Web3

from arbwatch.db.connection import async_url
from arbwatch.errors import ConfigError

DEFAULT_CONFIG_FILE = "config.toml"

# Overrides the TOML path (set by main.py --config)
CONFIG_FILE_ENV = "ARBWATCH_CONFIG"


def _checksum(value: str) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValueError(f"not a valid address: {value!r}")
    return Web3.to_checksum_address(value)


class VenuesConfig(BaseModel):
    """The two router contracts being compared."""

    venue_a_address: str
    venue_b_address: str
    venue_a_name: str = "Venue A"
    venue_b_name: str = "Venue B"

    @field_validator("venue_a_address", "venue_b_address")
    @classmethod
    def _validate_address(cls, value: str) -> str:
        return _checksum(value)


class TokensConfig(BaseModel):
    """Base (traded) and quote (unit of account) tokens."""

    base_token_address: str
    quote_token_address: str
    base_decimals: int = Field(default=18, ge=0, le=36)
    quote_decimals: int = Field(default=6, ge=0, le=36)
    base_symbol: str = "BASE"
    quote_symbol: str = "QUOTE"

    @field_validator("base_token_address", "quote_token_address")
    @classmethod
    def _validate_address(cls, value: str) -> str:
        return _checksum(value)

    @model_validator(mode="after")
    def _distinct_tokens(self) -> "TokensConfig":
        if self.base_token_address == self.quote_token_address:
            raise ValueError("base and quote token must differ")
        return self

    @property
    def forward_path(self) -> list[str]:
        """Base -> quote."""
        return [self.base_token_address, self.quote_token_address]

    @property
    def return_path(self) -> list[str]:
        """Quote -> base."""
        return [self.quote_token_address, self.base_token_address]


class ArbitrageConfig(BaseModel):
    """Trade sizing, decision threshold and polling cadence."""

    trade_amount: Decimal = Field(gt=0)  # base-token units
    profit_threshold: Decimal  # quote-token units
    polling_interval_seconds: int = Field(ge=1)

    # Flat stand-in for gas, in quote-token units
    cost_offset: Decimal = Decimal("0.50")

    # Defaults to half the polling interval
    quote_timeout_seconds: float | None = Field(default=None, gt=0)

    @field_validator("trade_amount", "profit_threshold", "cost_offset", mode="before")
    @classmethod
    def _coerce_decimal(cls, value):
        # TOML floats would otherwise carry binary noise into Decimal fields
        if isinstance(value, float):
            return str(value)
        return value

    @model_validator(mode="after")
    def _timeout_within_interval(self) -> "ArbitrageConfig":
        bound = self.polling_interval_seconds / 2
        if self.quote_timeout_seconds is not None and self.quote_timeout_seconds > bound:
            raise ValueError(
                f"quote_timeout_seconds ({self.quote_timeout_seconds}) must not exceed "
                f"half the polling interval ({bound})"
            )
        return self

    @property
    def quote_timeout(self) -> float:
        """Effective per-venue quote timeout in seconds."""
        if self.quote_timeout_seconds is not None:
            return self.quote_timeout_seconds
        return self.polling_interval_seconds / 2


class Settings(BaseSettings):
    """Application configuration loaded from TOML, environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Name of the environment variable holding the RPC connection string
    rpc_url_key: str = Field(min_length=1)

    venues: VenuesConfig
    tokens: TokensConfig
    arbitrage: ArbitrageConfig

    # Database
    database_url: str = "sqlite+aiosqlite:///./arbitrage_opportunities.db"

    # Application
    log_level: str = "INFO"

    @field_validator("database_url")
    @classmethod
    def _validate_database_url(cls, value: str) -> str:
        try:
            make_url(async_url(value)).get_dialect()
        except ArgumentError as e:
            raise ValueError(f"not a valid database URL: {value!r}") from e
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
        )

    def resolve_rpc_url(self) -> str:
        """Look up the RPC connection string named by ``rpc_url_key``."""
        load_dotenv()
        url = os.environ.get(self.rpc_url_key, "").strip()
        if not url:
            raise ConfigError(
                f"RPC connection string not found: environment variable "
                f"{self.rpc_url_key} is not set"
            )
        return url


def load_settings(**overrides) -> Settings:
    """Build settings, turning validation failures into ConfigError."""
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
