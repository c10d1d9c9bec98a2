"""
Application settings.

Loads configuration from environment variables (and an optional .env file)
using pydantic-settings. Settings are built once at startup by
``load_settings`` and passed explicitly to the services that need them.
"""

import re

from eth_account import Account
from eth_utils import is_address, to_checksum_address
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feegate.config.constants import (
    BLOCKCHAIN_TIMEOUT,
    DEFAULT_COINGECKO_URL,
    DEFAULT_FIAT_CURRENCY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_GAS_FEE_THRESHOLD_WEI,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_PRICE_ASSET_ID,
    DEFAULT_RPC_URL,
    PRICE_TIMEOUT,
    RECEIPT_TIMEOUT,
)
from feegate.utils.exceptions import ConfigError

_PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Wallet
    from_address_private_key: str
    to_address: str = Field(default="", validate_default=True)
    tx_value_wei: int = Field(default=0, ge=0)

    # Blockchain RPC
    rpc_url: str = DEFAULT_RPC_URL
    rpc_timeout_seconds: float = Field(
        default=BLOCKCHAIN_TIMEOUT, gt=0, description="Timeout for a single RPC call"
    )
    receipt_timeout_seconds: float = Field(
        default=RECEIPT_TIMEOUT, gt=0, description="Timeout for transaction inclusion"
    )

    # Fee gate
    max_gas_fee_threshold_wei: int = Field(
        default=DEFAULT_MAX_GAS_FEE_THRESHOLD_WEI,
        ge=0,
        description="Maximum effective fee (gas * max fee per gas) in wei",
    )
    max_attempts: int = Field(
        default=DEFAULT_MAX_ATTEMPTS, ge=1, description="Total fee estimation attempts"
    )
    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        ge=0,
        description="Delay between fee estimation attempts",
    )

    # Price API (CoinGecko)
    coingecko_url: str = DEFAULT_COINGECKO_URL
    coingecko_api_key: str | None = None
    price_asset_id: str = DEFAULT_PRICE_ASSET_ID
    fiat_currency: str = DEFAULT_FIAT_CURRENCY
    price_timeout_seconds: float = Field(default=PRICE_TIMEOUT, gt=0)

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("from_address_private_key")
    @classmethod
    def validate_private_key(cls, v: str) -> str:
        """Validate private key format and that it derives an account."""
        v = v.strip()
        if not _PRIVATE_KEY_PATTERN.match(v):
            raise ValueError(
                "FROM_ADDRESS_PRIVATE_KEY must be a 32-byte hex string"
            )
        try:
            Account.from_key(v)
        except Exception as exc:
            raise ValueError("FROM_ADDRESS_PRIVATE_KEY is not a valid key") from exc
        return v

    @field_validator("to_address")
    @classmethod
    def validate_to_address(cls, v: str) -> str:
        """Validate recipient address and return it in checksum form."""
        v = v.strip()
        if not v:
            raise ValueError("TO_ADDRESS is required")
        if not is_address(v):
            raise ValueError(f"Invalid Ethereum address: {v}")
        return to_checksum_address(v)

    @field_validator("rpc_url", "coingecko_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate HTTP(S) URL and drop trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://: {v}")
        return v.rstrip("/")

    @field_validator("price_asset_id", "fiat_currency")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Price identifiers must be non-empty")
        return v

    @field_validator("coingecko_api_key")
    @classmethod
    def empty_key_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return v

    @property
    def fiat_conversion_enabled(self) -> bool:
        """Fiat conversion runs only when a price API key is configured."""
        return self.coingecko_api_key is not None


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Returns:
        Validated settings

    Raises:
        ConfigError: If required values are missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        # Input values are left out, they may contain the private key
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e
