"""
Initialization - Services Module.

Builds the chain provider, fiat converter, transaction intent and submission
loop from validated settings.
"""

from loguru import logger

from feegate.config.settings import Settings
from feegate.models import TransactionIntent
from feegate.services.blockchain.chain_provider import Web3ChainProvider, connect
from feegate.services.fiat_converter import FiatConverter
from feegate.services.submission_loop import SubmissionLoop
from feegate.utils.security import mask_sensitive


def create_provider(settings: Settings) -> Web3ChainProvider:
    return connect(
        settings.rpc_url,
        settings.from_address_private_key,
        call_timeout=settings.rpc_timeout_seconds,
        receipt_timeout=settings.receipt_timeout_seconds,
    )


def create_fiat_converter(settings: Settings) -> FiatConverter | None:
    """Create fiat converter, or None when no price API key is configured."""
    if not settings.fiat_conversion_enabled:
        logger.info("COINGECKO_API_KEY not set, fiat conversion disabled")
        return None

    logger.info(
        f"Fiat conversion enabled: {settings.price_asset_id}/{settings.fiat_currency}, "
        f"API key {mask_sensitive(settings.coingecko_api_key)}"
    )
    return FiatConverter(
        api_key=settings.coingecko_api_key,
        base_url=settings.coingecko_url,
        asset_id=settings.price_asset_id,
        fiat_currency=settings.fiat_currency,
        timeout=settings.price_timeout_seconds,
    )


def create_intent(settings: Settings) -> TransactionIntent:
    return TransactionIntent(
        to_address=settings.to_address,
        value_wei=settings.tx_value_wei,
    )


def create_submission_loop(
    settings: Settings,
    provider: Web3ChainProvider,
    fiat_converter: FiatConverter | None = None,
) -> SubmissionLoop:
    return SubmissionLoop(
        provider=provider,
        threshold_wei=settings.max_gas_fee_threshold_wei,
        max_attempts=settings.max_attempts,
        poll_interval=settings.poll_interval_seconds,
        fiat_converter=fiat_converter,
    )
