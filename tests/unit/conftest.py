"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Mock chain provider with configurable fee sequences
- Mock pending transaction and receipt
- Fake aiohttp session for the price API
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from feegate.models import FeeMarket, Receipt


def fee_market(max_fee_per_gas: int, priority: int = 1) -> FeeMarket:
    """Build a FeeMarket with the given max fee per gas."""
    return FeeMarket(max_fee_per_gas=max_fee_per_gas, max_priority_fee_per_gas=priority)


def make_price_session(payload=None, status=200, error=None):
    """
    Create fake aiohttp session for the price API.

    Args:
        payload: JSON body returned by response.json()
        status: HTTP status code
        error: Exception raised by session.get (optional)

    Returns:
        MagicMock: session whose get() works as an async context manager
    """
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)

    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value.__aenter__.return_value = response
        session.get.return_value.__aexit__.return_value = False
    return session


@pytest.fixture
def receipt(sample_transaction_hash):
    """Successful receipt: 21000 gas at 1.5 gwei."""
    return Receipt(
        tx_hash=sample_transaction_hash,
        gas_used=21_000,
        effective_gas_price=1_500_000_000,
        block_number=12345,
        status=1,
    )


@pytest.fixture
def pending_tx(sample_transaction_hash, receipt):
    """Pending transaction resolving to `receipt`."""
    pending = MagicMock()
    pending.tx_hash = sample_transaction_hash
    pending.wait_for_receipt = AsyncMock(return_value=receipt)
    return pending


@pytest.fixture
def mock_chain_provider(pending_tx):
    """
    Mock chain provider.

    Defaults: gas estimate 21000, max fee 10 gwei (effective fee 2.1e14 wei).
    Override estimate_fee_market.side_effect for fee sequences.
    """
    provider = MagicMock()
    provider.estimate_gas = AsyncMock(return_value=21_000)
    provider.estimate_fee_market = AsyncMock(return_value=fee_market(10_000_000_000))
    provider.send_transaction = AsyncMock(return_value=pending_tx)
    return provider


@pytest.fixture
def make_fee_market():
    """Factory for FeeMarket values."""
    return fee_market


@pytest.fixture
def price_session_factory():
    """Factory for fake price API sessions."""
    return make_price_session
