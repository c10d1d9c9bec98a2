"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation in tests
os.environ.setdefault(
    "FROM_ADDRESS_PRIVATE_KEY",
    "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318",
)
os.environ.setdefault("TO_ADDRESS", "0x742d35cc6634c0532925a3b844bc454e4438f44e")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest  # noqa: E402
from eth_utils import to_checksum_address  # noqa: E402
from loguru import logger  # noqa: E402

from feegate.models import TransactionIntent  # noqa: E402


@pytest.fixture
def sample_private_key():
    """Well-known test private key (never holds funds)."""
    return "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def sample_recipient():
    """Sample recipient address in checksum form."""
    return to_checksum_address("0x742d35cc6634c0532925a3b844bc454e4438f44e")


@pytest.fixture
def sample_transaction_hash():
    """Sample transaction hash for testing."""
    return "0x1234567890abcdef1234567890abcdef1234567890abcdef1234567890abcdef"


@pytest.fixture
def intent(sample_recipient):
    """Zero-value transaction intent."""
    return TransactionIntent(to_address=sample_recipient, value_wei=0)


@pytest.fixture
def log_records():
    """
    Capture loguru records emitted during a test.

    Returns:
        list: loguru record dicts (bound fields under record["extra"])
    """
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
