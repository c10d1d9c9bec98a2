"""
Unit tests for the process entry point and service wiring.

Tests cover:
- Exit codes for sent, exhausted and failed runs
- Service construction from settings
"""

from unittest.mock import AsyncMock, patch

import pytest

from feegate import __main__ as entry
from feegate.config.settings import load_settings
from feegate.initialization.services import (
    create_fiat_converter,
    create_intent,
    create_provider,
    create_submission_loop,
)
from feegate.models import RetryExhausted, SubmissionOutcome
from feegate.services.fiat_converter import FiatConverter
from feegate.utils.exceptions import ConfigError, ProviderError


@pytest.fixture
def settings():
    return load_settings(
        _env_file=None,
        max_gas_fee_threshold_wei=123,
        max_attempts=2,
        poll_interval_seconds=0,
    )


class TestExitCodes:
    """Test main() exit codes."""

    def test_config_error(self):
        with patch.object(entry, "load_settings", side_effect=ConfigError("bad")), \
                patch.object(entry, "setup_logging"):
            assert entry.main() == 1

    def test_sent(self, settings, sample_transaction_hash):
        outcome = SubmissionOutcome(tx_hash=sample_transaction_hash, gas_used=1, effective_gas_price=1)
        with patch.object(entry, "load_settings", return_value=settings), \
                patch.object(entry, "setup_logging"), \
                patch.object(entry, "run", AsyncMock(return_value=outcome)):
            assert entry.main() == 0

    def test_exhausted_is_not_a_failure(self, settings):
        exhausted = RetryExhausted(attempts=2, threshold_wei=123)
        with patch.object(entry, "load_settings", return_value=settings), \
                patch.object(entry, "setup_logging"), \
                patch.object(entry, "run", AsyncMock(return_value=exhausted)):
            assert entry.main() == 0

    def test_provider_error(self, settings):
        with patch.object(entry, "load_settings", return_value=settings), \
                patch.object(entry, "setup_logging"), \
                patch.object(entry, "run", AsyncMock(side_effect=ProviderError("down"))):
            assert entry.main() == 1

    def test_unexpected_error(self, settings):
        with patch.object(entry, "load_settings", return_value=settings), \
                patch.object(entry, "setup_logging"), \
                patch.object(entry, "run", AsyncMock(side_effect=RuntimeError("boom"))):
            assert entry.main() == 1


class TestRun:
    """Test run() wiring and cleanup."""

    @pytest.mark.asyncio
    async def test_resources_closed(self, settings, mock_chain_provider):
        mock_chain_provider.close = AsyncMock()
        with patch.object(entry, "create_provider", return_value=mock_chain_provider):
            result = await entry.run(settings)

        # Default mock fee (2.1e14 wei) is above the 123 wei threshold
        assert isinstance(result, RetryExhausted)
        mock_chain_provider.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_resources_closed_on_failure(self, settings, mock_chain_provider):
        mock_chain_provider.close = AsyncMock()
        mock_chain_provider.estimate_gas.side_effect = ProviderError("down")
        with patch.object(entry, "create_provider", return_value=mock_chain_provider):
            with pytest.raises(ProviderError):
                await entry.run(settings)

        mock_chain_provider.close.assert_awaited_once()


class TestServiceWiring:
    """Test construction of services from settings."""

    def test_intent(self, settings):
        intent = create_intent(settings)
        assert intent.to_address == settings.to_address
        assert intent.value_wei == 0

    def test_provider_address(self, settings, sample_private_key):
        provider = create_provider(settings)
        assert provider.address.lower() == "0x2c7536e3605d9c16a7a3d7b1898e529396a65c23"

    def test_no_converter_without_key(self, settings):
        assert create_fiat_converter(settings) is None

    def test_converter_with_key(self):
        settings = load_settings(_env_file=None, coingecko_api_key="cg-key", fiat_currency="EUR")
        converter = create_fiat_converter(settings)
        assert isinstance(converter, FiatConverter)
        assert converter.fiat_currency == "eur"

    def test_submission_loop(self, settings, mock_chain_provider):
        loop = create_submission_loop(settings, mock_chain_provider)
        assert loop.threshold_wei == 123
        assert loop.max_attempts == 2
        assert loop.poll_interval == 0
