"""
RPC Wrapper with Timeout Logic.

Provides centralized timeout and error translation for all chain provider calls.
"""

import asyncio
from typing import Any

import aiohttp
from loguru import logger
from web3.exceptions import TimeExhausted, Web3Exception

from feegate.config.constants import BLOCKCHAIN_TIMEOUT
from feegate.utils.exceptions import ProviderError, ProviderTimeoutError

# Errors raised by web3 and its HTTP transport for a failed call
PROVIDER_ERRORS = (
    Web3Exception,
    aiohttp.ClientError,
    ConnectionError,
    ValueError,
)


async def with_timeout(
    coro: Any,
    timeout: float = BLOCKCHAIN_TIMEOUT,
    operation_name: str = "RPC call",
) -> Any:
    """
    Execute async provider call with timeout.

    Args:
        coro: Coroutine to execute
        timeout: Timeout in seconds (default: BLOCKCHAIN_TIMEOUT)
        operation_name: Operation name for logging

    Returns:
        Result of the coroutine

    Raises:
        ProviderTimeoutError: If operation times out
        ProviderError: If the provider rejects or fails the call
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except (TimeoutError, TimeExhausted) as e:
        error_msg = f"{operation_name} timed out after {timeout}s"
        logger.error(error_msg)
        raise ProviderTimeoutError(error_msg) from e
    except PROVIDER_ERRORS as e:
        error_msg = f"{operation_name} failed: {e}"
        logger.error(error_msg)
        raise ProviderError(error_msg) from e
