"""
Fiat Converter.

Converts native-unit amounts to fiat using the CoinGecko simple price API.
Every conversion fetches a fresh rate; nothing is cached between calls.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp
from loguru import logger

from feegate.config.constants import (
    COINGECKO_SIMPLE_PRICE_PATH,
    DEFAULT_COINGECKO_URL,
    DEFAULT_FIAT_CURRENCY,
    DEFAULT_PRICE_ASSET_ID,
    PRICE_TIMEOUT,
)
from feegate.utils.exceptions import RateUnavailable


def native_to_fiat(amount: Decimal, rate: Decimal) -> Decimal:
    """
    Convert a native-unit amount with a given exchange rate.

    Args:
        amount: Amount in the native unit (e.g. ETH)
        rate: Fiat price of one native unit

    Returns:
        Fiat amount
    """
    return Decimal(amount) * Decimal(rate)


def parse_rate(data: Any, asset_id: str, fiat_currency: str) -> Decimal:
    """
    Extract a rate from a simple price response.

    Expected shape: {"<asset_id>": {"<fiat_currency>": <float>}}

    Raises:
        RateUnavailable: If the pair is missing or the value is not numeric
    """
    if not isinstance(data, dict) or not isinstance(data.get(asset_id), dict):
        raise RateUnavailable(f"Price response has no entry for asset '{asset_id}'")

    raw_rate = data[asset_id].get(fiat_currency)
    if raw_rate is None or isinstance(raw_rate, bool):
        raise RateUnavailable(
            f"Price response has no '{fiat_currency}' rate for asset '{asset_id}'"
        )

    try:
        rate = Decimal(str(raw_rate))
    except InvalidOperation as e:
        raise RateUnavailable(f"Malformed rate value: {raw_rate!r}") from e

    if not rate.is_finite() or rate < 0:
        raise RateUnavailable(f"Invalid rate value: {raw_rate!r}")
    return rate


class FiatConverter:
    """
    Native-to-fiat converter backed by CoinGecko.

    Uses:
    - GET {base_url}/v3/simple/price?ids=<asset>&vs_currencies=<fiat>
    - aiohttp with a per-request timeout
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_COINGECKO_URL,
        asset_id: str = DEFAULT_PRICE_ASSET_ID,
        fiat_currency: str = DEFAULT_FIAT_CURRENCY,
        timeout: float = PRICE_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize fiat converter.

        Args:
            api_key: CoinGecko API key
            base_url: API base URL
            asset_id: CoinGecko asset identifier (e.g. "ethereum")
            fiat_currency: Target currency code (e.g. "usd")
            timeout: Request timeout in seconds
            session: Shared aiohttp session (optional)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.asset_id = asset_id
        self.fiat_currency = fiat_currency
        self.timeout = timeout
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def fetch_rate(self) -> Decimal:
        """
        Fetch the current exchange rate.

        Returns:
            Fiat price of one native unit

        Raises:
            RateUnavailable: If the source is unreachable or the response is unusable
        """
        url = f"{self.base_url}{COINGECKO_SIMPLE_PRICE_PATH}"
        params = {
            "ids": self.asset_id,
            "vs_currencies": self.fiat_currency,
            "x_cg_api_key": self.api_key,
        }

        try:
            session = await self._get_session()
            async with session.get(
                url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status != 200:
                    raise RateUnavailable(f"Price API error: HTTP {response.status}")
                data = await response.json()
        except TimeoutError as e:
            raise RateUnavailable(f"Price API timed out after {self.timeout}s") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise RateUnavailable(f"Price API request failed: {e}") from e

        rate = parse_rate(data, self.asset_id, self.fiat_currency)
        logger.debug(f"Fetched {self.asset_id}/{self.fiat_currency} rate: {rate}")
        return rate

    async def convert_to_fiat(self, amount: Decimal) -> Decimal:
        """
        Convert a native-unit amount to fiat at the current rate.

        Raises:
            RateUnavailable: If the rate cannot be fetched
        """
        rate = await self.fetch_rate()
        return native_to_fiat(amount, rate)

    async def try_convert_to_fiat(self, amount: Decimal) -> Decimal | None:
        """Convert to fiat, returning None when no rate is available."""
        try:
            return await self.convert_to_fiat(amount)
        except RateUnavailable as e:
            logger.warning(f"Fiat conversion skipped: {e}")
            return None
