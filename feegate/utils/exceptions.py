"""
Exception types.

Categorized errors for the fee-gated submission flow:
- ConfigError: startup configuration is missing or malformed
- ProviderError: a chain provider call failed
- ProviderTimeoutError: a chain provider call exceeded its timeout
- RateUnavailable: the fiat price source could not produce a rate
"""


class FeeGateError(Exception):
    """Base exception for all feegate errors."""
    pass


class ConfigError(FeeGateError):
    """Raised when required configuration is missing or invalid."""
    pass


class ProviderError(FeeGateError):
    """Raised when a chain provider call fails."""
    pass


class ProviderTimeoutError(ProviderError):
    """Raised when a chain provider call times out."""
    pass


class RateUnavailable(FeeGateError):
    """Raised when the exchange rate cannot be fetched or parsed."""
    pass
