"""
Fee Estimator.

Computes the effective fee of a transaction intent: gas estimate multiplied
by the current EIP-1559 max fee per gas, in wei.
"""

from loguru import logger

from feegate.models import FeeEstimate, TransactionIntent
from feegate.services.fiat_converter import FiatConverter

from .chain_provider import ChainProvider


class FeeEstimator:
    """
    Estimates effective transaction fees.

    Every call queries the provider afresh; estimates are never reused.
    Provider failures propagate to the caller unchanged.
    """

    def __init__(
        self,
        provider: ChainProvider,
        fiat_converter: FiatConverter | None = None,
    ) -> None:
        """
        Initialize fee estimator.

        Args:
            provider: Chain provider
            fiat_converter: Converter for fiat-equivalent logging (optional)
        """
        self.provider = provider
        self.fiat_converter = fiat_converter

    async def estimate(
        self,
        intent: TransactionIntent,
        attempt: int | None = None,
    ) -> FeeEstimate:
        """
        Estimate the effective fee of an intent.

        Args:
            intent: Transaction to estimate
            attempt: Attempt number, for logging

        Returns:
            FeeEstimate with gas estimate and max fee per gas

        Raises:
            ProviderError: If gas or fee-market estimation fails
        """
        gas_estimate = await self.provider.estimate_gas(intent)
        fee_market = await self.provider.estimate_fee_market()

        estimate = FeeEstimate(
            gas_estimate=gas_estimate,
            max_fee_per_gas=fee_market.max_fee_per_gas,
        )

        fiat_estimate = None
        if self.fiat_converter is not None:
            fiat_estimate = await self.fiat_converter.try_convert_to_fiat(
                estimate.effective_fee_eth
            )

        logger.bind(
            attempt=attempt,
            gas_estimate=estimate.gas_estimate,
            max_fee_per_gas=estimate.max_fee_per_gas,
            effective_fee_wei=estimate.effective_fee_wei,
            effective_fee_eth=str(estimate.effective_fee_eth),
            fiat_estimate=None if fiat_estimate is None else str(fiat_estimate),
        ).info("Gas estimate")

        return estimate
