"""
Submission Loop.

Polls the effective fee of a transaction intent and broadcasts it once the
fee is at or below the configured threshold. Polling is bounded by a fixed
number of estimation attempts with a fixed delay between them.

Outcomes:
- SubmissionOutcome: the transaction was sent and its receipt obtained
- RetryExhausted: the fee stayed above threshold for every attempt
Provider failures raise ProviderError immediately and are never retried.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace

from loguru import logger

from feegate.config.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL_SECONDS
from feegate.models import (
    FeeEstimate,
    RetryExhausted,
    SubmissionOutcome,
    TransactionIntent,
)
from feegate.services.blockchain.chain_provider import ChainProvider
from feegate.services.blockchain.fee_estimator import FeeEstimator
from feegate.services.fiat_converter import FiatConverter
from feegate.utils.security import mask_address


class SubmissionLoop:
    """
    Fee-gated transaction submitter.

    Features:
    - Fresh fee estimate on every attempt
    - Fixed delay between attempts (non-blocking sleep)
    - At most one broadcast per run
    - Realized fee accounting from the receipt, with optional fiat value
    """

    def __init__(
        self,
        provider: ChainProvider,
        threshold_wei: int,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        fiat_converter: FiatConverter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize submission loop.

        Args:
            provider: Chain provider
            threshold_wei: Maximum tolerated effective fee in wei
            max_attempts: Total number of fee estimations
            poll_interval: Delay between estimations in seconds
            fiat_converter: Converter for fiat reporting (optional)
            sleep: Async sleep function
        """
        if threshold_wei < 0:
            raise ValueError("threshold_wei must be non-negative")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if poll_interval < 0:
            raise ValueError("poll_interval must be non-negative")

        self.provider = provider
        self.threshold_wei = threshold_wei
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.fiat_converter = fiat_converter
        self.fee_estimator = FeeEstimator(provider, fiat_converter=fiat_converter)
        self._sleep = sleep

    async def run(self, intent: TransactionIntent) -> SubmissionOutcome | RetryExhausted:
        """
        Wait for an acceptable fee and submit the intent.

        Args:
            intent: Transaction to submit

        Returns:
            SubmissionOutcome if sent, RetryExhausted if the fee never dropped

        Raises:
            ProviderError: If any provider call fails
        """
        logger.info(
            f"Waiting for fee <= {self.threshold_wei} wei to send to "
            f"{mask_address(intent.to_address)} "
            f"(max {self.max_attempts} attempts, {self.poll_interval}s interval)"
        )

        estimate: FeeEstimate | None = None
        for attempt in range(1, self.max_attempts + 1):
            estimate = await self.fee_estimator.estimate(intent, attempt=attempt)

            if estimate.effective_fee_wei <= self.threshold_wei:
                return await self._submit(intent, estimate)

            if attempt < self.max_attempts:
                logger.info(
                    f"Gas fee too high: {estimate.effective_fee_wei} > "
                    f"{self.threshold_wei} wei, retrying in {self.poll_interval}s "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                await self._sleep(self.poll_interval)

        exhausted = RetryExhausted(
            attempts=self.max_attempts,
            threshold_wei=self.threshold_wei,
            last_estimate=estimate,
        )
        logger.bind(
            attempts=exhausted.attempts,
            last_effective_fee_wei=exhausted.last_effective_fee_wei,
            threshold_wei=exhausted.threshold_wei,
        ).warning("Gas fee stayed above threshold, transaction not sent")
        return exhausted

    async def _submit(
        self,
        intent: TransactionIntent,
        estimate: FeeEstimate,
    ) -> SubmissionOutcome:
        # Fees are re-filled by the provider at broadcast; the decision used `estimate`
        pending_tx = await self.provider.send_transaction(intent)
        logger.bind(
            tx_hash=pending_tx.tx_hash,
            decision_fee_wei=estimate.effective_fee_wei,
        ).info(f"Pending tx {pending_tx.tx_hash}")

        receipt = await pending_tx.wait_for_receipt()
        if not receipt.succeeded:
            logger.warning(f"Transaction {receipt.tx_hash} reverted, fee was still paid")

        outcome = SubmissionOutcome(
            tx_hash=receipt.tx_hash,
            gas_used=receipt.gas_used,
            effective_gas_price=receipt.effective_gas_price,
            status=receipt.status,
        )

        if self.fiat_converter is not None:
            fiat_value = await self.fiat_converter.try_convert_to_fiat(
                outcome.realized_fee_eth
            )
            outcome = replace(outcome, fiat_value=fiat_value)

        logger.bind(
            tx_hash=outcome.tx_hash,
            gas_used=outcome.gas_used,
            effective_gas_price=outcome.effective_gas_price,
            realized_fee_wei=outcome.realized_fee_wei,
            realized_fee_eth=str(outcome.realized_fee_eth),
            fiat_fee=None if outcome.fiat_value is None else str(outcome.fiat_value),
        ).success("Transaction gas fee used")
        return outcome
