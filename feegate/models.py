"""
Data models for the fee-gated submission flow.

All models are immutable and scoped to a single run.
"""

from dataclasses import dataclass
from decimal import Decimal

from web3 import Web3


@dataclass(frozen=True)
class TransactionIntent:
    """Transaction to submit once the fee condition holds."""

    to_address: str
    value_wei: int = 0

    def __post_init__(self) -> None:
        if not self.to_address:
            raise ValueError("to_address must be non-empty")
        if self.value_wei < 0:
            raise ValueError("value_wei must be non-negative")


@dataclass(frozen=True)
class FeeMarket:
    """EIP-1559 fee recommendation in wei per gas unit."""

    max_fee_per_gas: int
    max_priority_fee_per_gas: int


@dataclass(frozen=True)
class FeeEstimate:
    """Gas estimate and fee-market rate for one estimation attempt."""

    gas_estimate: int
    max_fee_per_gas: int

    def __post_init__(self) -> None:
        if self.gas_estimate < 0 or self.max_fee_per_gas < 0:
            raise ValueError("Fee estimate components must be non-negative")

    @property
    def effective_fee_wei(self) -> int:
        """Total fee in wei: gas units * max fee per gas."""
        return self.gas_estimate * self.max_fee_per_gas

    @property
    def effective_fee_eth(self) -> Decimal:
        """Total fee in ether, for display only."""
        return Web3.from_wei(self.effective_fee_wei, "ether")


@dataclass(frozen=True)
class Receipt:
    """Inclusion receipt returned by the chain provider."""

    tx_hash: str
    gas_used: int
    effective_gas_price: int
    block_number: int | None = None
    status: int = 1

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class SubmissionOutcome:
    """Terminal result of a run that broadcast its transaction."""

    tx_hash: str
    gas_used: int
    effective_gas_price: int
    fiat_value: Decimal | None = None
    status: int = 1

    @property
    def realized_fee_wei(self) -> int:
        """Fee actually paid: gas used * effective gas price."""
        return self.gas_used * self.effective_gas_price

    @property
    def realized_fee_eth(self) -> Decimal:
        return Web3.from_wei(self.realized_fee_wei, "ether")


@dataclass(frozen=True)
class RetryExhausted:
    """Terminal result of a run whose fee never dropped below threshold."""

    attempts: int
    threshold_wei: int
    last_estimate: FeeEstimate | None = None

    @property
    def last_effective_fee_wei(self) -> int | None:
        if self.last_estimate is None:
            return None
        return self.last_estimate.effective_fee_wei
