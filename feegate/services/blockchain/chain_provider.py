"""
Chain Provider.

Defines the provider capability consumed by the fee estimator and the
submission loop, and implements it on top of AsyncWeb3 with a local signer.
"""

from typing import Any, Protocol

import aiohttp
from eth_account import Account
from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from feegate.config.constants import BASE_FEE_MULTIPLIER, BLOCKCHAIN_TIMEOUT, RECEIPT_TIMEOUT
from feegate.models import FeeMarket, Receipt, TransactionIntent
from feegate.utils.exceptions import ProviderError
from feegate.utils.security import mask_address

from .rpc_wrapper import with_timeout


class PendingTransaction(Protocol):
    """Broadcast transaction awaiting inclusion."""

    tx_hash: str

    async def wait_for_receipt(self) -> Receipt: ...


class ChainProvider(Protocol):
    """Chain capability: gas estimation, fee market and broadcast."""

    async def estimate_gas(self, intent: TransactionIntent) -> int: ...

    async def estimate_fee_market(self) -> FeeMarket: ...

    async def send_transaction(self, intent: TransactionIntent) -> PendingTransaction: ...


class Web3PendingTransaction:
    """Pending transaction tracked through AsyncWeb3."""

    def __init__(self, web3: AsyncWeb3, tx_hash: str, receipt_timeout: float = RECEIPT_TIMEOUT):
        self.web3 = web3
        self.tx_hash = tx_hash
        self._receipt_timeout = receipt_timeout

    async def wait_for_receipt(self) -> Receipt:
        """
        Wait until the transaction is included.

        Returns:
            Receipt with gas used and effective gas price

        Raises:
            ProviderTimeoutError: If inclusion takes longer than the receipt timeout
            ProviderError: If the provider fails while polling
        """
        receipt = await with_timeout(
            self.web3.eth.wait_for_transaction_receipt(
                self.tx_hash, timeout=self._receipt_timeout
            ),
            timeout=self._receipt_timeout,
            operation_name=f"Waiting for receipt of {self.tx_hash}",
        )
        return _parse_receipt(receipt)


def _parse_receipt(receipt: Any) -> Receipt:
    try:
        return Receipt(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            gas_used=int(receipt["gasUsed"]),
            effective_gas_price=int(receipt["effectiveGasPrice"]),
            block_number=receipt.get("blockNumber"),
            status=int(receipt.get("status", 1)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ProviderError(f"Malformed transaction receipt: {e}") from e


class Web3ChainProvider:
    """
    Chain provider backed by AsyncWeb3.

    Features:
    - Gas estimation for a transaction intent
    - EIP-1559 fee estimation (base fee * 2 + priority fee)
    - Local signing and raw transaction broadcast
    - Timeout on every RPC call
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        private_key: str,
        call_timeout: float = BLOCKCHAIN_TIMEOUT,
        receipt_timeout: float = RECEIPT_TIMEOUT,
    ) -> None:
        """
        Initialize chain provider.

        Args:
            web3: AsyncWeb3 instance
            private_key: Private key for signing transactions
            call_timeout: Timeout for a single RPC call in seconds
            receipt_timeout: Timeout for transaction inclusion in seconds
        """
        self.web3 = web3
        self._private_key = private_key
        self._call_timeout = call_timeout
        self._receipt_timeout = receipt_timeout

        # SECURITY: Derive address and discard the Account object
        account = Account.from_key(private_key)
        try:
            self.address = account.address
        finally:
            del account

        logger.info(f"Chain provider initialized with wallet: {mask_address(self.address)}")

    def _base_tx(self, intent: TransactionIntent) -> dict[str, Any]:
        return {
            "from": self.address,
            "to": intent.to_address,
            "value": intent.value_wei,
        }

    async def estimate_gas(self, intent: TransactionIntent) -> int:
        """Estimate gas units required to execute the intent."""
        gas = await with_timeout(
            self.web3.eth.estimate_gas(self._base_tx(intent)),
            timeout=self._call_timeout,
            operation_name="Gas estimation",
        )
        return int(gas)

    async def estimate_fee_market(self) -> FeeMarket:
        """
        Estimate EIP-1559 fees from the latest block.

        Returns:
            FeeMarket with max fee and priority fee per gas in wei

        Raises:
            ProviderError: If the chain does not report a base fee
        """
        block = await with_timeout(
            self.web3.eth.get_block("latest"),
            timeout=self._call_timeout,
            operation_name="Fetching latest block",
        )
        base_fee = block.get("baseFeePerGas")
        if base_fee is None:
            raise ProviderError("Latest block has no baseFeePerGas, EIP-1559 fees unavailable")

        priority_fee = await with_timeout(
            self.web3.eth.max_priority_fee,
            timeout=self._call_timeout,
            operation_name="Fetching max priority fee",
        )

        return FeeMarket(
            max_fee_per_gas=int(base_fee) * BASE_FEE_MULTIPLIER + int(priority_fee),
            max_priority_fee_per_gas=int(priority_fee),
        )

    async def send_transaction(self, intent: TransactionIntent) -> Web3PendingTransaction:
        """
        Build, sign and broadcast the intent.

        Gas limit, fees, nonce and chain id are filled at send time.

        Returns:
            Pending transaction handle

        Raises:
            ProviderError: If any RPC call or signing fails
        """
        gas_limit = await self.estimate_gas(intent)
        fee_market = await self.estimate_fee_market()
        nonce = await with_timeout(
            self.web3.eth.get_transaction_count(self.address, "pending"),
            timeout=self._call_timeout,
            operation_name="Fetching nonce",
        )
        chain_id = await with_timeout(
            self.web3.eth.chain_id,
            timeout=self._call_timeout,
            operation_name="Fetching chain id",
        )

        transaction = {
            "type": 2,
            "chainId": int(chain_id),
            "nonce": int(nonce),
            "to": intent.to_address,
            "value": intent.value_wei,
            "gas": gas_limit,
            "maxFeePerGas": fee_market.max_fee_per_gas,
            "maxPriorityFeePerGas": fee_market.max_priority_fee_per_gas,
        }

        # SECURITY: Create Account only for signing
        account = None
        try:
            account = Account.from_key(self._private_key)
            signed_tx = account.sign_transaction(transaction)
        except (TypeError, ValueError) as e:
            raise ProviderError(f"Failed to sign transaction: {e}") from e
        finally:
            if account:
                del account

        tx_hash = await with_timeout(
            self.web3.eth.send_raw_transaction(signed_tx.raw_transaction),
            timeout=self._call_timeout,
            operation_name="Sending raw transaction",
        )
        tx_hash_hex = Web3.to_hex(tx_hash)

        logger.debug(
            f"Transaction broadcast: nonce={nonce}, gas={gas_limit}, "
            f"max_fee_per_gas={fee_market.max_fee_per_gas}"
        )

        return Web3PendingTransaction(
            web3=self.web3,
            tx_hash=tx_hash_hex,
            receipt_timeout=self._receipt_timeout,
        )

    async def close(self) -> None:
        """Release the HTTP session held by the web3 provider."""
        await self.web3.provider.disconnect()


def connect(
    rpc_url: str,
    private_key: str,
    call_timeout: float = BLOCKCHAIN_TIMEOUT,
    receipt_timeout: float = RECEIPT_TIMEOUT,
) -> Web3ChainProvider:
    """
    Create a chain provider for an RPC endpoint and signer.

    Args:
        rpc_url: HTTP(S) RPC endpoint
        private_key: Signer private key
        call_timeout: Timeout for a single RPC call in seconds
        receipt_timeout: Timeout for transaction inclusion in seconds

    Returns:
        Web3ChainProvider
    """
    web3 = AsyncWeb3(
        AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=call_timeout)},
        )
    )
    return Web3ChainProvider(
        web3=web3,
        private_key=private_key,
        call_timeout=call_timeout,
        receipt_timeout=receipt_timeout,
    )
