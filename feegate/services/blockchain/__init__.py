"""
Blockchain services.

- rpc_wrapper.py - timeout handling for provider calls
- chain_provider.py - provider capability and its AsyncWeb3 implementation
- fee_estimator.py - effective fee estimation
"""

from .chain_provider import ChainProvider, PendingTransaction, Web3ChainProvider, connect
from .fee_estimator import FeeEstimator
from .rpc_wrapper import with_timeout

__all__ = [
    "ChainProvider",
    "FeeEstimator",
    "PendingTransaction",
    "Web3ChainProvider",
    "connect",
    "with_timeout",
]
