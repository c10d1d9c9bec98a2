"""
Application constants.

Centralized defaults for the fee-gated submission flow.
"""

# ========================================================================
# BLOCKCHAIN CONSTANTS
# ========================================================================

DEFAULT_RPC_URL = "https://sepolia.infura.io"

# Blockchain operation timeouts (in seconds)
BLOCKCHAIN_TIMEOUT = 30.0  # Single RPC call (estimate_gas, get_block, send)
RECEIPT_TIMEOUT = 120.0  # Waiting for inclusion (2 minutes)

# EIP-1559 estimation: max_fee = base_fee * multiplier + priority_fee
BASE_FEE_MULTIPLIER = 2

WEI_PER_ETHER = 10**18

# ========================================================================
# FEE GATE CONSTANTS
# ========================================================================

DEFAULT_MAX_GAS_FEE_THRESHOLD_WEI = 10_000_000_000_000_000  # 0.01 ETH
DEFAULT_MAX_ATTEMPTS = 5  # First estimate + 4 retries
DEFAULT_POLL_INTERVAL_SECONDS = 12.0  # Roughly one block on Ethereum

# ========================================================================
# PRICE API CONSTANTS
# ========================================================================

DEFAULT_COINGECKO_URL = "https://api.coingecko.com/api"
COINGECKO_SIMPLE_PRICE_PATH = "/v3/simple/price"
DEFAULT_PRICE_ASSET_ID = "ethereum"
DEFAULT_FIAT_CURRENCY = "usd"
PRICE_TIMEOUT = 10.0
