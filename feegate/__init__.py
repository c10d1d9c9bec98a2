"""
feegate - fee-gated transaction submitter.

Sends a transaction only once its estimated fee is at or below a threshold,
polling the fee at a fixed interval for a bounded number of attempts.
"""

__version__ = "0.1.0"
