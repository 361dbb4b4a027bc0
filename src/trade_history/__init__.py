"""
Wallet Trade History - paginated trade history export for the Polymarket data API.

This package fetches every trade a wallet has made, deduplicates the results
across pages and writes them to disk as JSON or JSONL.
"""

__version__ = "1.0.0"
__author__ = "Trade History Team"
