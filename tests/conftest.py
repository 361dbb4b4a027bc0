"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

from trade_history.config.settings import ApiConfig, PaginationConfig, RetryConfig
from trade_history.models import TradeQuery

WALLET = "0x" + "ab" * 20


class FakeResponse:
    """Stand-in for aiohttp.ClientResponse used as an async context manager."""

    def __init__(self, status: int = 200, body: Any = None, reason: Optional[str] = None):
        self.status = status
        self.reason = reason or {200: "OK", 404: "Not Found", 429: "Too Many Requests",
                                 500: "Internal Server Error", 503: "Service Unavailable"}.get(status, "")
        self.url = "https://data-api.polymarket.com/trades"
        self._body = [] if body is None else body

    async def json(self, content_type=None):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


def make_trade(tx_hash: Optional[str], **fields) -> Dict[str, Any]:
    trade = {
        'proxyWallet': WALLET,
        'side': 'BUY',
        'asset': '1234',
        'conditionId': '0xcond',
        'size': '10',
        'price': '0.5',
        'timestamp': 1700000000,
        'outcome': 'Yes',
    }
    if tx_hash is not None:
        trade['transactionHash'] = tx_hash
    trade.update(fields)
    return trade


def make_page(prefix: str, count: int) -> List[Dict[str, Any]]:
    return [make_trade(f"0x{prefix}{i:06d}") for i in range(count)]


@pytest.fixture
def wallet() -> str:
    return WALLET


@pytest.fixture
def query() -> TradeQuery:
    return TradeQuery(wallet=WALLET)


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig()


@pytest.fixture
def pagination_config() -> PaginationConfig:
    return PaginationConfig(page_size=1000, max_offset=3000, request_delay_seconds=0.5)


@pytest.fixture
def retry_config() -> RetryConfig:
    return RetryConfig(max_retries=3, backoff_multiplier=2.0)


@pytest.fixture
def mock_sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def mock_session():
    """Session whose get() returns queued FakeResponse objects."""
    session = Mock()
    session.get = Mock()
    return session
