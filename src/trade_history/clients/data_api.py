"""Polymarket data API client for wallet trade history."""

import asyncio
import aiohttp
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from ..config.settings import ApiConfig, PaginationConfig, RetryConfig
from ..exceptions import APIError, TransientAPIError
from ..models import Page, TradeQuery
from ..utils.retry import exponential_backoff

logger = logging.getLogger(__name__)


def is_transient_status(status: int) -> bool:
    """Rate limited or server error responses are worth retrying."""
    return status == 429 or status >= 500


class DataAPIClient:
    """Data API client fetching one page of trades at a time."""

    def __init__(
        self,
        config: ApiConfig,
        pagination: PaginationConfig,
        retry_config: RetryConfig,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.config = config
        self.pagination = pagination
        self.retry_config = retry_config
        self.session = session
        self._owns_session = session is None
        self._sleep = sleep

    async def __aenter__(self):
        """Async context manager entry."""
        if self.session is None:
            kwargs: Dict[str, Any] = {
                'headers': {'Accept': 'application/json', 'User-Agent': self.config.user_agent}
            }
            if self.config.request_timeout_seconds is not None:
                kwargs['timeout'] = aiohttp.ClientTimeout(total=self.config.request_timeout_seconds)
            self.session = aiohttp.ClientSession(**kwargs)
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    async def _get_page(self, params: Dict[str, Any]) -> Page:
        """Issue a single GET, classifying failures as transient or fatal."""
        async with self.session.get(self.config.base_url, params=params) as response:
            if 200 <= response.status < 300:
                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise APIError(response.status, "invalid JSON body", url=str(response.url)) from e
                if not isinstance(data, list):
                    raise APIError(
                        response.status,
                        f"expected a JSON array, got {type(data).__name__}",
                        url=str(response.url)
                    )
                return data

            if is_transient_status(response.status):
                raise TransientAPIError(response.status, response.reason, url=str(response.url))

            raise APIError(response.status, response.reason, url=str(response.url))

    async def fetch_page(self, query: TradeQuery, offset: int) -> Page:
        """Fetch the page of trades starting at `offset`, retrying transient failures."""
        if not self.session:
            raise RuntimeError("Client not initialized. Use async context manager.")

        params = query.to_params(limit=self.pagination.page_size, offset=offset)
        logger.debug(f"Fetching trades page: {params}")

        return await exponential_backoff(
            lambda: self._get_page(params),
            max_retries=self.retry_config.max_retries,
            initial_delay=self.pagination.request_delay_seconds,
            backoff_factor=self.retry_config.backoff_multiplier,
            max_delay=self.retry_config.max_backoff_seconds,
            jitter=self.retry_config.jitter,
            exceptions=(TransientAPIError,),
            sleep=self._sleep
        )
