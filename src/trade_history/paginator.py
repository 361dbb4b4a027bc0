"""Offset paginator over the wallet trades endpoint."""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from .config.settings import PaginationConfig
from .models import Page, PaginationResult, TradeQuery
from .utils.deduplication import TradeDeduplicator

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    async def fetch_page(self, query: TradeQuery, offset: int) -> Page:
        ...


class Paginator:
    """
    Walks the endpoint in fixed-size pages until a short page or the
    offset ceiling, merging pages into one deduplicated result.

    Pages are fetched strictly one after another: whether to request the
    next offset depends on the size of the previous page.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        config: PaginationConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.fetcher = fetcher
        self.config = config
        self._sleep = sleep

    @property
    def last_offset(self) -> int:
        """Largest page offset the endpoint accepts."""
        return self.config.max_offset - (self.config.max_offset % self.config.page_size)

    async def run(self, query: TradeQuery) -> PaginationResult:
        """Fetch every reachable page for `query`."""
        page_size = self.config.page_size
        dedup = TradeDeduplicator(self.config.dedup_key)
        result = PaginationResult()

        filters = query.describe()
        logger.info(
            f"Fetching trades for {query.wallet}"
            + (f" with filters {filters}" if filters else "")
        )

        offset = 0
        while True:
            page = await self.fetcher.fetch_page(query, offset)
            result.pages_fetched += 1

            new_count = dedup.merge(page)
            logger.info(f"Offset {offset}: {len(page)} returned, {new_count} new")

            if len(page) < page_size:
                break

            if offset >= self.last_offset:
                # A full page at the ceiling: more trades may exist but cannot be paged to.
                result.hit_ceiling = True
                break

            await self._sleep(self.config.request_delay_seconds)
            offset += page_size

        result.records = dedup.records
        result.duplicates_dropped = dedup.stats['duplicates_found']
        result.records_missing_key = dedup.stats['missing_key']

        logger.info(
            f"Pagination finished: {len(result)} unique trades over "
            f"{result.pages_fetched} pages (hit_ceiling={result.hit_ceiling})"
        )
        return result
