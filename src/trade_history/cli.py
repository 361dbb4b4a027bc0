"""Command line entry point for the trade history fetcher."""

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from typing import List, Optional

import aiohttp

from .clients.data_api import DataAPIClient
from .config.settings import TradeHistoryConfig, load_config
from .exceptions import InvalidQueryError, TradeHistoryError
from .models import PaginationResult, Side, TradeQuery
from .paginator import Paginator
from .summary import format_summary, summarize
from .utils.logging import setup_logging
from .writers.file_writer import OutputFormat, TradeFileWriter, default_filename

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trade-history",
        description="Export the public trade history of a Polymarket wallet.",
    )
    parser.add_argument("wallet", help="Wallet address (0x followed by 40 hex characters)")
    parser.add_argument("--market", help="Filter by market condition ID")
    parser.add_argument("--event", help="Filter by event ID")
    parser.add_argument("--side", choices=[s.value for s in Side], help="Filter by trade side")
    parser.add_argument(
        "--format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.JSONL.value,
        help="Output format (default: jsonl)",
    )
    parser.add_argument("--output", help="Custom output filename")
    parser.add_argument(
        "--config",
        default=os.getenv("CONFIG_FILE"),
        help="YAML config file (default: $CONFIG_FILE)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    return parser


async def fetch_trades(query: TradeQuery, config: TradeHistoryConfig) -> PaginationResult:
    """Run one pagination over the data API."""
    client = DataAPIClient(config.api, config.pagination, config.retry)
    async with client:
        paginator = Paginator(client, config.pagination)
        return await paginator.run(query)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    try:
        query = TradeQuery(wallet=args.wallet, market=args.market, event=args.event, side=args.side)
    except InvalidQueryError as e:
        parser.error(str(e))

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Error: could not load config {args.config}: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config = dataclasses.replace(
            config, logging=dataclasses.replace(config.logging, level=args.log_level)
        )
    setup_logging(config.logging)

    try:
        result = asyncio.run(fetch_trades(query, config))
    except (TradeHistoryError, aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Fatal: {str(e) or type(e).__name__}", exc_info=logger.isEnabledFor(logging.DEBUG))
        return 1

    if result.hit_ceiling:
        logger.warning(
            f"Hit the API offset ceiling ({config.pagination.max_offset}). There may be more "
            "trades that cannot be retrieved. Consider filtering by --market to get "
            "additional data per market."
        )

    output_format = OutputFormat(args.format)
    filename = args.output or default_filename(query.wallet, output_format)

    try:
        stats = TradeFileWriter(output_format).write(result.records, filename)
    except OSError as e:
        logger.error(f"Fatal: could not write {filename}: {e}")
        return 1

    print(f"\nWrote {stats.records_written} trades to {stats.path}")
    print()
    print(format_summary(summarize(result.records)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
