"""Local file writer for fetched trades."""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Supported output formats."""
    JSONL = "jsonl"
    JSON = "json"


@dataclass
class WriteStats:
    """Statistics for a file write."""
    path: Path
    records_written: int = 0
    bytes_written: int = 0


def default_filename(
    wallet: str,
    output_format: OutputFormat,
    timestamp: Optional[datetime] = None
) -> str:
    """trades_<wallet prefix>_<UTC timestamp>.<ext>"""
    timestamp = timestamp or datetime.now(timezone.utc)
    stamp = timestamp.strftime('%Y-%m-%dT%H-%M-%S')
    return f"trades_{wallet[:8]}_{stamp}.{OutputFormat(output_format).value}"


def serialize_trades(trades: List[Dict[str, Any]], output_format: OutputFormat) -> str:
    """Render trades as a pretty JSON array or as JSON lines."""
    if OutputFormat(output_format) is OutputFormat.JSON:
        return json.dumps(trades, indent=2, ensure_ascii=False) + "\n"

    if not trades:
        return ""
    lines = [json.dumps(trade, ensure_ascii=False, separators=(',', ':')) for trade in trades]
    return "\n".join(lines) + "\n"


class TradeFileWriter:
    """Writes a complete trade set to a single JSON or JSONL file."""

    def __init__(self, output_format: Union[OutputFormat, str] = OutputFormat.JSONL):
        self.output_format = OutputFormat(output_format)

    def write(self, trades: List[Dict[str, Any]], path: Union[str, Path]) -> WriteStats:
        path = Path(path)
        if path.parent and not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)

        content = serialize_trades(trades, self.output_format)
        data = content.encode('utf-8')
        path.write_bytes(data)

        stats = WriteStats(path=path, records_written=len(trades), bytes_written=len(data))
        logger.debug(f"Wrote {stats.records_written} trades ({stats.bytes_written} bytes) to {path}")
        return stats
