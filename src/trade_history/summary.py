"""Console summary of a fetched trade set."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class TradeSummary:
    trades: int = 0
    buys: int = 0
    sells: int = 0
    markets: int = 0
    volume: float = 0.0
    earliest: Optional[datetime] = None
    latest: Optional[datetime] = None


def _to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_datetime(value: Any) -> Optional[datetime]:
    """Parse Unix seconds or milliseconds."""
    try:
        raw = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(raw):
        return None

    # Anything below 1e12 is seconds
    millis = raw * 1000 if raw < 1e12 else raw
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def summarize(trades: List[Dict[str, Any]]) -> TradeSummary:
    summary = TradeSummary(trades=len(trades))
    if not trades:
        return summary

    summary.buys = sum(1 for t in trades if t.get('side') == 'BUY')
    summary.sells = summary.trades - summary.buys
    summary.markets = len({t.get('conditionId') or t.get('market') for t in trades})
    summary.volume = sum(_to_float(t.get('size')) * _to_float(t.get('price')) for t in trades)

    timestamps = sorted(ts for ts in (_to_datetime(t.get('timestamp')) for t in trades) if ts)
    if timestamps:
        summary.earliest = timestamps[0]
        summary.latest = timestamps[-1]

    return summary


def _isoformat(ts: datetime) -> str:
    return ts.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def format_summary(summary: TradeSummary) -> str:
    if summary.trades == 0:
        return "No trades found."

    lines = [
        "--- Summary ---",
        f"Trades:    {summary.trades}",
        f"Buys:      {summary.buys}",
        f"Sells:     {summary.sells}",
        f"Markets:   {summary.markets}",
        f"Volume:    ${summary.volume:.2f}",
    ]
    if summary.earliest and summary.latest:
        lines.append(f"Earliest:  {_isoformat(summary.earliest)}")
        lines.append(f"Latest:    {_isoformat(summary.latest)}")
    return "\n".join(lines)
