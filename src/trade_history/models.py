"""Query and result types shared by the client and the paginator."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .exceptions import InvalidQueryError

# A trade is kept exactly as the API returned it.
Trade = Dict[str, Any]
Page = List[Trade]

WALLET_PATTERN = re.compile(r"0x[a-fA-F0-9]{40}")


class Side(str, Enum):
    """Trade side accepted by the side filter."""
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class TradeQuery:
    """Filter for one pagination run."""
    wallet: str
    market: Optional[str] = None
    event: Optional[str] = None
    side: Optional[Side] = None

    def __post_init__(self):
        if not isinstance(self.wallet, str) or not WALLET_PATTERN.fullmatch(self.wallet):
            raise InvalidQueryError(f'Invalid wallet address "{self.wallet}"')

        if self.side is not None and not isinstance(self.side, Side):
            object.__setattr__(self, 'side', parse_side(self.side))

    def to_params(self, limit: int, offset: int) -> Dict[str, Union[str, int]]:
        """Build request params, leaving out filters that are not set."""
        params: Dict[str, Union[str, int]] = {
            'user': self.wallet,
            'limit': limit,
            'offset': offset,
        }

        if self.market:
            params['market'] = self.market
        if self.event:
            params['event'] = self.event
        if self.side:
            params['side'] = self.side.value

        return params

    def describe(self) -> Dict[str, str]:
        """Filters that are set, for logging."""
        filters = {'market': self.market, 'event': self.event,
                   'side': self.side.value if self.side else None}
        return {name: value for name, value in filters.items() if value}


def parse_side(value: Any) -> Side:
    try:
        return Side(value)
    except ValueError:
        raise InvalidQueryError(f'side must be BUY or SELL, got "{value}"') from None


@dataclass
class PaginationResult:
    """Deduplicated trades from one pagination run."""
    records: List[Trade] = field(default_factory=list)
    hit_ceiling: bool = False
    pages_fetched: int = 0
    duplicates_dropped: int = 0
    records_missing_key: int = 0

    def __len__(self) -> int:
        return len(self.records)
