"""Deduplication of trade records across pages."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Set

logger = logging.getLogger(__name__)


class TradeDeduplicator:
    """
    First-occurrence-wins deduplicator keyed on a single record field.

    Records are kept in the order they were first observed. A record whose
    key was already seen is dropped; a record without the key is skipped
    and counted, never merged.
    """

    def __init__(self, key_field: str = "transactionHash"):
        self.key_field = key_field
        self.records: List[Dict[str, Any]] = []
        self._seen: Set[Any] = set()

        # Statistics
        self.stats = {
            'total_checks': 0,
            'duplicates_found': 0,
            'unique_records': 0,
            'missing_key': 0
        }

    def is_unique(self, record: Dict[str, Any]) -> bool:
        """Check a record against the seen keys and remember it if new."""

        self.stats['total_checks'] += 1
        key = record.get(self.key_field) if isinstance(record, Mapping) else None

        if key is None or key == "":
            self.stats['missing_key'] += 1
            logger.warning(f"Skipping trade without {self.key_field}: {record}")
            return False

        if key in self._seen:
            self.stats['duplicates_found'] += 1
            logger.debug(f"Duplicate trade found: {key}")
            return False

        self._seen.add(key)
        self.stats['unique_records'] += 1
        return True

    def merge(self, page: Iterable[Dict[str, Any]]) -> int:
        """Append the unique records of a page. Returns how many were new."""
        new_count = 0
        for record in page:
            if self.is_unique(record):
                self.records.append(record)
                new_count += 1
        return new_count

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, key: Any) -> bool:
        return key in self._seen
