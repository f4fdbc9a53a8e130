"""
Statistic log.

Provides StatisticLog — a lightweight in-memory recorder of statistic records
produced during an analysis run.  Supports serialisation to list-of-dicts for
the reporting layer.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from ..core.statistic import StatDistr, Statistic

StatRecord = Union[Statistic, StatDistr]


class StatisticLog:
    """Records statistic records in the order they were produced.

    Attributes:
        max_records: Maximum number of records to retain (None = unlimited).
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        """Initialise an empty log.

        Args:
            max_records: If set, older records are discarded when the buffer
                         exceeds this limit (FIFO).
        """
        if max_records is not None and max_records <= 0:
            raise ValueError(
                f"max_records must be > 0 or None, got {max_records}"
            )
        self.max_records: Optional[int] = max_records
        self._records: List[StatRecord] = []

    def record(self, stat: StatRecord) -> None:
        """Append a record to the log."""
        self._records.append(stat)
        if self.max_records is not None and len(self._records) > self.max_records:
            self._records.pop(0)

    def extend(self, stats) -> None:
        for stat in stats:
            self.record(stat)

    def records(self) -> List[StatRecord]:
        """Return all recorded statistics (copy)."""
        return list(self._records)

    def by_key(self, key: str) -> List[StatRecord]:
        """Records describing variable ``key``."""
        return [s for s in self._records if s.key == key]

    def clear(self) -> None:
        """Empty the log."""
        self._records = []

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Serialise all records to a list of plain dictionaries."""
        return [s.to_dict() for s in self._records]
