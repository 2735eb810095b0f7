"""
Statistics - Keyed numeric accumulators.

Each entry is identified by a set of keys (e.g. key="results",
game="TicTacToe", role="Xs", player="uct") and accumulates count, sum,
minimum, maximum and sum of squares of the values accounted to it.
Entries are only ever added to.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Any, Iterator


@dataclass
class StatEntry:
    keys: dict[str, Any]
    count: int = 0
    sum: float = 0.0
    min: float = math.nan
    max: float = math.nan
    sum_squares: float = 0.0

    @property
    def mean(self) -> float:
        return self.sum / self.count if self.count else math.nan

    @property
    def variance(self) -> float:
        """Sample variance (NaN with fewer than two values)."""
        if self.count < 2:
            return math.nan
        return (self.sum_squares - self.sum * self.sum / self.count) / (self.count - 1)

    def add(self, value: float) -> None:
        self.count += 1
        self.sum += value
        self.sum_squares += value * value
        self.min = value if math.isnan(self.min) else min(self.min, value)
        self.max = value if math.isnan(self.max) else max(self.max, value)

    def merge(self, other: StatEntry) -> None:
        if other.count == 0:
            return
        self.count += other.count
        self.sum += other.sum
        self.sum_squares += other.sum_squares
        self.min = other.min if math.isnan(self.min) else min(self.min, other.min)
        self.max = other.max if math.isnan(self.max) else max(self.max, other.max)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.keys,
            "count": self.count,
            "sum": self.sum,
            "mean": self.mean,
            "min": self.min,
            "max": self.max,
            "variance": self.variance,
        }


@dataclass
class Statistics:
    """
    Usage:
        stats = Statistics()
        stats.account({"key": "results", "player": "uct"}, 1.0)
        stats.get("results", player="uct").mean
    """
    _entries: dict[tuple, StatEntry] = field(default_factory=dict)

    @staticmethod
    def entry_id(keys: dict[str, Any]) -> tuple:
        return tuple(sorted(keys.items()))

    def entry(self, keys: dict[str, Any]) -> StatEntry:
        """The entry for exactly these keys, created empty if needed."""
        entry_id = self.entry_id(keys)
        entry = self._entries.get(entry_id)
        if entry is None:
            entry = StatEntry(keys=dict(keys))
            self._entries[entry_id] = entry
        return entry

    def account(self, keys: dict[str, Any], value: float) -> StatEntry:
        value = float(value)
        if math.isnan(value):
            raise ValueError(f"Value for statistic {keys!r} is NaN")
        entry = self.entry(keys)
        entry.add(value)
        return entry

    def entries(self, **filters: Any) -> Iterator[StatEntry]:
        """Entries whose keys match all the given filters."""
        for entry in self._entries.values():
            if all(entry.keys.get(k) == v for k, v in filters.items()):
                yield entry

    def get(self, key: str, **filters: Any) -> StatEntry:
        """Aggregate of every entry with the given key and filters."""
        aggregate = StatEntry(keys={"key": key, **filters})
        for entry in self.entries(key=key, **filters):
            aggregate.merge(entry)
        return aggregate

    def __len__(self) -> int:
        return len(self._entries)

    def table(self) -> list[list[Any]]:
        """Header row plus one row per entry."""
        key_names = sorted({k for entry in self._entries.values() for k in entry.keys})
        rows: list[list[Any]] = [key_names + ["count", "sum", "mean", "min", "max", "variance"]]
        for entry in self._entries.values():
            rows.append(
                [entry.keys.get(k, "") for k in key_names]
                + [entry.count, entry.sum, entry.mean, entry.min, entry.max, entry.variance]
            )
        return rows

    def to_tsv(self) -> str:
        def escape(value: Any) -> str:
            return (
                str(value)
                .replace("\\", "\\\\")
                .replace("\t", "\\t")
                .replace("\n", "\\n")
                .replace("\r", "\\r")
            )

        return "".join("\t".join(escape(v) for v in row) + "\n" for row in self.table())

    def __str__(self) -> str:
        return self.to_tsv()
