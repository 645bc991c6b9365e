from __future__ import annotations

"""Per-base-currency rate table cache.

Purpose:
    Keep the most recently fetched rate table for every base currency seen, so
    the converter only calls the upstream provider when a table is missing or
    older than the TTL.

Design:
    - One RateTable per base code (uppercased), replaced wholesale on refresh.
    - Freshness is a read-time predicate; there is no expiry sweep and no
      eviction. Base codes form a small closed set, so retention is bounded.
    - Tables are immutable, so swapping the reference under a lock is enough
      for readers on any thread or task to see either the old or the new table.
"""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class RateTable:
    base: str
    rates: Mapping[str, float] = field(repr=False)
    fetched_at: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", self.base.upper())
        object.__setattr__(
            self,
            "rates",
            MappingProxyType({k.upper(): float(v) for k, v in self.rates.items()}),
        )

    def age(self, now: float) -> float:
        return now - self.fetched_at


class RateStore:
    """Thread-safe mapping of base currency -> latest RateTable."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: Dict[str, RateTable] = {}

    def get(self, base: str) -> Optional[RateTable]:
        with self._lock:
            return self._tables.get(base.upper())

    def is_fresh(self, base: str, now: float, ttl: float) -> bool:
        table = self.get(base)
        return table is not None and table.age(now) < ttl

    def put(self, base: str, table: RateTable) -> None:
        with self._lock:
            self._tables[base.upper()] = table

    def bases(self) -> list[str]:
        with self._lock:
            return sorted(self._tables)
