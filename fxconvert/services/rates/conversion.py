from __future__ import annotations

"""Currency conversion on top of the rate cache.

Responsibilities:
    - Decide cache hit vs fetch for the base currency.
    - Fail fast when the provider cannot deliver: a stale table is never used.
    - Look up the target rate and multiply; no rounding is applied here.
    - Return a simple immutable result object for clarity/testing.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .base import RateProvider
from .cache_service import RateStore, RateTable
from .errors import ProviderError, ProviderUnavailable, UnknownCurrency

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0


@dataclass(frozen=True)
class ConversionResult:
    from_currency: str
    to_currency: str
    amount: float
    rate: float
    converted_amount: float
    served_from_cache: bool


class Converter:
    """Cache-aside converter.

    The clock must be monotonic and in seconds; tests inject a manual clock to
    step over the TTL without sleeping.
    """

    def __init__(
        self,
        provider: RateProvider,
        store: Optional[RateStore] = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.store = store if store is not None else RateStore()
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    async def _refresh(self, base: str, now: float) -> RateTable:
        logger.info("fetching rates for base %s via %s", base, self.provider.name)
        try:
            rates = await self.provider.fetch_rates(base)
        except ProviderError as e:
            logger.warning("rate fetch failed for base %s: %s", base, e)
            raise ProviderUnavailable() from e
        if not rates:
            logger.warning("provider returned an empty table for base %s", base)
            raise ProviderUnavailable()
        table = RateTable(base=base, rates=rates, fetched_at=now)
        self.store.put(base, table)
        return table

    async def get_table(self, base: str, now: Optional[float] = None) -> tuple[RateTable, bool]:
        """Return (table, served_from_cache) for a base currency."""
        base = base.strip().upper()
        if now is None:
            now = self._clock()
        if self.store.is_fresh(base, now, self.ttl_seconds):
            table = self.store.get(base)
            # put() never removes a key, so a fresh base always has a table
            if table is not None:
                logger.debug("cache hit for base %s", base)
                return table, True
        return await self._refresh(base, now), False

    async def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        now: Optional[float] = None,
    ) -> ConversionResult:
        source = from_currency.strip().upper()
        target = to_currency.strip().upper()
        table, cached = await self.get_table(source, now)

        rate = table.rates.get(target)
        if rate is None:
            raise UnknownCurrency(code=target, base=source)

        return ConversionResult(
            from_currency=source,
            to_currency=target,
            amount=amount,
            rate=rate,
            converted_amount=amount * rate,
            served_from_cache=cached,
        )
