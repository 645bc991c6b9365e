from __future__ import annotations

"""Concrete rate providers and factory.

'external-http' talks to open.er-api.com (free, no key required). 'static' serves
fixed tables so the service and smoke scripts can run without network access.
"""
import logging
import math
from typing import Any, Dict, Optional, TYPE_CHECKING

import httpx

from .base import RateProvider
from .errors import ProviderError

if TYPE_CHECKING:  # pragma: no cover
    from fxconvert.core.config import Settings

logger = logging.getLogger(__name__)

SUCCESS_RESULT = "success"

_STATIC_TABLES: Dict[str, Dict[str, float]] = {
    "USD": {"USD": 1.0, "EUR": 0.92, "GBP": 0.79, "INR": 83.2, "JPY": 150.0},
    "EUR": {"EUR": 1.0, "USD": 1.087, "GBP": 0.858, "INR": 90.4, "JPY": 163.0},
    "GBP": {"GBP": 1.0, "USD": 1.266, "EUR": 1.165, "INR": 105.3, "JPY": 189.9},
    "INR": {"INR": 1.0, "USD": 0.01202, "EUR": 0.01106, "GBP": 0.0095, "JPY": 1.803},
}


def parse_rates_payload(data: Any, base: str) -> Dict[str, float]:
    """Validate an open.er-api style body and return its rate mapping.

    Expected shape: {"result": "success", "rates": {"EUR": 0.92, ...}}.
    """
    if not isinstance(data, dict):
        raise ProviderError(f"unexpected payload type {type(data).__name__} for base {base}")
    if data.get("result") != SUCCESS_RESULT:
        raise ProviderError(
            f"provider reported failure for base {base}: "
            f"{data.get('error-type') or data.get('result')!r}"
        )
    rates = data.get("rates")
    if not isinstance(rates, dict) or not rates:
        raise ProviderError(f"no rates in payload for base {base}")
    parsed: Dict[str, float] = {}
    for code, value in rates.items():
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ProviderError(f"non-numeric rate for {code!r} in base {base}")
        if not math.isfinite(value) or value <= 0:
            raise ProviderError(f"invalid rate {value!r} for {code!r} in base {base}")
        parsed[str(code).upper()] = float(value)
    return parsed


class StaticRateProvider(RateProvider):
    name = "static"

    def __init__(self, tables: Optional[Dict[str, Dict[str, float]]] = None):
        self._tables = tables if tables is not None else _STATIC_TABLES

    async def fetch_rates(self, base: str) -> Dict[str, float]:  # type: ignore[override]
        table = self._tables.get(base.upper())
        if not table:
            raise ProviderError(f"static provider has no table for base {base}")
        return dict(table)


class ExternalHTTPRateProvider(RateProvider):
    """GET {base_url}/{BASE} with a bounded timeout; no retries.

    One AsyncClient is created on first use and reused for every fetch; the app
    lifespan calls aclose() on shutdown.
    """

    name = "external-http"

    def __init__(
        self,
        base_url: str = "https://open.er-api.com/v6/latest",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        # Injected in tests (httpx.MockTransport)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def timeout(self) -> float:
        return self._timeout

    def url_for(self, base: str) -> str:
        return f"{self._base_url}/{base.upper()}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            )
        return self._client

    async def fetch_rates(self, base: str) -> Dict[str, float]:  # type: ignore[override]
        # Currency codes are ASCII letters; anything else cannot name a base
        if not (base.isascii() and base.isalpha()):
            raise ProviderError(f"malformed base currency {base!r}")
        url = self.url_for(base)
        try:
            resp = await self._get_client().get(url)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"HTTP {e.response.status_code} from {url}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:  # transport errors and timeouts
            raise ProviderError(f"request to {url} failed: {e!r}") from e
        except ValueError as e:  # JSON decode
            raise ProviderError(f"invalid JSON from {url}") from e
        rates = parse_rates_payload(data, base)
        logger.info("fetched %d rates for base %s", len(rates), base.upper())
        return rates

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_PROVIDER_REGISTRY = {
    "static": StaticRateProvider,
    "external-http": ExternalHTTPRateProvider,
}


def make_rate_provider(kind: str, settings: "Settings" | None = None) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    if cls is ExternalHTTPRateProvider and settings is not None:
        return ExternalHTTPRateProvider(
            base_url=settings.exchange_api_base_url,
            timeout=settings.http_timeout_seconds,
        )
    return cls()
