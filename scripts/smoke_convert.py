"""Smoke script for the conversion cache.

Demonstrates:
 1. First conversion for a base triggers a provider fetch (cached=False).
 2. A second conversion for the same base within TTL is served from cache.
 3. Backdating the clock past the TTL forces exactly one refetch.
 4. An unknown target code and an unknown base surface as typed failures.

Uses the static provider, so no network access is needed.
NOTE: This is a lightweight diagnostic and not a formal test.
"""

import asyncio
import time
from pprint import pprint

from fxconvert.services.rates.conversion import Converter
from fxconvert.services.rates.errors import ConversionError
from fxconvert.services.rates.providers import make_rate_provider


async def run():
    offset = {"seconds": 0.0}
    conv = Converter(
        make_rate_provider("static"),
        ttl_seconds=3600,
        clock=lambda: time.monotonic() + offset["seconds"],
    )
    out = {}

    first = await conv.convert(100, "USD", "EUR")
    out["initial"] = {"rate": first.rate, "converted": first.converted_amount, "cached": first.served_from_cache}

    second = await conv.convert(50, "usd", "jpy")
    out["second"] = {"rate": second.rate, "converted": second.converted_amount, "cached": second.served_from_cache}

    # Jump past the TTL
    offset["seconds"] = conv.ttl_seconds + 5
    third = await conv.convert(100, "USD", "EUR")
    out["after_ttl"] = {"rate": third.rate, "cached": third.served_from_cache}

    for label, args in (("unknown_target", ("USD", "XYZ")), ("unknown_base", ("XYZ", "USD"))):
        try:
            await conv.convert(1, *args)
        except ConversionError as e:
            out[label] = {"status": e.status_code, "message": e.message}

    out["cached_bases"] = conv.store.bases()
    pprint(out)


if __name__ == "__main__":
    asyncio.run(run())
