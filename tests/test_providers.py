"""Tests for the HTTP and static rate providers."""

import asyncio

import httpx
import pytest

from fxconvert.core.config import Settings
from fxconvert.services.rates.errors import ProviderError
from fxconvert.services.rates.providers import (
    ExternalHTTPRateProvider,
    StaticRateProvider,
    make_rate_provider,
    parse_rates_payload,
)


def run(coro):
    return asyncio.run(coro)


def _provider(handler):
    return ExternalHTTPRateProvider(
        base_url="https://rates.test/v6/latest/",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestParsePayload:
    def test_success(self):
        rates = parse_rates_payload(
            {"result": "success", "rates": {"eur": 0.92, "JPY": 150}}, "USD"
        )
        assert rates == {"EUR": 0.92, "JPY": 150.0}

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {"result": "error", "error-type": "unsupported-code"},
            {"rates": {"EUR": 0.92}},
            {"result": "success"},
            {"result": "success", "rates": {}},
            {"result": "success", "rates": ["EUR"]},
            {"result": "success", "rates": {"EUR": "0.92"}},
            {"result": "success", "rates": {"EUR": True}},
            {"result": "success", "rates": {"EUR": float("nan")}},
            {"result": "success", "rates": {"EUR": float("inf")}},
            {"result": "success", "rates": {"EUR": 0}},
            {"result": "success", "rates": {"EUR": -5}},
            {"result": "success", "rates": {"EUR": 0.92, "JPY": -5, "GBP": 0}},
        ],
    )
    def test_rejects_bad_payloads(self, payload):
        with pytest.raises(ProviderError):
            parse_rates_payload(payload, "USD")


class TestExternalHTTPRateProvider:
    def test_fetches_templated_url(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json={"result": "success", "rates": {"EUR": 0.92}})

        rates = run(_provider(handler).fetch_rates("usd"))
        assert rates == {"EUR": 0.92}
        assert seen == ["https://rates.test/v6/latest/USD"]

    def test_non_2xx(self):
        provider = _provider(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(ProviderError, match="HTTP 500"):
            run(provider.fetch_rates("USD"))

    def test_not_found(self):
        provider = _provider(lambda request: httpx.Response(404, json={"result": "error"}))
        with pytest.raises(ProviderError):
            run(provider.fetch_rates("USD"))

    def test_invalid_json(self):
        provider = _provider(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(ProviderError, match="invalid JSON"):
            run(provider.fetch_rates("USD"))

    def test_failure_sentinel(self):
        provider = _provider(
            lambda request: httpx.Response(
                200, json={"result": "error", "error-type": "unsupported-code"}
            )
        )
        with pytest.raises(ProviderError, match="unsupported-code"):
            run(provider.fetch_rates("XXX"))

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProviderError):
            run(_provider(handler).fetch_rates("USD"))

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ProviderError):
            run(_provider(handler).fetch_rates("USD"))

    @pytest.mark.parametrize("base", ["U\x00D", "U\tD", "US1", "U D", "ÜSD"])
    def test_malformed_base_never_reaches_the_wire(self, base):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"result": "success", "rates": {"EUR": 0.92}})

        with pytest.raises(ProviderError, match="malformed base"):
            run(_provider(handler).fetch_rates(base))
        assert seen == []

    def test_invalid_url_is_provider_error(self):
        provider = ExternalHTTPRateProvider(
            base_url="https://rates.test/v6\x00/latest",
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )
        with pytest.raises(ProviderError):
            run(provider.fetch_rates("USD"))

    def test_timeout_is_forwarded_to_requests(self):
        timeouts = []

        def handler(request):
            timeouts.append(request.extensions["timeout"])
            return httpx.Response(200, json={"result": "success", "rates": {"EUR": 0.92}})

        provider = ExternalHTTPRateProvider(
            base_url="https://rates.test/v6/latest",
            timeout=2.5,
            transport=httpx.MockTransport(handler),
        )
        run(provider.fetch_rates("USD"))
        assert timeouts[0]["read"] == 2.5
        assert timeouts[0]["connect"] == 2.5

    def test_client_reused_and_closed(self):
        provider = _provider(
            lambda request: httpx.Response(200, json={"result": "success", "rates": {"EUR": 0.92}})
        )

        async def scenario():
            await provider.fetch_rates("USD")
            first = provider._client
            await provider.fetch_rates("EUR")
            assert provider._client is first
            await provider.aclose()
            assert first.is_closed
            assert provider._client is None
            # a later fetch opens a new client
            await provider.fetch_rates("USD")
            assert provider._client is not None and provider._client is not first
            await provider.aclose()

        run(scenario())


class TestStaticRateProvider:
    def test_known_base(self):
        rates = run(StaticRateProvider().fetch_rates("usd"))
        assert rates["USD"] == 1.0
        assert rates["EUR"] == 0.92

    def test_unknown_base(self):
        with pytest.raises(ProviderError):
            run(StaticRateProvider().fetch_rates("XYZ"))

    def test_returns_copy(self):
        provider = StaticRateProvider({"USD": {"EUR": 0.92}})
        rates = run(provider.fetch_rates("USD"))
        rates["EUR"] = 0.0
        assert run(provider.fetch_rates("USD")) == {"EUR": 0.92}


class TestFactory:
    def test_static(self):
        assert isinstance(make_rate_provider("static"), StaticRateProvider)

    def test_external_http_uses_settings(self):
        settings = Settings(
            exchange_api_base_url="https://example.test/latest/", http_timeout_seconds=2.5
        )
        settings.init_post_load()
        provider = make_rate_provider("external-http", settings)
        assert isinstance(provider, ExternalHTTPRateProvider)
        assert provider.url_for("gbp") == "https://example.test/latest/GBP"
        assert provider.timeout == 2.5

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            make_rate_provider("carrier-pigeon")
