import pytest

from fxconvert.core.config import Settings


def test_defaults():
    s = Settings()
    s.init_post_load()
    assert s.rates_cache_ttl_seconds == 3600
    assert s.exchange_rate_provider == "external-http"
    assert s.exchange_api_base_url == "https://open.er-api.com/v6/latest"


def test_env_override(monkeypatch):
    monkeypatch.setenv("RATES_CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("EXCHANGE_RATE_PROVIDER", "static")
    s = Settings()
    s.init_post_load()
    assert s.rates_cache_ttl_seconds == 60
    assert s.exchange_rate_provider == "static"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"exchange_rate_provider": "bogus"},
        {"rates_cache_ttl_seconds": 0},
        {"http_timeout_seconds": -1},
    ],
)
def test_invalid(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs).init_post_load()
