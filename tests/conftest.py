"""Shared fixtures: fake provider, manual clock, converter and API client."""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeProvider, ManualClock
from fxconvert.core.config import Settings
from fxconvert.main import create_app
from fxconvert.routers.currency import get_converter
from fxconvert.services.rates.cache_service import RateStore
from fxconvert.services.rates.conversion import Converter


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def store():
    return RateStore()


@pytest.fixture
def converter(provider, store, clock):
    return Converter(provider=provider, store=store, ttl_seconds=3600, clock=clock)


@pytest.fixture
def app(converter):
    application = create_app(settings_override=Settings(exchange_rate_provider="static"))
    application.dependency_overrides[get_converter] = lambda: converter
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
