import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import currency, health
from .services.rates.cache_service import RateStore
from .services.rates.conversion import Converter
from .services.rates.errors import ConversionError
from .services.rates.providers import make_rate_provider


def build_converter(settings: Settings) -> Converter:
    provider = make_rate_provider(settings.exchange_rate_provider, settings)
    return Converter(
        provider=provider,
        store=RateStore(),
        ttl_seconds=settings.rates_cache_ttl_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.converter.provider.aclose()


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., static provider, short TTL). Falls back to
    cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.converter = build_converter(settings)
    logging.getLogger("fxconvert").info(
        "using rate provider %s (ttl=%ss)",
        settings.exchange_rate_provider,
        settings.rates_cache_ttl_seconds,
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(ConversionError, errors.conversion_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(currency.router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


app = create_app()
