from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    RATES_CACHE_TTL_SECONDS, EXCHANGE_RATE_PROVIDER).
    """

    # Basic app metadata
    app_name: str = "Currency Conversion Service"
    debug: bool = False
    version: str = "0.1.0"

    # Exchange rates / caching
    rates_cache_ttl_seconds: int = 3600  # 1 hour
    exchange_api_base_url: str = "https://open.er-api.com/v6/latest"  # base code appended
    http_timeout_seconds: float = 5.0

    # Allowed: 'external-http' (open.er-api.com), 'static' (built-in fixed tables)
    exchange_rate_provider: str = "external-http"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def init_post_load(self) -> None:
        """Validate fields that depend on the provider registry or on each other."""
        allowed = {"static", "external-http"}
        if self.exchange_rate_provider not in allowed:
            raise ValueError(
                f"Unsupported exchange_rate_provider '{self.exchange_rate_provider}'. Allowed: {allowed}"
            )
        if self.rates_cache_ttl_seconds <= 0:
            raise ValueError("rates_cache_ttl_seconds must be positive")
        if self.http_timeout_seconds <= 0:
            raise ValueError("http_timeout_seconds must be positive")
        self.exchange_api_base_url = self.exchange_api_base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
