from functools import lru_cache
from typing import Optional

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from fxboard.models.constants import SUPPORTED_CURRENCIES


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., DEBUG, RATE_SOURCE,
    RATES_API_URL, HTTP_TIMEOUT_SECONDS, DEFAULT_BASE).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Currency Exchange Board"
    debug: bool = False
    version: str = "0.1.0"

    # Rate source
    # Allowed: 'external-http' (exchangerate.host), 'static' (built-in table, offline)
    rate_source: str = "external-http"
    rates_api_url: AnyHttpUrl = "https://api.exchangerate.host/latest"
    rates_api_access_key: Optional[str] = None
    http_timeout_seconds: float = 5.0
    http_retries: int = 0

    # Initial converter selection
    default_amount: str = "1000"
    default_base: str = "USD"
    default_target: str = "EUR"

    # Illustrative trend chart
    trend_sample_count: int = 12
    trend_jitter: float = 0.025

    def init_post_load(self) -> None:
        """Validate cross-field constraints not expressible as plain field types."""
        allowed = {"static", "external-http"}
        if self.rate_source not in allowed:
            raise ValueError(
                f"Unsupported rate_source '{self.rate_source}'. Allowed: {allowed}"
            )
        for field in ("default_base", "default_target"):
            code = getattr(self, field)
            if code not in SUPPORTED_CURRENCIES:
                raise ValueError(f"{field} '{code}' is not a supported currency")
        if self.trend_sample_count <= 0:
            raise ValueError("trend_sample_count must be positive")
        if not (0 <= self.trend_jitter < 1):
            raise ValueError("trend_jitter must be within [0, 1)")
        if self.http_retries < 0:
            raise ValueError("http_retries cannot be negative")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
