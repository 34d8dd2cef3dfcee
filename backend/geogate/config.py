"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - The upstream credential comes from the environment (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Only the composition root calls get_settings(); components receive values

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Upstream geocoder (OpenCage)
    opencage_api_key: str = ""
    opencage_base_url: str = "https://api.opencagedata.com/geocode/v1/geojson"
    opencage_timeout_seconds: float = 10.0

    # Server
    host: str = "0.0.0.0"  # nosec B104
    port: int = 3000
    workers: int = 1

    # Mode: "production" hides error internals from 500 responses
    environment: str = "development"

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Accept Production / PRODUCTION / production alike."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
