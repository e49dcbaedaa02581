"""Imsakiyah configuration — external service endpoints, location hints, and defaults."""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # equran.id imsakiyah API (province list, kabupaten/kota list, schedule)
    equran_api_base: str = "https://equran.id/api/v2/imsakiyah"

    # Nominatim reverse geocoding
    nominatim_url: str = "https://nominatim.openstreetmap.org/reverse"
    geocode_language: str = "id-ID"

    # Nominatim's usage policy requires an identifying User-Agent
    http_user_agent: str = "imsakiyah-locator/1.0"
    http_timeout: float = 15.0

    # Geolocation hints — same values the browser build passed to getCurrentPosition
    geolocation_high_accuracy: bool = True
    geolocation_timeout_ms: int = 10000
    geolocation_maximum_age_ms: int = 0

    # Caches
    geocode_cache_ttl: int = 3600  # 1 hour
    directory_cache_ttl: int = 86400  # province/city lists change once a year at most

    # Location applied by callers when resolution fails
    default_province: str = "DKI Jakarta"
    default_city: str = "Kota Jakarta Pusat"

    @model_validator(mode="after")
    def _strip_strings(self) -> "Settings":
        """Strip whitespace/newlines from string settings — common paste error in .env files."""
        for field in ("equran_api_base", "nominatim_url", "geocode_language",
                      "http_user_agent", "default_province", "default_city"):
            val = getattr(self, field)
            if val and val != val.strip():
                setattr(self, field, val.strip())
        self.equran_api_base = self.equran_api_base.rstrip("/")
        return self

    # MLflow — local SQLite unless MLFLOW_TRACKING_URI is set
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "imsakiyah-locator"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
