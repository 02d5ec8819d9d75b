from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict

from weatherblock.domain.rendering import DEFAULT_DATE_FORMAT, DEFAULT_TIME_FORMAT
from weatherblock.errors import ConfigurationError

VERSION = "1.0.0"


class WeatherblockConfig(BaseModel):
    """Runtime configuration for the weather block.

    Built explicitly by callers or from the environment through
    `load_config()`. TTLs are expressed in seconds.
    """

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    api_base_url: str = "https://api.weatherapi.com/v1/"
    cache_ttl_seconds: int = 15 * 60
    cache_key_prefix: str = "weatherblock_data_"
    http_timeout: float = 10.0
    database_url: Optional[str] = None
    namespace: str = "weatherblock/v1"
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT
    version: str = VERSION

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def forecast_url(self) -> str:
        return self.api_base_url.rstrip("/") + "/forecast.json"

    def require_api_key(self) -> str:
        if not self.enabled:
            raise ConfigurationError("WEATHERBLOCK_API_KEY is required")
        return self.api_key


def load_config(**overrides) -> WeatherblockConfig:
    values = {
        "api_key": os.getenv("WEATHERBLOCK_API_KEY"),
        "api_base_url": os.getenv("WEATHERBLOCK_API_URL", "https://api.weatherapi.com/v1/"),
        "cache_ttl_seconds": int(os.getenv("WEATHERBLOCK_CACHE_TTL", "900")),
        "http_timeout": float(os.getenv("WEATHERBLOCK_HTTP_TIMEOUT", "10.0")),
        "database_url": os.getenv("WEATHERBLOCK_DATABASE_URL"),
        "date_format": os.getenv("WEATHERBLOCK_DATE_FORMAT", DEFAULT_DATE_FORMAT),
        "time_format": os.getenv("WEATHERBLOCK_TIME_FORMAT", DEFAULT_TIME_FORMAT),
    }
    values.update(overrides)
    return WeatherblockConfig(**values)
