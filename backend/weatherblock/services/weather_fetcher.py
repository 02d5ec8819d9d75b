from __future__ import annotations

import logging
from typing import Optional, Union

import httpx

from weatherblock.config import WeatherblockConfig
from weatherblock.domain.snapshot import WeatherSnapshot, decode_snapshot
from weatherblock.errors import CacheError, FetchError, TransportError
from weatherblock.infra.cache import WeatherCache, cache_key
from weatherblock.infra.weather.weatherapi_client import WeatherApiClient

logger = logging.getLogger(__name__)

FetchResult = Union[WeatherSnapshot, FetchError]


class WeatherFetcher:
    """Resolves a location to a forecast body, through the cache first."""

    def __init__(
        self,
        config: WeatherblockConfig,
        cache: WeatherCache,
        client: Optional[WeatherApiClient] = None,
    ):
        if cache is None:
            raise ValueError("cache is required")
        self.config = config
        self.cache = cache
        self.client = client or WeatherApiClient(
            config.require_api_key(),
            base_url=config.forecast_url,
            timeout=config.http_timeout,
        )

    def key_for(self, location: str) -> str:
        return cache_key(location, self.config.cache_key_prefix)

    def fetch_body(self, location: str) -> str:
        body, _ = self._resolve(location)
        return body

    def fetch(self, location: str) -> FetchResult:
        try:
            _, snapshot = self._resolve(location)
        except FetchError as exc:
            return exc
        return snapshot

    def _resolve(self, location: str) -> tuple[str, WeatherSnapshot]:
        if not location:
            raise ValueError("location is required")
        key = self.key_for(location)
        entry = self._cached(key, location)
        if entry is not None:
            logger.debug("weather cache hit for %r", location)
            return entry.body, decode_snapshot(entry.body, location=location)

        logger.debug("weather cache miss for %r", location)
        try:
            body = self.client.forecast(location)
        except httpx.HTTPError as exc:
            logger.warning("weather request for %r failed: %s", location, exc)
            raise TransportError(f"Weather request failed: {exc}", location=location) from exc

        snapshot = decode_snapshot(body, location=location)
        if snapshot.error is not None:
            logger.info("weather API rejected %r: %s", location, snapshot.error.message)
        else:
            self._store(key, location, body)
        return body, snapshot

    def _cached(self, key: str, location: str):
        try:
            return self.cache.get(key)
        except CacheError as exc:
            logger.warning("weather cache read for %r failed, treating as a miss: %s", location, exc)
            return None

    def _store(self, key: str, location: str, body: str) -> None:
        try:
            self.cache.put(key, body)
        except CacheError as exc:
            logger.warning("weather cache write for %r failed, not cached: %s", location, exc)
