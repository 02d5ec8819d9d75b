from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import create_engine

from weatherblock.config import WeatherblockConfig
from weatherblock.domain.rendering import RenderFlags, TimezoneMode, render
from weatherblock.domain.units import MeasurementSystem, resolve_units
from weatherblock.infra.cache import MemoryWeatherCache, WeatherCache
from weatherblock.infra.db.tables import metadata
from weatherblock.infra.db.weather_cache_repository import SqlWeatherCache
from weatherblock.services.weather_fetcher import WeatherFetcher


class BlockAttributes(BaseModel):
    """Saved block configuration, as persisted by the page builder."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    location: str = ""
    measurementunit: MeasurementSystem = MeasurementSystem.IMPERIAL
    show_hourly: bool = Field(default=False, alias="showHourly")


@dataclass(frozen=True)
class BlockHandle:
    config: WeatherblockConfig
    fetcher: WeatherFetcher


def build_cache(config: WeatherblockConfig) -> WeatherCache:
    if config.database_url:
        engine = create_engine(config.database_url, future=True)
        metadata.create_all(engine)
        return SqlWeatherCache(engine, ttl_seconds=config.cache_ttl_seconds)
    return MemoryWeatherCache(ttl_seconds=config.cache_ttl_seconds)


def register(
    config: WeatherblockConfig,
    *,
    cache: Optional[WeatherCache] = None,
    fetcher: Optional[WeatherFetcher] = None,
) -> Optional[BlockHandle]:
    """Activate the block; without an API key it stays unregistered."""
    if not config.enabled:
        return None
    if fetcher is None:
        fetcher = WeatherFetcher(config, cache if cache is not None else build_cache(config))
    return BlockHandle(config=config, fetcher=fetcher)


def render_block(
    handle: BlockHandle,
    attributes: BlockAttributes,
    *,
    now_epoch: Optional[int] = None,
) -> str:
    """Static, server-side render in the forecast location's timezone."""
    units = resolve_units(attributes.measurementunit)
    flags = RenderFlags(
        show_hourly=attributes.show_hourly,
        timezone_mode=TimezoneMode.LOCATION,
        date_format=handle.config.date_format,
        time_format=handle.config.time_format,
    )
    now_epoch = int(time.time()) if now_epoch is None else now_epoch
    snapshot = handle.fetcher.fetch(attributes.location) if attributes.location else None
    return render(snapshot, units, flags, now_epoch, location=attributes.location)
