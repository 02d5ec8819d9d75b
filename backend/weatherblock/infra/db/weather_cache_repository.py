from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from weatherblock.errors import CacheError
from weatherblock.infra.cache import DEFAULT_TTL_SECONDS, CacheEntry, Clock, WeatherCache, utc_now

from .tables import weather_cache_table


def _as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes; rows are always written in UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@contextmanager
def _store_errors(action: str, key: str = "") -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise CacheError(f"weather cache {action} failed for {key!r}: {exc}") from exc


class SqlWeatherCache(WeatherCache):
    """Weather cache persisted in the `weather_cache` table.

    Writes are upserts keyed by `cache_key`; expired rows are ignored on
    read and removed by `purge_expired`. Store failures surface as
    `CacheError`.
    """

    def __init__(self, engine: Engine, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Optional[Clock] = None):
        if engine is None:
            raise ValueError("engine is required")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.engine = engine
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or utc_now

    def get(self, key: str) -> Optional[CacheEntry]:
        with _store_errors("read", key), self.engine.begin() as conn:
            row = conn.execute(
                select(weather_cache_table).where(weather_cache_table.c.cache_key == key)
            ).mappings().first()
        if row is None:
            return None
        entry = CacheEntry(key=row["cache_key"], body=row["body"], created_at=_as_utc(row["created_at"]))
        if entry.is_expired(_as_utc(self._clock()), self.ttl):
            return None
        return entry

    def put(self, key: str, body: str) -> CacheEntry:
        created_at = _as_utc(self._clock())
        values = {"body": body, "created_at": created_at}
        with _store_errors("write", key):
            try:
                with self.engine.begin() as conn:
                    conn.execute(insert(weather_cache_table).values(cache_key=key, **values))
            except IntegrityError:
                # row already present, possibly written by a concurrent miss
                with self.engine.begin() as conn:
                    conn.execute(
                        update(weather_cache_table)
                        .where(weather_cache_table.c.cache_key == key)
                        .values(**values)
                    )
        return CacheEntry(key=key, body=body, created_at=created_at)

    def delete(self, key: str) -> None:
        with _store_errors("delete", key), self.engine.begin() as conn:
            conn.execute(delete(weather_cache_table).where(weather_cache_table.c.cache_key == key))

    def purge_expired(self) -> int:
        cutoff = _as_utc(self._clock()) - self.ttl
        with _store_errors("purge"), self.engine.begin() as conn:
            result = conn.execute(
                delete(weather_cache_table).where(weather_cache_table.c.created_at < cutoff)
            )
        return result.rowcount or 0
