from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol

Clock = Callable[[], datetime]

DEFAULT_TTL_SECONDS = 15 * 60
DEFAULT_KEY_PREFIX = "weatherblock_data_"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def cache_key(location: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    # No case or whitespace folding: "Paris" and "paris" are different entries.
    return prefix + location


@dataclass(frozen=True)
class CacheEntry:
    key: str
    body: str
    created_at: datetime

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.created_at > ttl


class WeatherCache(Protocol):
    """Contract for raw response caches keyed by location.

    Implementations backed by an external store raise `CacheError` when
    it is unavailable.
    """

    def get(self, key: str) -> Optional[CacheEntry]:
        raise NotImplementedError

    def put(self, key: str, body: str) -> CacheEntry:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def purge_expired(self) -> int:
        raise NotImplementedError


class MemoryWeatherCache(WeatherCache):
    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Optional[Clock] = None) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock or utc_now
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock(), self.ttl):
            self._entries.pop(key, None)
            return None
        return entry

    def put(self, key: str, body: str) -> CacheEntry:
        entry = CacheEntry(key=key, body=body, created_at=self._clock())
        self._entries[key] = entry
        return entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now, self.ttl)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
