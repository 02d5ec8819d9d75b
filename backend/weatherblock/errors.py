from __future__ import annotations


class WeatherblockError(Exception):
    """Base class for weather block failures."""


class InvalidArgument(WeatherblockError, ValueError):
    pass


class ConfigurationError(WeatherblockError):
    pass


class FetchError(WeatherblockError):
    """A weather fetch that produced no usable snapshot."""

    def __init__(self, message: str, *, location: str | None = None):
        super().__init__(message)
        self.location = location


class TransportError(FetchError):
    pass


class ParseError(FetchError):
    pass


class CacheError(WeatherblockError):
    """The cache store could not be read or written."""
