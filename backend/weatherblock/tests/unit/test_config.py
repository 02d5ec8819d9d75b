from __future__ import annotations

import pytest
from pydantic import ValidationError

from weatherblock.config import WeatherblockConfig, load_config
from weatherblock.errors import ConfigurationError


def test_defaults():
    config = WeatherblockConfig()
    assert not config.enabled
    assert config.cache_ttl_seconds == 900
    assert config.cache_key_prefix == "weatherblock_data_"
    assert config.forecast_url == "https://api.weatherapi.com/v1/forecast.json"


def test_require_api_key():
    with pytest.raises(ConfigurationError):
        WeatherblockConfig().require_api_key()
    assert WeatherblockConfig(api_key="abc").require_api_key() == "abc"


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("WEATHERBLOCK_API_KEY", "from-env")
    monkeypatch.setenv("WEATHERBLOCK_CACHE_TTL", "60")
    monkeypatch.setenv("WEATHERBLOCK_API_URL", "http://localhost:9000/v1")
    config = load_config()
    assert config.enabled
    assert config.api_key == "from-env"
    assert config.cache_ttl_seconds == 60
    assert config.forecast_url == "http://localhost:9000/v1/forecast.json"


def test_load_config_overrides(monkeypatch):
    monkeypatch.delenv("WEATHERBLOCK_API_KEY", raising=False)
    assert load_config(api_key="explicit").api_key == "explicit"


def test_config_is_immutable():
    config = WeatherblockConfig(api_key="k")
    with pytest.raises(ValidationError):
        config.api_key = "other"


def test_display_formats_default_and_env(monkeypatch):
    assert WeatherblockConfig().date_format == "D F j, Y"
    assert WeatherblockConfig().time_format == "g:i A"
    monkeypatch.setenv("WEATHERBLOCK_DATE_FORMAT", "Y-m-d")
    monkeypatch.setenv("WEATHERBLOCK_TIME_FORMAT", "H:i")
    config = load_config()
    assert config.date_format == "Y-m-d"
    assert config.time_format == "H:i"
