from __future__ import annotations

import json

import pytest

from weatherblock.config import WeatherblockConfig
from weatherblock.tests.factories import FrozenClock, error_payload, forecast_payload


@pytest.fixture()
def forecast_body() -> str:
    return json.dumps(forecast_payload())


@pytest.fixture()
def error_body() -> str:
    return json.dumps(error_payload())


@pytest.fixture()
def config() -> WeatherblockConfig:
    return WeatherblockConfig(api_key="test-key")


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock()
