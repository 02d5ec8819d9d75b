from __future__ import annotations

import json

import httpx
import pytest

from weatherblock.infra.weather.weatherapi_client import WeatherApiClient
from weatherblock.tests.factories import error_payload


def _client(handler) -> WeatherApiClient:
    return WeatherApiClient("secret", transport=httpx.MockTransport(handler))


def test_forecast_sends_expected_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, text='{"ok": true}')

    body = _client(handler).forecast("New York")
    assert body == '{"ok": true}'
    url = seen["url"]
    assert url.path == "/v1/forecast.json"
    assert dict(url.params) == {"key": "secret", "aqi": "no", "days": "1", "alerts": "no", "q": "New York"}


def test_error_envelope_on_client_error_is_returned():
    payload = json.dumps(error_payload())

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text=payload)

    assert _client(handler).forecast("Nowhere") == payload


def test_server_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).forecast("Paris")


def test_unauthorized_without_envelope_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="nope")

    with pytest.raises(httpx.HTTPStatusError):
        _client(handler).forecast("Paris")


def test_network_error_propagates():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.ConnectError):
        _client(handler).forecast("Paris")


def test_api_key_required():
    with pytest.raises(ValueError):
        WeatherApiClient("")
