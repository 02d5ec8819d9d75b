from __future__ import annotations

from typing import Optional

import httpx


class WeatherApiClient:
    """Thin client for weatherapi.com's forecast endpoint.

    Returns the response body untouched; decoding is the caller's job.
    """

    BASE_URL = "https://api.weatherapi.com/v1/forecast.json"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.transport = transport

    def build_params(self, location: str) -> dict:
        return {
            "key": self.api_key,
            "aqi": "no",
            "days": 1,
            "alerts": "no",
            "q": location,
        }

    def forecast(self, location: str) -> str:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            resp = client.get(self.base_url, params=self.build_params(location))
            # weatherapi.com reports bad queries as 4xx with an {"error": ...} body
            if resp.is_error and not self._is_error_envelope(resp):
                resp.raise_for_status()
            return resp.text

    @staticmethod
    def _is_error_envelope(resp: httpx.Response) -> bool:
        if not resp.is_client_error:
            return False
        try:
            payload = resp.json()
        except ValueError:
            return False
        return isinstance(payload, dict) and isinstance(payload.get("error"), dict)
