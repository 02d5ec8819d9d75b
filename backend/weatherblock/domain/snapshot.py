from __future__ import annotations

import json
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from weatherblock.errors import ParseError


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Condition(_Payload):
    text: str
    icon: str


class LocationInfo(_Payload):
    name: str
    region: str = ""
    tz_id: str


class CurrentConditions(_Payload):
    temp_c: float
    temp_f: float
    feelslike_c: float
    feelslike_f: float
    humidity: int
    wind_mph: float
    wind_kph: float
    condition: Condition
    last_updated_epoch: int


class HourlyEntry(_Payload):
    time_epoch: int
    temp_c: float
    temp_f: float
    condition: Condition


class DaySummary(_Payload):
    daily_chance_of_rain: int


class ForecastDay(_Payload):
    day: DaySummary
    hour: List[HourlyEntry] = []


class Forecast(_Payload):
    forecastday: List[ForecastDay]


class ApiError(_Payload):
    message: str
    code: Optional[int] = None


class WeatherSnapshot(_Payload):
    """One decoded forecast.json response.

    Either `error` is set, or all of location/current/forecast are.
    """

    location: Optional[LocationInfo] = None
    current: Optional[CurrentConditions] = None
    forecast: Optional[Forecast] = None
    error: Optional[ApiError] = None

    @model_validator(mode="after")
    def _check_shape(self) -> "WeatherSnapshot":
        if self.error is not None:
            return self
        if self.location is None or self.current is None or self.forecast is None:
            raise ValueError("location, current and forecast are required without an error")
        if not self.forecast.forecastday:
            raise ValueError("forecast.forecastday must not be empty")
        return self

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def today(self) -> ForecastDay:
        return self.forecast.forecastday[0]


def decode_snapshot(body: str, *, location: str | None = None) -> WeatherSnapshot:
    try:
        return WeatherSnapshot.model_validate_json(body)
    except ValidationError as exc:
        raise ParseError(f"Unexpected weather payload: {exc.error_count()} error(s)", location=location) from exc


def decode_endpoint_body(payload: str, *, location: str | None = None) -> WeatherSnapshot:
    """Decode the internal endpoint response, a JSON string wrapping the raw body."""
    try:
        body = json.loads(payload)
    except ValueError as exc:
        raise ParseError("Endpoint response is not JSON", location=location) from exc
    if not isinstance(body, str):
        raise ParseError("Endpoint response is not a string body", location=location)
    return decode_snapshot(body, location=location)
