from __future__ import annotations

from datetime import datetime, timedelta, timezone

# 2023-04-03 19:15 UTC, a Monday; 12:15 PM in Los Angeles (PDT)
LAST_UPDATED_EPOCH = 1680549300


def forecast_payload(
    *,
    name: str = "Los Angeles",
    region: str = "California",
    tz_id: str = "America/Los_Angeles",
    temp_f: float = 72.5,
    temp_c: float = 22.5,
    hours: list[int] | None = None,
) -> dict:
    hours = hours if hours is not None else [100, 200, 300]
    return {
        "location": {
            "name": name,
            "region": region,
            "country": "United States of America",
            "tz_id": tz_id,
            "localtime_epoch": LAST_UPDATED_EPOCH,
        },
        "current": {
            "last_updated_epoch": LAST_UPDATED_EPOCH,
            "temp_c": temp_c,
            "temp_f": temp_f,
            "feelslike_c": 21.4,
            "feelslike_f": 70.6,
            "humidity": 40,
            "wind_mph": 8.1,
            "wind_kph": 13.0,
            "condition": {"text": "Sunny", "icon": "//cdn.weatherapi.com/weather/64x64/day/113.png", "code": 1000},
        },
        "forecast": {
            "forecastday": [
                {
                    "date": "2023-04-03",
                    "day": {"daily_chance_of_rain": 10},
                    "hour": [
                        {
                            "time_epoch": epoch,
                            "temp_c": 20.0 + idx,
                            "temp_f": 68.4 + idx,
                            "condition": {"text": f"Cloudy {idx}", "icon": f"//cdn/{idx}.png"},
                        }
                        for idx, epoch in enumerate(hours)
                    ],
                }
            ]
        },
    }


def error_payload(message: str = "No matching location found.", code: int = 1006) -> dict:
    return {"error": {"code": code, "message": message}}


class FrozenClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 2, 18, 10, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class StaticWeatherClient:
    """Stands in for WeatherApiClient; records every location requested."""

    def __init__(self, body: str = "", *, fail: Exception | None = None) -> None:
        self.body = body
        self.fail = fail
        self.calls: list[str] = []

    def forecast(self, location: str) -> str:
        self.calls.append(location)
        if self.fail is not None:
            raise self.fail
        return self.body
