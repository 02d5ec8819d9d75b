from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jinja2

from weatherblock.domain.snapshot import WeatherSnapshot
from weatherblock.domain.units import Units
from weatherblock.errors import FetchError

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
TEMPLATE_NAME = "weather_block.html.j2"

LOCATION_REQUIRED = "Location is required."
GENERIC_FAILURE = "Sorry, something went wrong with the request. Please try again later."

# PHP-style patterns; see format_moment for the supported letters.
DEFAULT_DATE_FORMAT = "D F j, Y"
DEFAULT_TIME_FORMAT = "g:i A"

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class TimezoneMode(str, Enum):
    # static output: the forecast location's zone
    LOCATION = "location"
    # interactive editor: the viewer's zone
    VIEWER_LOCAL = "viewer_local"


@dataclass(frozen=True)
class RenderFlags:
    show_hourly: bool = False
    timezone_mode: TimezoneMode = TimezoneMode.LOCATION
    viewer_tz: Optional[tzinfo] = None
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT


@dataclass(frozen=True)
class NoticeView:
    message: str
    kind: str = "notice"


@dataclass(frozen=True)
class LoadingView:
    kind: str = "loading"


@dataclass(frozen=True)
class ErrorView:
    message: str
    kind: str = "error"


@dataclass(frozen=True)
class HourView:
    temperature: int
    icon: str
    condition: str
    time: str


@dataclass(frozen=True)
class WeatherView:
    name: str
    region: str
    icon: str
    condition: str
    temperature: int
    feels_like: int
    temperature_unit: str
    chance_of_rain: int
    humidity: int
    wind: str
    speed_unit: str
    updated_date: str
    updated_time: str
    hourly: Optional[Tuple[HourView, ...]] = None
    kind: str = "weather"


BlockView = Union[NoticeView, LoadingView, ErrorView, WeatherView]
SnapshotInput = Union[WeatherSnapshot, FetchError, None]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


_FORMAT_LETTERS = {
    "d": lambda m: f"{m.day:02d}",
    "D": lambda m: _WEEKDAYS[m.weekday()][:3],
    "j": lambda m: str(m.day),
    "l": lambda m: _WEEKDAYS[m.weekday()],
    "N": lambda m: str(m.isoweekday()),
    "F": lambda m: _MONTHS[m.month - 1],
    "M": lambda m: _MONTHS[m.month - 1][:3],
    "m": lambda m: f"{m.month:02d}",
    "n": lambda m: str(m.month),
    "Y": lambda m: str(m.year),
    "y": lambda m: f"{m.year % 100:02d}",
    "a": lambda m: "am" if m.hour < 12 else "pm",
    "A": lambda m: "AM" if m.hour < 12 else "PM",
    "g": lambda m: str(_hour12(m)),
    "G": lambda m: str(m.hour),
    "h": lambda m: f"{_hour12(m):02d}",
    "H": lambda m: f"{m.hour:02d}",
    "i": lambda m: f"{m.minute:02d}",
    "s": lambda m: f"{m.second:02d}",
}


def format_moment(moment: datetime, pattern: str) -> str:
    """Format `moment` with a PHP `date()` style pattern.

    Names are always English, whatever the process locale. A backslash
    escapes the next character; letters without a meaning are copied.
    """
    out = []
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            out.append(next(chars, ""))
        elif char in _FORMAT_LETTERS:
            out.append(_FORMAT_LETTERS[char](moment))
        else:
            out.append(char)
    return "".join(out)


def format_date(moment: datetime, pattern: str = DEFAULT_DATE_FORMAT) -> str:
    return format_moment(moment, pattern)


def format_time(moment: datetime, pattern: str = DEFAULT_TIME_FORMAT) -> str:
    return format_moment(moment, pattern)


def _format_number(value: float) -> str:
    return f"{value:g}"


def _zone_for(snapshot: WeatherSnapshot, flags: RenderFlags) -> Optional[tzinfo]:
    if flags.timezone_mode is TimezoneMode.VIEWER_LOCAL:
        return flags.viewer_tz
    try:
        return ZoneInfo(snapshot.location.tz_id)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def _localize(epoch: int, zone: Optional[tzinfo]) -> datetime:
    return datetime.fromtimestamp(epoch, zone)


def build_view(
    snapshot: SnapshotInput,
    units: Units,
    flags: RenderFlags,
    now_epoch: int,
    *,
    location: str,
) -> BlockView:
    if not location:
        return NoticeView(LOCATION_REQUIRED)
    if snapshot is None:
        return LoadingView()
    if isinstance(snapshot, FetchError):
        return ErrorView(GENERIC_FAILURE)
    if snapshot.error is not None:
        return ErrorView(snapshot.error.message)

    zone = _zone_for(snapshot, flags)
    current = snapshot.current
    temp_key = f"temp_{units.temperature}"
    updated = _localize(current.last_updated_epoch, zone)

    hourly = None
    if flags.show_hourly:
        hourly = tuple(
            HourView(
                temperature=round_half_away(getattr(hour, temp_key)),
                icon=hour.condition.icon,
                condition=hour.condition.text,
                time=format_time(_localize(hour.time_epoch, zone), flags.time_format),
            )
            for hour in snapshot.today.hour
            if hour.time_epoch > now_epoch
        )

    return WeatherView(
        name=snapshot.location.name,
        region=snapshot.location.region,
        icon=current.condition.icon,
        condition=current.condition.text,
        temperature=round_half_away(getattr(current, temp_key)),
        feels_like=round_half_away(getattr(current, f"feelslike_{units.temperature}")),
        temperature_unit=units.temperature_label,
        chance_of_rain=snapshot.today.day.daily_chance_of_rain,
        humidity=current.humidity,
        wind=_format_number(getattr(current, f"wind_{units.speed}")),
        speed_unit=units.speed,
        updated_date=format_date(updated, flags.date_format),
        updated_time=format_time(updated, flags.time_format),
        hourly=hourly,
    )


_environment: Optional[jinja2.Environment] = None


def _get_environment() -> jinja2.Environment:
    global _environment
    if _environment is None:
        _environment = jinja2.Environment(
            loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
    return _environment


def render_html(view: BlockView) -> str:
    return _get_environment().get_template(TEMPLATE_NAME).render(view=view)


def render(
    snapshot: SnapshotInput,
    units: Units,
    flags: RenderFlags,
    now_epoch: int,
    *,
    location: str,
) -> str:
    return render_html(build_view(snapshot, units, flags, now_epoch, location=location))
