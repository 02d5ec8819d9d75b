from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from weatherblock.errors import InvalidArgument


class MeasurementSystem(str, Enum):
    IMPERIAL = "imperial"
    METRIC = "metric"


@dataclass(frozen=True)
class Units:
    temperature: str
    speed: str

    @property
    def temperature_label(self) -> str:
        return self.temperature.upper()


UNITS = {
    MeasurementSystem.IMPERIAL: Units(temperature="f", speed="mph"),
    MeasurementSystem.METRIC: Units(temperature="c", speed="kph"),
}


def resolve_units(system: Union[MeasurementSystem, str]) -> Units:
    try:
        return UNITS[MeasurementSystem(system)]
    except ValueError as exc:
        raise InvalidArgument(f"Unknown measurement system: {system!r}") from exc
