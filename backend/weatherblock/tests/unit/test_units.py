from __future__ import annotations

import pytest

from weatherblock.domain.units import MeasurementSystem, Units, resolve_units
from weatherblock.errors import InvalidArgument


@pytest.mark.parametrize(
    "system, expected",
    [
        (MeasurementSystem.IMPERIAL, Units(temperature="f", speed="mph")),
        (MeasurementSystem.METRIC, Units(temperature="c", speed="kph")),
        ("imperial", Units(temperature="f", speed="mph")),
        ("metric", Units(temperature="c", speed="kph")),
    ],
)
def test_resolve_units(system, expected):
    assert resolve_units(system) == expected


@pytest.mark.parametrize("system", ["kelvin", "", None, "Metric"])
def test_unknown_system_raises(system):
    with pytest.raises(InvalidArgument):
        resolve_units(system)


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        resolve_units("nautical")


def test_temperature_label_is_upper_case():
    assert resolve_units("metric").temperature_label == "C"
