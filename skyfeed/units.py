"""Convert canonical (metric) results into the imperial unit system."""
from __future__ import annotations

import copy
from typing import Optional

from skyfeed.domain import (
    Current,
    HalfDay,
    Hourly,
    Normals,
    Precipitation,
    Temperature,
    UnitSystem,
    WeatherResult,
    Wind,
)

KM_PER_MILE = 1.609344
MM_PER_INCH = 25.4
METRES_PER_MILE = 1609.344
INHG_PER_HPA = 0.029529983071445


def celsius_to_fahrenheit(value: Optional[float]) -> Optional[float]:
    return value * 9 / 5 + 32 if value is not None else None


def kmh_to_mph(value: Optional[float]) -> Optional[float]:
    return value / KM_PER_MILE if value is not None else None


def mm_to_inches(value: Optional[float]) -> Optional[float]:
    return value / MM_PER_INCH if value is not None else None


def metres_to_miles(value: Optional[float]) -> Optional[float]:
    return value / METRES_PER_MILE if value is not None else None


def hpa_to_inhg(value: Optional[float]) -> Optional[float]:
    return value * INHG_PER_HPA if value is not None else None


def _temperature(temperature: Temperature) -> None:
    temperature.temperature = celsius_to_fahrenheit(temperature.temperature)
    temperature.apparent_temperature = celsius_to_fahrenheit(temperature.apparent_temperature)


def _wind(wind: Wind) -> None:
    wind.speed = kmh_to_mph(wind.speed)
    wind.gusts = kmh_to_mph(wind.gusts)


def _precipitation(precipitation: Optional[Precipitation]) -> None:
    if precipitation is None:
        return
    precipitation.total = mm_to_inches(precipitation.total)
    precipitation.rain = mm_to_inches(precipitation.rain)
    precipitation.snow = mm_to_inches(precipitation.snow)


def _half_day(half_day: HalfDay) -> None:
    _temperature(half_day.temperature)
    _precipitation(half_day.precipitation)


def _current(current: Current) -> None:
    _temperature(current.temperature)
    _wind(current.wind)
    current.dew_point = celsius_to_fahrenheit(current.dew_point)
    current.pressure = hpa_to_inhg(current.pressure)
    current.visibility = metres_to_miles(current.visibility)


def _hourly(hourly: Hourly) -> None:
    _temperature(hourly.temperature)
    _wind(hourly.wind)
    _precipitation(hourly.precipitation)
    hourly.dew_point = celsius_to_fahrenheit(hourly.dew_point)
    hourly.pressure = hpa_to_inhg(hourly.pressure)
    hourly.visibility = metres_to_miles(hourly.visibility)


def _normals(normals: Normals) -> None:
    normals.daytime_temperature = celsius_to_fahrenheit(normals.daytime_temperature)
    normals.nighttime_temperature = celsius_to_fahrenheit(normals.nighttime_temperature)


def to_unit_system(result: WeatherResult, units: UnitSystem) -> WeatherResult:
    """Return `result` expressed in `units`; the input is never modified.

    Minutely precipitation intensity stays in mm/h, the unit every provider
    reports it in.
    """
    units = UnitSystem(units)
    if units == result.units:
        return result
    if result.units != UnitSystem.METRIC:
        raise ValueError(f"Cannot convert from {result.units.value} results")

    converted = copy.deepcopy(result)
    if converted.current is not None:
        _current(converted.current)
    for daily in converted.daily_forecast:
        _half_day(daily.day)
        _half_day(daily.night)
    for hourly in converted.hourly_forecast:
        _hourly(hourly)
    if converted.normals is not None:
        _normals(converted.normals)
    converted.units = units
    return converted
