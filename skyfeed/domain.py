"""Canonical, provider-independent weather representation.

Every provider converter produces these objects; nothing downstream needs to
know which provider answered. Units are fixed: °C, km/h, mm, hPa, metres for
visibility and percent for humidity, cloud cover and probabilities. Every
datetime is timezone-aware.
"""

from __future__ import annotations

import datetime as dt
import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class WeatherCode(str, Enum):
    """Closed set of weather conditions. Absence (None) means unknown."""
    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    RAIN = "rain"
    SNOW = "snow"
    WIND = "wind"
    FOG = "fog"
    HAZE = "haze"
    SLEET = "sleet"
    HAIL = "hail"
    THUNDER = "thunder"
    THUNDERSTORM = "thunderstorm"


class UnitSystem(str, Enum):
    """Unit system a result is expressed in."""
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclass(frozen=True)
class Location:
    """A query point. Owned by the caller; adapters never mutate it."""
    latitude: float
    longitude: float
    timezone: str = "UTC"
    country_code: Optional[str] = None
    province_code: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None


@dataclass
class Temperature:
    temperature: Optional[float] = None
    apparent_temperature: Optional[float] = None


@dataclass
class Wind:
    degree: Optional[float] = None
    speed: Optional[float] = None
    gusts: Optional[float] = None


@dataclass
class UV:
    index: Optional[float] = None


@dataclass
class Precipitation:
    total: Optional[float] = None
    rain: Optional[float] = None
    snow: Optional[float] = None


@dataclass
class PrecipitationProbability:
    total: Optional[float] = None
    rain: Optional[float] = None
    snow: Optional[float] = None
    ice: Optional[float] = None
    thunderstorm: Optional[float] = None


@dataclass
class AirQuality:
    """Pollutant concentrations in µg/m³."""
    pm25: Optional[float] = None
    pm10: Optional[float] = None
    so2: Optional[float] = None
    no2: Optional[float] = None
    o3: Optional[float] = None
    co: Optional[float] = None


@dataclass
class Astro:
    rise_date: Optional[dt.datetime] = None
    set_date: Optional[dt.datetime] = None


@dataclass
class MoonPhase:
    """Moon phase as an angle in degrees: 0 new moon, 180 full moon."""
    angle: Optional[int] = None


@dataclass
class HalfDay:
    """Daytime or nighttime half of a daily forecast."""
    weather_text: Optional[str] = None
    weather_code: Optional[WeatherCode] = None
    temperature: Temperature = field(default_factory=Temperature)
    precipitation: Optional[Precipitation] = None
    precipitation_probability: Optional[PrecipitationProbability] = None


@dataclass
class Current:
    weather_text: Optional[str] = None
    weather_code: Optional[WeatherCode] = None
    temperature: Temperature = field(default_factory=Temperature)
    wind: Wind = field(default_factory=Wind)
    uv: UV = field(default_factory=UV)
    relative_humidity: Optional[float] = None
    dew_point: Optional[float] = None
    pressure: Optional[float] = None
    cloud_cover: Optional[int] = None
    visibility: Optional[float] = None


@dataclass
class Daily:
    date: dt.datetime
    day: HalfDay = field(default_factory=HalfDay)
    night: HalfDay = field(default_factory=HalfDay)
    sun: Astro = field(default_factory=Astro)
    moon: Astro = field(default_factory=Astro)
    moon_phase: MoonPhase = field(default_factory=MoonPhase)
    uv: UV = field(default_factory=UV)


@dataclass
class Hourly:
    date: dt.datetime
    weather_text: Optional[str] = None
    weather_code: Optional[WeatherCode] = None
    temperature: Temperature = field(default_factory=Temperature)
    precipitation: Precipitation = field(default_factory=Precipitation)
    precipitation_probability: PrecipitationProbability = field(default_factory=PrecipitationProbability)
    wind: Wind = field(default_factory=Wind)
    uv: UV = field(default_factory=UV)
    air_quality: Optional[AirQuality] = None
    relative_humidity: Optional[float] = None
    dew_point: Optional[float] = None
    pressure: Optional[float] = None
    cloud_cover: Optional[int] = None
    visibility: Optional[float] = None


@dataclass
class Minutely:
    date: dt.datetime
    minute_interval: Optional[int] = None
    precipitation_intensity: Optional[float] = None


@dataclass
class Alert:
    alert_id: str
    start_date: Optional[dt.datetime]
    end_date: Optional[dt.datetime]
    description: str
    content: Optional[str] = None
    priority: int = 5
    color: Optional[str] = None


@dataclass
class Normals:
    """Climate normals for one month."""
    month: int
    daytime_temperature: Optional[float] = None
    nighttime_temperature: Optional[float] = None


@dataclass
class WeatherResult:
    """Unified result of one main-source weather query."""
    current: Optional[Current]
    daily_forecast: List[Daily]
    hourly_forecast: List[Hourly]
    minutely_forecast: Optional[List[Minutely]] = None
    alert_list: Optional[List[Alert]] = None
    normals: Optional[Normals] = None
    units: UnitSystem = UnitSystem.METRIC


@dataclass
class SecondaryWeatherResult:
    """Subset of weather data a secondary source can supply on its own.

    Fields left as None were not requested.
    """
    minutely_forecast: Optional[List[Minutely]] = None
    alert_list: Optional[List[Alert]] = None
    normals: Optional[Normals] = None
    air_quality: Optional[dict[dt.datetime, AirQuality]] = None


ALERT_PRIORITY_BY_SEVERITY = {
    "Extreme": 1,
    "Severe": 2,
    "Moderate": 3,
    "Minor": 4,
}
LOWEST_ALERT_PRIORITY = 5


def alert_priority(severity: Optional[str]) -> int:
    """Rank a severity string; lower numbers are more severe."""
    return ALERT_PRIORITY_BY_SEVERITY.get(severity, LOWEST_ALERT_PRIORITY)


def make_alert_id(title: Optional[str], severity: Optional[str], start: object) -> str:
    """Build a stable alert identifier from (title, severity, start).

    The same underlying alert fetched twice, in any process, yields the same id.
    """
    raw = "\x1f".join("" if part is None else str(part) for part in (title, severity, start))
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:16]
