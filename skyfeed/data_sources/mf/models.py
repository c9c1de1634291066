"""Response models for the Météo-France mobile web service.

All dates are requested with `formatDate=iso`, so they decode straight into
datetimes. Every endpoint model can be built empty: the aggregator uses the
empty instance as placeholder when an optional feed fails.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _MfModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MfGeometry(_MfModel):
    type: Optional[str] = None
    coordinates: Optional[List[float]] = None  # [lon, lat]


# --- v2/observation -----------------------------------------------------------

class MfCurrentGridded(_MfModel):
    time: Optional[dt.datetime] = None
    temperature: Optional[float] = Field(default=None, alias="T")
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    wind_icon: Optional[str] = None
    weather_icon: Optional[str] = None
    weather_description: Optional[str] = None


class MfCurrentProperties(_MfModel):
    timezone: Optional[str] = None
    gridded: Optional[MfCurrentGridded] = None


class MfCurrentResult(_MfModel):
    update_time: Optional[dt.datetime] = None
    geometry: Optional[MfGeometry] = None
    properties: Optional[MfCurrentProperties] = None


# --- forecast -----------------------------------------------------------------

class MfForecastHourly(_MfModel):
    time: dt.datetime
    temperature: Optional[float] = Field(default=None, alias="T")
    windchill: Optional[float] = Field(default=None, alias="T_windchill")
    relative_humidity: Optional[float] = None
    pressure_sea: Optional[float] = Field(default=None, alias="P_sea")
    wind_speed: Optional[float] = None
    wind_speed_gust: Optional[float] = None
    wind_direction: Optional[float] = None
    rain_1h: Optional[float] = None
    rain_3h: Optional[float] = None
    rain_6h: Optional[float] = None
    snow_1h: Optional[float] = None
    snow_3h: Optional[float] = None
    snow_6h: Optional[float] = None
    iso0: Optional[float] = None
    rain_snow_limit: Optional[float] = None
    total_cloud_cover: Optional[float] = None
    weather_icon: Optional[str] = None
    weather_description: Optional[str] = None


class MfForecastProbability(_MfModel):
    time: dt.datetime
    rain_hazard_3h: Optional[float] = None
    rain_hazard_6h: Optional[float] = None
    snow_hazard_3h: Optional[float] = None
    snow_hazard_6h: Optional[float] = None
    freezing_hazard: Optional[float] = None
    storm_hazard: Optional[float] = None


class MfForecastDaily(_MfModel):
    time: dt.datetime
    temperature_min: Optional[float] = Field(default=None, alias="T_min")
    temperature_max: Optional[float] = Field(default=None, alias="T_max")
    relative_humidity_min: Optional[float] = None
    relative_humidity_max: Optional[float] = None
    total_precipitation_24h: Optional[float] = None
    uv_index: Optional[float] = None
    daily_weather_icon: Optional[str] = None
    daily_weather_description: Optional[str] = None
    sunrise_time: Optional[dt.datetime] = None
    sunset_time: Optional[dt.datetime] = None


class MfForecastProperties(_MfModel):
    altitude: Optional[float] = None
    name: Optional[str] = None
    country: Optional[str] = None
    french_department: Optional[str] = None
    rain_product_available: Optional[int] = None
    timezone: Optional[str] = None
    insee: Optional[str] = None
    forecast: Optional[List[MfForecastHourly]] = None
    probability_forecast: Optional[List[MfForecastProbability]] = None
    daily_forecast: Optional[List[MfForecastDaily]] = None


class MfForecastResult(_MfModel):
    update_time: Optional[dt.datetime] = None
    geometry: Optional[MfGeometry] = None
    properties: Optional[MfForecastProperties] = None


# --- ephemeris ----------------------------------------------------------------

class MfEphemeris(_MfModel):
    moonrise_time: Optional[dt.datetime] = None
    moonset_time: Optional[dt.datetime] = None
    moon_phase: Optional[str] = None
    moon_phase_description: Optional[str] = None


class MfEphemerisProperties(_MfModel):
    ephemeris: Optional[MfEphemeris] = None


class MfEphemerisResult(_MfModel):
    properties: Optional[MfEphemerisProperties] = None


# --- rain ---------------------------------------------------------------------

class MfRainForecast(_MfModel):
    time: dt.datetime
    rain_intensity: Optional[int] = None
    rain_intensity_description: Optional[str] = None


class MfRainProperties(_MfModel):
    forecast: Optional[List[MfRainForecast]] = None


class MfRainResult(_MfModel):
    update_time: Optional[dt.datetime] = None
    properties: Optional[MfRainProperties] = None


# --- v3/warning/full ----------------------------------------------------------

class MfWarningTimelapsItem(_MfModel):
    begin_time: dt.datetime
    end_time: dt.datetime
    color_id: int


class MfWarningTimelaps(_MfModel):
    phenomenon_id: int
    timelaps_items: Optional[List[MfWarningTimelapsItem]] = None


class MfPhenomenonMaxColor(_MfModel):
    phenomenon_id: int
    phenomenon_max_color_id: int


class MfWarningText(_MfModel):
    phenomenon_id: Optional[int] = None
    text_items: Optional[List[str]] = None


class MfWarningsResult(_MfModel):
    update_time: Optional[dt.datetime] = None
    end_validity_time: Optional[dt.datetime] = None
    domain_id: Optional[str] = None
    color_max: Optional[int] = None
    timelaps: Optional[List[MfWarningTimelaps]] = None
    phenomenons_items: Optional[List[MfPhenomenonMaxColor]] = None
    consequences: Optional[List[MfWarningText]] = None
    advices: Optional[List[MfWarningText]] = None


# --- v2/climate/normals -------------------------------------------------------

class MfNormalsStats(_MfModel):
    month: int
    temperature_min: Optional[float] = Field(default=None, alias="T_min")
    temperature_max: Optional[float] = Field(default=None, alias="T_max")


class MfNormalsProperties(_MfModel):
    stats: Optional[List[MfNormalsStats]] = None


class MfNormalsResult(_MfModel):
    properties: Optional[MfNormalsProperties] = None


# --- places -------------------------------------------------------------------

class MfPlace(_MfModel):
    insee: Optional[str] = None
    name: Optional[str] = None
    lat: float
    lon: float
    country: Optional[str] = None
    admin: Optional[str] = None
    admin2: Optional[str] = None
    post_code: Optional[str] = Field(default=None, alias="postCode")
