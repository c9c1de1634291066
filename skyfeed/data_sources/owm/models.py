"""Response models for the OpenWeatherMap One Call, air pollution and geocoding APIs."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _OwmModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OwmOneCallWeather(_OwmModel):
    id: int
    main: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class OwmOneCallPrecipitation(_OwmModel):
    cumul1h: Optional[float] = Field(default=None, alias="1h")


class OwmOneCallCurrent(_OwmModel):
    dt: int
    sunrise: Optional[int] = None
    sunset: Optional[int] = None
    temp: Optional[float] = None
    feels_like: Optional[float] = None
    pressure: Optional[float] = None
    humidity: Optional[float] = None
    dew_point: Optional[float] = None
    clouds: Optional[int] = None
    uvi: Optional[float] = None
    visibility: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_gust: Optional[float] = None
    wind_deg: Optional[float] = None
    rain: Optional[OwmOneCallPrecipitation] = None
    snow: Optional[OwmOneCallPrecipitation] = None
    weather: Optional[List[OwmOneCallWeather]] = None


class OwmOneCallMinutely(_OwmModel):
    dt: int
    precipitation: Optional[float] = None


class OwmOneCallHourly(_OwmModel):
    dt: int
    temp: Optional[float] = None
    feels_like: Optional[float] = None
    pressure: Optional[int] = None
    humidity: Optional[int] = None
    dew_point: Optional[float] = None
    uvi: Optional[float] = None
    clouds: Optional[int] = None
    visibility: Optional[int] = None
    wind_speed: Optional[float] = None
    wind_gust: Optional[float] = None
    wind_deg: Optional[int] = None
    weather: Optional[List[OwmOneCallWeather]] = None
    pop: Optional[float] = None
    rain: Optional[OwmOneCallPrecipitation] = None
    snow: Optional[OwmOneCallPrecipitation] = None


class OwmOneCallDailyTemp(_OwmModel):
    day: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    night: Optional[float] = None
    eve: Optional[float] = None
    morn: Optional[float] = None


class OwmOneCallDailyFeelsLike(_OwmModel):
    day: Optional[float] = None
    night: Optional[float] = None
    eve: Optional[float] = None
    morn: Optional[float] = None


class OwmOneCallDaily(_OwmModel):
    dt: int
    sunrise: Optional[int] = None
    sunset: Optional[int] = None
    moonrise: Optional[int] = None
    moonset: Optional[int] = None
    moon_phase: Optional[float] = None
    summary: Optional[str] = None
    temp: Optional[OwmOneCallDailyTemp] = None
    feels_like: Optional[OwmOneCallDailyFeelsLike] = None
    pressure: Optional[float] = None
    humidity: Optional[float] = None
    dew_point: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_gust: Optional[float] = None
    wind_deg: Optional[float] = None
    weather: Optional[List[OwmOneCallWeather]] = None
    clouds: Optional[int] = None
    pop: Optional[float] = None
    rain: Optional[float] = None
    snow: Optional[float] = None
    uvi: Optional[float] = None


class OwmOneCallAlert(_OwmModel):
    sender_name: Optional[str] = None
    event: Optional[str] = None
    start: int
    end: int
    description: Optional[str] = None
    tags: Optional[List[str]] = None


class OwmOneCallResult(_OwmModel):
    lat: Optional[float] = None
    lon: Optional[float] = None
    timezone: Optional[str] = None
    timezone_offset: Optional[int] = None
    current: Optional[OwmOneCallCurrent] = None
    minutely: Optional[List[OwmOneCallMinutely]] = None
    hourly: Optional[List[OwmOneCallHourly]] = None
    daily: Optional[List[OwmOneCallDaily]] = None
    alerts: Optional[List[OwmOneCallAlert]] = None


class OwmAirPollutionMain(_OwmModel):
    aqi: Optional[int] = None


class OwmAirPollutionComponents(_OwmModel):
    co: Optional[float] = None
    no: Optional[float] = None
    no2: Optional[float] = None
    o3: Optional[float] = None
    so2: Optional[float] = None
    pm2_5: Optional[float] = None
    pm10: Optional[float] = None
    nh3: Optional[float] = None


class OwmAirPollution(_OwmModel):
    dt: int
    main: Optional[OwmAirPollutionMain] = None
    components: Optional[OwmAirPollutionComponents] = None


class OwmAirPollutionResult(_OwmModel):
    items: Optional[List[OwmAirPollution]] = Field(default=None, alias="list")


class OwmLocationResult(_OwmModel):
    name: Optional[str] = None
    local_names: Optional[Dict[str, str]] = None
    lat: float
    lon: float
    country: Optional[str] = None
    state: Optional[str] = None
