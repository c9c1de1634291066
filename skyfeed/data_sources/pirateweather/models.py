"""Response models for the PirateWeather forecast endpoint.

Field names follow the provider's camelCase JSON; anything the provider may
omit is Optional.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class _PirateWeatherModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PirateWeatherCurrently(_PirateWeatherModel):
    time: Optional[int] = None
    summary: Optional[str] = None
    icon: Optional[str] = None
    precipIntensity: Optional[float] = None
    precipProbability: Optional[float] = None
    precipType: Optional[str] = None
    temperature: Optional[float] = None
    apparentTemperature: Optional[float] = None
    dewPoint: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    windSpeed: Optional[float] = None
    windGust: Optional[float] = None
    windBearing: Optional[float] = None
    cloudCover: Optional[float] = None
    uvIndex: Optional[float] = None
    visibility: Optional[float] = None
    ozone: Optional[float] = None


class PirateWeatherMinutely(_PirateWeatherModel):
    time: int
    precipIntensity: Optional[float] = None
    precipProbability: Optional[float] = None
    precipIntensityError: Optional[float] = None
    precipType: Optional[str] = None


class PirateWeatherHourly(_PirateWeatherModel):
    time: int
    summary: Optional[str] = None
    icon: Optional[str] = None
    precipIntensity: Optional[float] = None
    precipProbability: Optional[float] = None
    precipIntensityError: Optional[float] = None
    precipAccumulation: Optional[float] = None
    precipType: Optional[str] = None
    temperature: Optional[float] = None
    apparentTemperature: Optional[float] = None
    dewPoint: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    windSpeed: Optional[float] = None
    windGust: Optional[float] = None
    windBearing: Optional[float] = None
    cloudCover: Optional[float] = None
    uvIndex: Optional[float] = None
    visibility: Optional[float] = None
    ozone: Optional[float] = None


class PirateWeatherDaily(_PirateWeatherModel):
    time: int
    summary: Optional[str] = None
    icon: Optional[str] = None
    sunriseTime: Optional[int] = None
    sunsetTime: Optional[int] = None
    moonPhase: Optional[float] = None
    precipIntensity: Optional[float] = None
    precipIntensityMax: Optional[float] = None
    precipProbability: Optional[float] = None
    precipAccumulation: Optional[float] = None
    precipType: Optional[str] = None
    temperatureHigh: Optional[float] = None
    temperatureLow: Optional[float] = None
    apparentTemperatureHigh: Optional[float] = None
    apparentTemperatureLow: Optional[float] = None
    dewPoint: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    windSpeed: Optional[float] = None
    windGust: Optional[float] = None
    windBearing: Optional[float] = None
    cloudCover: Optional[float] = None
    uvIndex: Optional[float] = None
    visibility: Optional[float] = None


class PirateWeatherBlock(_PirateWeatherModel):
    summary: Optional[str] = None
    icon: Optional[str] = None


class PirateWeatherMinutelyBlock(PirateWeatherBlock):
    data: Optional[List[PirateWeatherMinutely]] = None


class PirateWeatherHourlyBlock(PirateWeatherBlock):
    data: Optional[List[PirateWeatherHourly]] = None


class PirateWeatherDailyBlock(PirateWeatherBlock):
    data: Optional[List[PirateWeatherDaily]] = None


class PirateWeatherAlert(_PirateWeatherModel):
    title: Optional[str] = None
    regions: Optional[List[str]] = None
    severity: Optional[str] = None
    time: int
    expires: int
    description: Optional[str] = None
    uri: Optional[str] = None


class PirateWeatherForecastResult(_PirateWeatherModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[str] = None
    offset: Optional[float] = None
    currently: Optional[PirateWeatherCurrently] = None
    minutely: Optional[PirateWeatherMinutelyBlock] = None
    hourly: Optional[PirateWeatherHourlyBlock] = None
    daily: Optional[PirateWeatherDailyBlock] = None
    alerts: Optional[List[PirateWeatherAlert]] = None
