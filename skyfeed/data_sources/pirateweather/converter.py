"""Converts PirateWeather forecast results into the canonical domain model."""

from __future__ import annotations

from typing import List, Optional

from skyfeed.data_sources.converters import (
    epoch_to_datetime,
    km_to_m,
    minute_intervals,
    moon_phase_angle,
    ratio_to_percent,
    ratio_to_rounded_percent,
)
from skyfeed.data_sources.pirateweather.models import (
    PirateWeatherAlert,
    PirateWeatherCurrently,
    PirateWeatherDaily,
    PirateWeatherForecastResult,
    PirateWeatherHourly,
    PirateWeatherMinutely,
)
from skyfeed.domain import (
    UV,
    Alert,
    Astro,
    Current,
    Daily,
    HalfDay,
    Hourly,
    Minutely,
    MoonPhase,
    Precipitation,
    PrecipitationProbability,
    SecondaryWeatherResult,
    Temperature,
    WeatherCode,
    WeatherResult,
    Wind,
    alert_priority,
    make_alert_id,
)
from skyfeed.exceptions import DataUnavailable

WEATHER_CODE_BY_ICON = {
    "rain": WeatherCode.RAIN,
    "sleet": WeatherCode.SLEET,
    "snow": WeatherCode.SNOW,
    "fog": WeatherCode.FOG,
    "wind": WeatherCode.WIND,
    "clear-day": WeatherCode.CLEAR,
    "clear-night": WeatherCode.CLEAR,
    "partly-cloudy-day": WeatherCode.PARTLY_CLOUDY,
    "partly-cloudy-night": WeatherCode.PARTLY_CLOUDY,
    "cloudy": WeatherCode.CLOUDY,
}


def get_weather_code(icon: Optional[str]) -> Optional[WeatherCode]:
    """Exact icon match; anything else is unknown (None)."""
    if icon is None:
        return None
    return WEATHER_CODE_BY_ICON.get(icon)


def convert(forecast_result: PirateWeatherForecastResult) -> WeatherResult:
    """Build a full WeatherResult.

    Raises DataUnavailable when daily or hourly data is missing, so that the
    caller keeps its cached data instead of storing a hollow forecast.
    """
    daily = forecast_result.daily.data if forecast_result.daily else None
    hourly = forecast_result.hourly.data if forecast_result.hourly else None
    if not daily or not hourly:
        raise DataUnavailable("PirateWeather returned no daily or hourly forecast")

    return WeatherResult(
        current=get_current(forecast_result.currently),
        daily_forecast=get_daily_forecast(daily),
        hourly_forecast=get_hourly_forecast(hourly),
        minutely_forecast=get_minutely_forecast(
            forecast_result.minutely.data if forecast_result.minutely else None
        ),
        alert_list=get_alert_list(forecast_result.alerts),
    )


def convert_secondary(forecast_result: PirateWeatherForecastResult) -> SecondaryWeatherResult:
    return SecondaryWeatherResult(
        minutely_forecast=get_minutely_forecast(
            forecast_result.minutely.data if forecast_result.minutely else None
        ),
        alert_list=get_alert_list(forecast_result.alerts),
    )


def get_current(result: Optional[PirateWeatherCurrently]) -> Optional[Current]:
    if result is None:
        return None
    return Current(
        weather_text=result.summary,
        weather_code=get_weather_code(result.icon),
        temperature=Temperature(
            temperature=result.temperature,
            apparent_temperature=result.apparentTemperature,
        ),
        wind=Wind(degree=result.windBearing, speed=result.windSpeed, gusts=result.windGust),
        uv=UV(index=result.uvIndex),
        relative_humidity=ratio_to_percent(result.humidity),
        dew_point=result.dewPoint,
        pressure=result.pressure,
        cloud_cover=ratio_to_rounded_percent(result.cloudCover),
        visibility=km_to_m(result.visibility),
    )


def get_daily_forecast(daily_result: List[PirateWeatherDaily]) -> List[Daily]:
    out: List[Daily] = []
    for result in daily_result:
        # The provider does not split day and night narratively: both halves
        # share text and code. temperatureLow/High are forward-looking.
        out.append(
            Daily(
                date=epoch_to_datetime(result.time),
                day=HalfDay(
                    weather_text=result.summary,
                    weather_code=get_weather_code(result.icon),
                    temperature=Temperature(
                        temperature=result.temperatureHigh,
                        apparent_temperature=result.apparentTemperatureHigh,
                    ),
                ),
                night=HalfDay(
                    weather_text=result.summary,
                    weather_code=get_weather_code(result.icon),
                    temperature=Temperature(
                        temperature=result.temperatureLow,
                        apparent_temperature=result.apparentTemperatureLow,
                    ),
                ),
                sun=Astro(
                    rise_date=epoch_to_datetime(result.sunriseTime),
                    set_date=epoch_to_datetime(result.sunsetTime),
                ),
                moon=Astro(),
                moon_phase=MoonPhase(angle=moon_phase_angle(result.moonPhase)),
                uv=UV(index=result.uvIndex),
            )
        )
    return out


def get_precipitation(result: PirateWeatherHourly) -> Precipitation:
    """Attribute the intensity to rain or snow according to precipType, never both."""
    return Precipitation(
        total=result.precipAccumulation,
        rain=result.precipIntensity if result.precipType == "rain" else None,
        snow=result.precipIntensity if result.precipType == "snow" else None,
    )


def get_hourly_forecast(hourly_result: List[PirateWeatherHourly]) -> List[Hourly]:
    return [
        Hourly(
            date=epoch_to_datetime(result.time),
            weather_text=result.summary,
            weather_code=get_weather_code(result.icon),
            temperature=Temperature(
                temperature=result.temperature,
                apparent_temperature=result.apparentTemperature,
            ),
            precipitation=get_precipitation(result),
            precipitation_probability=PrecipitationProbability(total=ratio_to_percent(result.precipProbability)),
            wind=Wind(degree=result.windBearing, speed=result.windSpeed, gusts=result.windGust),
            uv=UV(index=result.uvIndex),
            relative_humidity=ratio_to_percent(result.humidity),
            dew_point=result.dewPoint,
            pressure=result.pressure,
            cloud_cover=ratio_to_rounded_percent(result.cloudCover),
            visibility=km_to_m(result.visibility),
        )
        for result in hourly_result
    ]


def get_minutely_forecast(minutely_result: Optional[List[PirateWeatherMinutely]]) -> Optional[List[Minutely]]:
    if not minutely_result:
        return None
    dates = [epoch_to_datetime(m.time) for m in minutely_result]
    intervals = minute_intervals(dates)
    return [
        Minutely(date=date, minute_interval=interval, precipitation_intensity=m.precipIntensity)
        for m, date, interval in zip(minutely_result, dates, intervals)
    ]


def get_alert_list(alert_list: Optional[List[PirateWeatherAlert]]) -> Optional[List[Alert]]:
    if not alert_list:
        return None
    return [
        Alert(
            alert_id=make_alert_id(alert.title, alert.severity, alert.time),
            start_date=epoch_to_datetime(alert.time),
            end_date=epoch_to_datetime(alert.expires),
            description=alert.title or "",
            content=alert.description,
            priority=alert_priority(alert.severity),
        )
        for alert in alert_list
    ]
