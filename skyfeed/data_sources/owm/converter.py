"""Converts OpenWeatherMap One Call and air pollution results into the domain model."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from skyfeed.data_sources.converters import epoch_to_datetime, minute_intervals, moon_phase_angle, ms_to_kmh
from skyfeed.data_sources.owm.models import (
    OwmAirPollutionResult,
    OwmLocationResult,
    OwmOneCallAlert,
    OwmOneCallCurrent,
    OwmOneCallDaily,
    OwmOneCallHourly,
    OwmOneCallMinutely,
    OwmOneCallResult,
    OwmOneCallWeather,
)
from skyfeed.domain import (
    UV,
    AirQuality,
    Alert,
    Astro,
    Current,
    Daily,
    HalfDay,
    Hourly,
    Location,
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

# Condition ids outside the usual ranges.
WEATHER_CODE_BY_ID = {
    511: WeatherCode.SLEET,
    701: WeatherCode.FOG,
    711: WeatherCode.HAZE,
    721: WeatherCode.HAZE,
    731: WeatherCode.WIND,
    741: WeatherCode.FOG,
    751: WeatherCode.WIND,
    761: WeatherCode.HAZE,
    762: WeatherCode.HAZE,
    771: WeatherCode.WIND,
    781: WeatherCode.WIND,
    800: WeatherCode.CLEAR,
    801: WeatherCode.PARTLY_CLOUDY,
    802: WeatherCode.PARTLY_CLOUDY,
    803: WeatherCode.CLOUDY,
    804: WeatherCode.CLOUDY,
}


def get_weather_code(condition_id: Optional[int]) -> Optional[WeatherCode]:
    """Map an OWM condition id (https://openweathermap.org/weather-conditions)."""
    if condition_id is None:
        return None
    if condition_id in WEATHER_CODE_BY_ID:
        return WEATHER_CODE_BY_ID[condition_id]
    if 200 <= condition_id < 300:
        return WeatherCode.THUNDERSTORM
    if 300 <= condition_id < 600:
        return WeatherCode.RAIN
    if 611 <= condition_id <= 616:
        return WeatherCode.SLEET
    if 600 <= condition_id < 700:
        return WeatherCode.SNOW
    return None


def _first_weather(weather: Optional[List[OwmOneCallWeather]]) -> Optional[OwmOneCallWeather]:
    return weather[0] if weather else None


def _text_and_code(weather: Optional[List[OwmOneCallWeather]]):
    first = _first_weather(weather)
    if first is None:
        return None, None
    text = first.description[:1].upper() + first.description[1:] if first.description else None
    return text, get_weather_code(first.id)


def convert(
    one_call_result: OwmOneCallResult,
    air_pollution_result: Optional[OwmAirPollutionResult] = None,
) -> WeatherResult:
    if not one_call_result.daily or not one_call_result.hourly:
        raise DataUnavailable("OpenWeatherMap returned no daily or hourly forecast")
    air_quality = get_air_quality(air_pollution_result)
    return WeatherResult(
        current=get_current(one_call_result.current),
        daily_forecast=get_daily_forecast(one_call_result.daily),
        hourly_forecast=get_hourly_forecast(one_call_result.hourly, air_quality),
        minutely_forecast=get_minutely_forecast(one_call_result.minutely),
        alert_list=get_alert_list(one_call_result.alerts),
    )


def convert_secondary(
    one_call_result: Optional[OwmOneCallResult],
    air_pollution_result: Optional[OwmAirPollutionResult],
    *,
    with_minutely: bool,
    with_alerts: bool,
) -> SecondaryWeatherResult:
    return SecondaryWeatherResult(
        minutely_forecast=(
            get_minutely_forecast(one_call_result.minutely) if with_minutely and one_call_result else None
        ),
        alert_list=get_alert_list(one_call_result.alerts) if with_alerts and one_call_result else None,
        air_quality=get_air_quality(air_pollution_result) if air_pollution_result is not None else None,
    )


def get_current(result: Optional[OwmOneCallCurrent]) -> Optional[Current]:
    if result is None:
        return None
    text, code = _text_and_code(result.weather)
    return Current(
        weather_text=text,
        weather_code=code,
        temperature=Temperature(temperature=result.temp, apparent_temperature=result.feels_like),
        wind=Wind(degree=result.wind_deg, speed=ms_to_kmh(result.wind_speed), gusts=ms_to_kmh(result.wind_gust)),
        uv=UV(index=result.uvi),
        relative_humidity=result.humidity,
        dew_point=result.dew_point,
        pressure=result.pressure,
        cloud_cover=result.clouds,
        visibility=result.visibility,
    )


def get_daily_forecast(daily_result: List[OwmOneCallDaily]) -> List[Daily]:
    out: List[Daily] = []
    for result in daily_result:
        text, code = _text_and_code(result.weather)
        temp = result.temp
        feels = result.feels_like
        out.append(
            Daily(
                date=epoch_to_datetime(result.dt),
                day=HalfDay(
                    weather_text=text,
                    weather_code=code,
                    temperature=Temperature(
                        temperature=temp.day if temp else None,
                        apparent_temperature=feels.day if feels else None,
                    ),
                ),
                night=HalfDay(
                    weather_text=text,
                    weather_code=code,
                    temperature=Temperature(
                        temperature=temp.night if temp else None,
                        apparent_temperature=feels.night if feels else None,
                    ),
                ),
                sun=Astro(rise_date=epoch_to_datetime(result.sunrise), set_date=epoch_to_datetime(result.sunset)),
                moon=Astro(rise_date=epoch_to_datetime(result.moonrise), set_date=epoch_to_datetime(result.moonset)),
                moon_phase=MoonPhase(angle=moon_phase_angle(result.moon_phase)),
                uv=UV(index=result.uvi),
            )
        )
    return out


def get_hourly_forecast(
    hourly_result: List[OwmOneCallHourly],
    air_quality: Optional[Dict[dt.datetime, AirQuality]] = None,
) -> List[Hourly]:
    out: List[Hourly] = []
    for result in hourly_result:
        date = epoch_to_datetime(result.dt)
        text, code = _text_and_code(result.weather)
        rain = result.rain.cumul1h if result.rain else None
        snow = result.snow.cumul1h if result.snow else None
        known = [p for p in (rain, snow) if p is not None]
        out.append(
            Hourly(
                date=date,
                weather_text=text,
                weather_code=code,
                temperature=Temperature(temperature=result.temp, apparent_temperature=result.feels_like),
                precipitation=Precipitation(total=sum(known) if known else None, rain=rain, snow=snow),
                precipitation_probability=PrecipitationProbability(
                    total=result.pop * 100 if result.pop is not None else None
                ),
                wind=Wind(
                    degree=result.wind_deg,
                    speed=ms_to_kmh(result.wind_speed),
                    gusts=ms_to_kmh(result.wind_gust),
                ),
                uv=UV(index=result.uvi),
                air_quality=(air_quality or {}).get(date),
                relative_humidity=result.humidity,
                dew_point=result.dew_point,
                pressure=result.pressure,
                cloud_cover=result.clouds,
                visibility=result.visibility,
            )
        )
    return out


def get_minutely_forecast(minutely_result: Optional[List[OwmOneCallMinutely]]) -> Optional[List[Minutely]]:
    if not minutely_result:
        return None
    dates = [epoch_to_datetime(m.dt) for m in minutely_result]
    intervals = minute_intervals(dates)
    return [
        Minutely(date=date, minute_interval=interval, precipitation_intensity=m.precipitation)
        for m, date, interval in zip(minutely_result, dates, intervals)
    ]


def get_alert_list(alert_list: Optional[List[OwmOneCallAlert]]) -> Optional[List[Alert]]:
    """OWM alerts carry no severity, so they all land in the lowest priority bucket."""
    if not alert_list:
        return None
    return [
        Alert(
            alert_id=make_alert_id(alert.event, None, alert.start),
            start_date=epoch_to_datetime(alert.start),
            end_date=epoch_to_datetime(alert.end),
            description=alert.event or "",
            content=alert.description,
            priority=alert_priority(None),
        )
        for alert in alert_list
    ]


def get_air_quality(result: Optional[OwmAirPollutionResult]) -> Optional[Dict[dt.datetime, AirQuality]]:
    if result is None or not result.items:
        return None
    out: Dict[dt.datetime, AirQuality] = {}
    for item in result.items:
        components = item.components
        if components is None:
            continue
        out[epoch_to_datetime(item.dt)] = AirQuality(
            pm25=components.pm2_5,
            pm10=components.pm10,
            so2=components.so2,
            no2=components.no2,
            o3=components.o3,
            co=components.co,
        )
    return out or None


def convert_locations(results: List[OwmLocationResult], language: Optional[str] = None) -> List[Location]:
    out: List[Location] = []
    for result in results:
        name = result.name
        if language and result.local_names:
            name = result.local_names.get(language, name)
        out.append(
            Location(
                latitude=result.lat,
                longitude=result.lon,
                country_code=result.country,
                city=name,
                province=result.state,
            )
        )
    return out
