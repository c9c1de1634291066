"""Converts Météo-France responses into the canonical domain model."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from skyfeed.data_sources.converters import ensure_aware, minute_intervals, ms_to_kmh, round_half_up
from skyfeed.data_sources.mf.models import (
    MfCurrentResult,
    MfEphemerisResult,
    MfForecastDaily,
    MfForecastHourly,
    MfForecastProbability,
    MfForecastResult,
    MfNormalsResult,
    MfPlace,
    MfRainResult,
    MfWarningsResult,
)
from skyfeed.domain import (
    UV,
    Alert,
    Astro,
    Current,
    Daily,
    HalfDay,
    Hourly,
    Location,
    Minutely,
    MoonPhase,
    Normals,
    Precipitation,
    PrecipitationProbability,
    SecondaryWeatherResult,
    Temperature,
    WeatherCode,
    WeatherResult,
    Wind,
    make_alert_id,
)
from skyfeed.exceptions import DataUnavailable

# Pictogram names without their day ("j") / night ("n") suffix.
WEATHER_CODE_BY_PICTO = {
    "p1": WeatherCode.CLEAR,
    "p2": WeatherCode.PARTLY_CLOUDY,
    "p3": WeatherCode.CLOUDY,
    "p4": WeatherCode.HAZE,
    "p5": WeatherCode.HAZE,
    "p6": WeatherCode.FOG,
    "p7": WeatherCode.FOG,
    "p8": WeatherCode.FOG,
    "p9": WeatherCode.RAIN,
    "p10": WeatherCode.RAIN,
    "p11": WeatherCode.RAIN,
    "p12": WeatherCode.RAIN,
    "p13": WeatherCode.RAIN,
    "p14": WeatherCode.RAIN,
    "p15": WeatherCode.RAIN,
    "p16": WeatherCode.THUNDERSTORM,
    "p17": WeatherCode.SNOW,
    "p18": WeatherCode.SNOW,
    "p19": WeatherCode.SNOW,
    "p20": WeatherCode.SLEET,
    "p21": WeatherCode.SLEET,
    "p22": WeatherCode.SLEET,
    "p23": WeatherCode.HAIL,
    "p24": WeatherCode.THUNDERSTORM,
    "p25": WeatherCode.THUNDERSTORM,
    "p26": WeatherCode.THUNDERSTORM,
    "p27": WeatherCode.THUNDERSTORM,
    "p28": WeatherCode.THUNDERSTORM,
    "p29": WeatherCode.THUNDERSTORM,
    "p30": WeatherCode.THUNDER,
    "p31": WeatherCode.WIND,
    "p32": WeatherCode.WIND,
}

# English descriptions returned by the ephemeris endpoint.
MOON_ANGLE_BY_PHASE = {
    "new moon": 0,
    "waxing crescent": 45,
    "first quarter": 90,
    "waxing gibbous": 135,
    "full moon": 180,
    "waning gibbous": 225,
    "last quarter": 270,
    "third quarter": 270,
    "waning crescent": 315,
}

# rain_intensity levels (1 dry .. 4 heavy) -> mm/h.
RAIN_INTENSITY_MM_H = {1: 0.0, 2: 1.0, 3: 4.0, 4: 10.0}

PHENOMENON_NAMES = {
    1: "Wind",
    2: "Rain-flood",
    3: "Thunderstorms",
    4: "Flood",
    5: "Snow-ice",
    6: "Heat wave",
    7: "Extreme cold",
    8: "Avalanches",
    9: "Waves-submersion",
}

# Vigilance colour id -> (severity label, priority, hex colour). Green means no warning.
WARNING_LEVELS = {
    2: ("Yellow", 3, "#fff600"),
    3: ("Orange", 2, "#ffb82b"),
    4: ("Red", 1, "#cc0000"),
}

PROBABILITY_WINDOW = dt.timedelta(hours=3)


def get_weather_code(icon: Optional[str]) -> Optional[WeatherCode]:
    """Map a pictogram such as "p3j" or "p3n"; unknown pictograms give None."""
    if not icon:
        return None
    base = icon[:-1] if icon[-1] in ("j", "n") else icon
    return WEATHER_CODE_BY_PICTO.get(base)


def get_wind_degree(direction: Optional[float]) -> Optional[float]:
    """-1 means variable direction."""
    if direction is None or direction < 0:
        return None
    return direction


def _zone(location: Location) -> dt.tzinfo:
    try:
        return ZoneInfo(location.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return dt.timezone.utc


def convert(
    location: Location,
    current_result: MfCurrentResult,
    forecast_result: MfForecastResult,
    ephemeris_result: MfEphemerisResult,
    rain_result: MfRainResult,
    warnings_result: MfWarningsResult,
    normals_result: MfNormalsResult,
) -> WeatherResult:
    """Merge the six Météo-France feeds into one WeatherResult.

    Empty placeholders for the optional feeds simply produce no minutely,
    alerts or normals.
    """
    properties = forecast_result.properties
    hourly = properties.forecast if properties else None
    daily = properties.daily_forecast if properties else None
    if not daily or not hourly:
        raise DataUnavailable("Météo-France returned no daily or hourly forecast")

    daily_forecast = get_daily_forecast(daily, ephemeris_result)
    return WeatherResult(
        current=get_current(current_result),
        daily_forecast=daily_forecast,
        hourly_forecast=get_hourly_forecast(hourly, properties.probability_forecast),
        minutely_forecast=get_minutely_forecast(rain_result),
        alert_list=get_warnings_list(warnings_result),
        normals=get_normals(location, normals_result, daily_forecast[0].date),
    )


def convert_secondary(
    location: Location,
    rain_result: Optional[MfRainResult],
    warnings_result: Optional[MfWarningsResult],
    normals_result: Optional[MfNormalsResult],
    today: Optional[dt.datetime] = None,
) -> SecondaryWeatherResult:
    """Only the feeds passed in are converted; None stays None."""
    return SecondaryWeatherResult(
        minutely_forecast=get_minutely_forecast(rain_result) if rain_result is not None else None,
        alert_list=get_warnings_list(warnings_result) if warnings_result is not None else None,
        normals=(
            get_normals(location, normals_result, today or dt.datetime.now(dt.timezone.utc))
            if normals_result is not None else None
        ),
    )


def get_current(current_result: MfCurrentResult) -> Optional[Current]:
    gridded = current_result.properties.gridded if current_result.properties else None
    if gridded is None:
        return None
    return Current(
        weather_text=gridded.weather_description,
        weather_code=get_weather_code(gridded.weather_icon),
        temperature=Temperature(temperature=gridded.temperature),
        wind=Wind(degree=get_wind_degree(gridded.wind_direction), speed=ms_to_kmh(gridded.wind_speed)),
    )


def get_daily_forecast(daily: List[MfForecastDaily], ephemeris_result: MfEphemerisResult) -> List[Daily]:
    ephemeris = ephemeris_result.properties.ephemeris if ephemeris_result.properties else None
    out: List[Daily] = []
    for i, result in enumerate(daily):
        # T_min is the early-morning low, so tonight's low is tomorrow's T_min.
        next_day = daily[i + 1] if i + 1 < len(daily) else None
        code = get_weather_code(result.daily_weather_icon)
        entry = Daily(
            date=ensure_aware(result.time),
            day=HalfDay(
                weather_text=result.daily_weather_description,
                weather_code=code,
                temperature=Temperature(temperature=result.temperature_max),
                precipitation=Precipitation(total=result.total_precipitation_24h),
            ),
            night=HalfDay(
                weather_text=result.daily_weather_description,
                weather_code=code,
                temperature=Temperature(temperature=next_day.temperature_min if next_day else None),
            ),
            sun=Astro(rise_date=ensure_aware(result.sunrise_time), set_date=ensure_aware(result.sunset_time)),
            uv=UV(index=result.uv_index),
        )
        if i == 0 and ephemeris is not None:
            entry.moon = Astro(
                rise_date=ensure_aware(ephemeris.moonrise_time),
                set_date=ensure_aware(ephemeris.moonset_time),
            )
            entry.moon_phase = MoonPhase(angle=get_moon_phase_angle(ephemeris.moon_phase))
        out.append(entry)
    return out


def get_moon_phase_angle(phase: Optional[str]) -> Optional[int]:
    if not phase:
        return None
    return MOON_ANGLE_BY_PHASE.get(phase.strip().lower())


def _index_probabilities(
    probabilities: Optional[List[MfForecastProbability]],
) -> List[MfForecastProbability]:
    return sorted(probabilities or [], key=lambda p: ensure_aware(p.time))


def _probability_at(
    probabilities: List[MfForecastProbability], when: dt.datetime
) -> Optional[MfForecastProbability]:
    """Latest 3-hour probability window covering `when`."""
    match = None
    for prob in probabilities:
        start = ensure_aware(prob.time)
        if start <= when < start + PROBABILITY_WINDOW:
            match = prob
        elif start > when:
            break
    return match


def get_precipitation_probability(prob: Optional[MfForecastProbability]) -> PrecipitationProbability:
    if prob is None:
        return PrecipitationProbability()
    parts = [prob.rain_hazard_3h, prob.snow_hazard_3h, prob.freezing_hazard, prob.storm_hazard]
    known = [p for p in parts if p is not None]
    return PrecipitationProbability(
        total=max(known) if known else None,
        rain=prob.rain_hazard_3h,
        snow=prob.snow_hazard_3h,
        ice=prob.freezing_hazard,
        thunderstorm=prob.storm_hazard,
    )


def get_precipitation(result: MfForecastHourly) -> Precipitation:
    known = [p for p in (result.rain_1h, result.snow_1h) if p is not None]
    return Precipitation(
        total=sum(known) if known else None,
        rain=result.rain_1h,
        snow=result.snow_1h,
    )


def get_hourly_forecast(
    hourly: List[MfForecastHourly],
    probabilities: Optional[List[MfForecastProbability]],
) -> List[Hourly]:
    indexed = _index_probabilities(probabilities)
    out: List[Hourly] = []
    for result in hourly:
        when = ensure_aware(result.time)
        out.append(
            Hourly(
                date=when,
                weather_text=result.weather_description,
                weather_code=get_weather_code(result.weather_icon),
                temperature=Temperature(temperature=result.temperature, apparent_temperature=result.windchill),
                precipitation=get_precipitation(result),
                precipitation_probability=get_precipitation_probability(_probability_at(indexed, when)),
                wind=Wind(
                    degree=get_wind_degree(result.wind_direction),
                    speed=ms_to_kmh(result.wind_speed),
                    gusts=ms_to_kmh(result.wind_speed_gust) if result.wind_speed_gust else None,
                ),
                relative_humidity=result.relative_humidity,
                pressure=result.pressure_sea,
                cloud_cover=(
                    round_half_up(result.total_cloud_cover) if result.total_cloud_cover is not None else None
                ),
            )
        )
    return out


def get_minutely_forecast(rain_result: MfRainResult) -> Optional[List[Minutely]]:
    forecast = rain_result.properties.forecast if rain_result.properties else None
    if not forecast:
        return None
    dates = [ensure_aware(item.time) for item in forecast]
    intervals = minute_intervals(dates)
    return [
        Minutely(
            date=date,
            minute_interval=interval,
            precipitation_intensity=RAIN_INTENSITY_MM_H.get(item.rain_intensity),
        )
        for item, date, interval in zip(forecast, dates, intervals)
    ]


def _phenomenon_texts(warnings_result: MfWarningsResult) -> Dict[int, str]:
    texts: Dict[int, List[str]] = {}
    for block in (warnings_result.consequences or []) + (warnings_result.advices or []):
        if block.phenomenon_id is None:
            continue
        texts.setdefault(block.phenomenon_id, []).extend(block.text_items or [])
    return {pid: "\n".join(items) for pid, items in texts.items() if items}


def get_warnings_list(warnings_result: MfWarningsResult) -> Optional[List[Alert]]:
    if not warnings_result.timelaps:
        return None
    texts = _phenomenon_texts(warnings_result)
    alerts: List[Alert] = []
    for timelaps in warnings_result.timelaps:
        title = PHENOMENON_NAMES.get(timelaps.phenomenon_id, f"Phenomenon {timelaps.phenomenon_id}")
        for item in timelaps.timelaps_items or []:
            level = WARNING_LEVELS.get(item.color_id)
            if level is None:
                continue
            severity, priority, color = level
            start = ensure_aware(item.begin_time)
            alerts.append(
                Alert(
                    alert_id=make_alert_id(title, severity, start.isoformat()),
                    start_date=start,
                    end_date=ensure_aware(item.end_time),
                    description=f"{title} ({severity})",
                    content=texts.get(timelaps.phenomenon_id),
                    priority=priority,
                    color=color,
                )
            )
    if not alerts:
        return None
    return sorted(alerts, key=lambda a: (a.priority, a.start_date))


def get_normals(location: Location, normals_result: MfNormalsResult, today: dt.datetime) -> Optional[Normals]:
    """Normals of the month `today` falls in, in the location's timezone."""
    stats = normals_result.properties.stats if normals_result.properties else None
    if not stats:
        return None
    month = ensure_aware(today).astimezone(_zone(location)).month
    for stat in stats:
        if stat.month == month:
            return Normals(
                month=month,
                daytime_temperature=stat.temperature_max,
                nighttime_temperature=stat.temperature_min,
            )
    return None


def convert_location(location: Optional[Location], forecast_result: MfForecastResult) -> Optional[Location]:
    """Named location from the forecast endpoint, keeping the queried coordinates."""
    properties = forecast_result.properties
    if properties is None:
        return None
    latitude, longitude = (location.latitude, location.longitude) if location else (None, None)
    coordinates = forecast_result.geometry.coordinates if forecast_result.geometry else None
    if latitude is None and coordinates and len(coordinates) >= 2:
        longitude, latitude = coordinates[0], coordinates[1]
    if latitude is None or longitude is None:
        return None
    country_code = properties.country.split("-")[0].strip() if properties.country else None
    return Location(
        latitude=latitude,
        longitude=longitude,
        timezone=properties.timezone or (location.timezone if location else "UTC"),
        country_code=country_code,
        province_code=properties.french_department,
        city=properties.name,
    )


def convert_places(places: List[MfPlace]) -> List[Location]:
    return [
        Location(
            latitude=place.lat,
            longitude=place.lon,
            timezone="Europe/Paris" if (place.country or "").upper() == "FR" else "UTC",
            country_code=place.country,
            province_code=place.admin2,
            city=place.name,
            province=place.admin,
        )
        for place in places
    ]
