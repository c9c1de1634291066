"""OpenWeatherMap endpoints: geocoding, One Call and air pollution."""
from __future__ import annotations

from typing import List, Optional

import requests

from skyfeed.data_sources import http
from skyfeed.data_sources.owm.models import OwmAirPollutionResult, OwmLocationResult, OwmOneCallResult

OWM_BASE_URL = "https://api.openweathermap.org/"

# Metric gives °C, m/s, metres and hPa.
OWM_UNITS = "metric"


def get_weather_location(
    apikey: str, q: str, *, session: Optional[requests.Session] = None
) -> List[OwmLocationResult]:
    return http.fetch(
        f"{OWM_BASE_URL}geo/1.0/direct",
        List[OwmLocationResult],
        params={"appid": apikey, "q": q},
        session=session,
    )


def get_weather_location_by_geo_position(
    apikey: str, lat: float, lon: float, *, session: Optional[requests.Session] = None
) -> List[OwmLocationResult]:
    return http.fetch(
        f"{OWM_BASE_URL}geo/1.0/reverse",
        List[OwmLocationResult],
        params={"appid": apikey, "lat": lat, "lon": lon},
        session=session,
    )


def get_one_call(
    version: str,
    apikey: str,
    lat: float,
    lon: float,
    *,
    units: str = OWM_UNITS,
    lang: str = "en",
    session: Optional[requests.Session] = None,
) -> OwmOneCallResult:
    """Current, 1h minutely, 48h hourly, daily forecast and government alerts."""
    return http.fetch(
        f"{OWM_BASE_URL}data/{version}/onecall",
        OwmOneCallResult,
        params={"appid": apikey, "lat": lat, "lon": lon, "units": units, "lang": lang},
        session=session,
    )


def get_air_pollution(
    apikey: str, lat: float, lon: float, *, session: Optional[requests.Session] = None
) -> OwmAirPollutionResult:
    return http.fetch(
        f"{OWM_BASE_URL}data/2.5/air_pollution/forecast",
        OwmAirPollutionResult,
        params={"appid": apikey, "lat": lat, "lon": lon},
        session=session,
    )
