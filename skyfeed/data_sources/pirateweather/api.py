"""PirateWeather HTTP API (Dark Sky compatible)."""
from __future__ import annotations

from typing import Iterable, Optional

import requests

from skyfeed.data_sources import http
from skyfeed.data_sources.pirateweather.models import PirateWeatherForecastResult

PIRATE_WEATHER_BASE_URL = "https://api.pirateweather.net/"

# Our canonical unit system maps onto PirateWeather's "ca" set (°C, km/h, km, hPa).
PIRATE_WEATHER_UNITS = "ca"


def get_forecast(
    api_key: str,
    latitude: float,
    longitude: float,
    *,
    units: str = PIRATE_WEATHER_UNITS,
    lang: str = "en",
    exclude: Optional[Iterable[str]] = None,
    session: Optional[requests.Session] = None,
) -> PirateWeatherForecastResult:
    """Current, minutely, hourly, daily and alerts in one call."""
    url = f"{PIRATE_WEATHER_BASE_URL}forecast/{api_key}/{latitude},{longitude}"
    params = {"units": units, "lang": lang}
    blocks = sorted(set(exclude or ()))
    if blocks:
        params["exclude"] = ",".join(blocks)
    return http.fetch(
        url, PirateWeatherForecastResult, params=params, path_secrets=(api_key,), session=session
    )
