"""Météo-France mobile web service endpoints."""
from __future__ import annotations

from typing import List, Optional

import requests

from skyfeed.data_sources import http
from skyfeed.data_sources.mf.models import (
    MfCurrentResult,
    MfEphemerisResult,
    MfForecastResult,
    MfNormalsResult,
    MfPlace,
    MfRainResult,
    MfWarningsResult,
)

MF_BASE_URL = "https://webservice.meteofrance.com/"
MF_USER_AGENT = "okhttp/4.9.2"
DATE_FORMAT = "iso"

# Reference point used to rank place search results.
SEARCH_ORIGIN = (48.86, 2.34)


def _headers() -> dict:
    return {"User-Agent": MF_USER_AGENT}


def get_current(
    lat: float, lon: float, lang: str, token: str, *, session: Optional[requests.Session] = None
) -> MfCurrentResult:
    return http.fetch(
        f"{MF_BASE_URL}v2/observation",
        MfCurrentResult,
        params={"lat": lat, "lon": lon, "lang": lang, "formatDate": DATE_FORMAT, "token": token},
        headers=_headers(),
        session=session,
    )


def get_forecast(
    lat: float, lon: float, token: str, *, session: Optional[requests.Session] = None
) -> MfForecastResult:
    return http.fetch(
        f"{MF_BASE_URL}forecast",
        MfForecastResult,
        params={"lat": lat, "lon": lon, "formatDate": DATE_FORMAT, "token": token},
        headers=_headers(),
        session=session,
    )


def get_ephemeris(
    lat: float, lon: float, lang: str, token: str, *, session: Optional[requests.Session] = None
) -> MfEphemerisResult:
    return http.fetch(
        f"{MF_BASE_URL}ephemeris",
        MfEphemerisResult,
        params={"lat": lat, "lon": lon, "lang": lang, "formatDate": DATE_FORMAT, "token": token},
        headers=_headers(),
        session=session,
    )


def get_rain(
    lat: float, lon: float, lang: str, token: str, *, session: Optional[requests.Session] = None
) -> MfRainResult:
    return http.fetch(
        f"{MF_BASE_URL}rain",
        MfRainResult,
        params={"lat": lat, "lon": lon, "lang": lang, "formatDate": DATE_FORMAT, "token": token},
        headers=_headers(),
        session=session,
    )


def get_warnings(
    domain: str, token: str, *, session: Optional[requests.Session] = None
) -> MfWarningsResult:
    """Vigilance bulletin for a French department (`domain` is the province code)."""
    return http.fetch(
        f"{MF_BASE_URL}v3/warning/full",
        MfWarningsResult,
        params={"domain": domain, "formatDate": DATE_FORMAT, "token": token},
        headers=_headers(),
        session=session,
    )


def get_normals(
    lat: float, lon: float, token: str, *, session: Optional[requests.Session] = None
) -> MfNormalsResult:
    return http.fetch(
        f"{MF_BASE_URL}v2/climate/normals",
        MfNormalsResult,
        params={"lat": lat, "lon": lon, "token": token},
        headers=_headers(),
        session=session,
    )


def get_places(
    query: str, token: str, *, session: Optional[requests.Session] = None
) -> List[MfPlace]:
    lat, lon = SEARCH_ORIGIN
    return http.fetch(
        f"{MF_BASE_URL}places",
        List[MfPlace],
        params={"q": query, "lat": lat, "lon": lon, "token": token},
        headers=_headers(),
        session=session,
    )
