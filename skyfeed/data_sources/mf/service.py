"""Météo-France source.

A main weather query fans out to six endpoints in parallel: current,
forecast and ephemeris are mandatory; rain (minutely), warnings (alerts) and
normals are optional and fall back to empty results when they fail or are
not wanted.
"""
from __future__ import annotations

import threading
from typing import Dict, List, Optional, Sequence

from skyfeed.config import settings as app_settings
from skyfeed.config_store import SourceConfigStore
from skyfeed.data_sources.base import SecondaryFeature
from skyfeed.data_sources import http
from skyfeed.data_sources.fanout import Feed, gather_feeds
from skyfeed.data_sources.mf import api, converter
from skyfeed.data_sources.mf.models import MfNormalsResult, MfRainResult, MfWarningsResult
from skyfeed.data_sources.mf.token import resolve_token
from skyfeed.domain import Location, SecondaryWeatherResult, WeatherResult
from skyfeed.exceptions import AuthenticationMissing
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="mf_service")

WSFT_KEY_PREFERENCE = "wsft_key"
# Moon phase descriptions are only decodable in English.
EPHEMERIS_LANGUAGE = "en"


def is_warnings_eligible(location: Location) -> bool:
    """Vigilance bulletins exist only for French departments."""
    return (
        bool(location.country_code)
        and location.country_code.upper() == "FR"
        and bool(location.province_code)
    )


def is_france(location: Location) -> bool:
    return bool(location.country_code) and location.country_code.upper() == "FR"


class MfService:
    """Main, secondary, reverse-geocoding, search and configurable source."""

    id = "mf"
    name = "Météo-France"
    attribution = "Météo-France (Etalab)"

    supported_features_in_main = [
        SecondaryFeature.MINUTELY,
        SecondaryFeature.ALERT,
        SecondaryFeature.NORMALS,
    ]
    supported_features = [
        SecondaryFeature.MINUTELY,
        SecondaryFeature.ALERT,
        SecondaryFeature.NORMALS,
    ]

    def __init__(self, config: SourceConfigStore, settings=None) -> None:
        self.config = config
        self.settings = settings or app_settings

    # CONFIG

    @property
    def wsft_key(self) -> str:
        return self.config.get_string(WSFT_KEY_PREFERENCE, "") or ""

    def get_token(self) -> str:
        return resolve_token(self.wsft_key, self.settings.mf_wsft_key, self.settings.mf_jwt_key)

    @property
    def is_configured(self) -> bool:
        return bool(self.get_token())

    def get_preferences(self) -> Dict[str, str]:
        return {WSFT_KEY_PREFERENCE: self.wsft_key}

    def set_preference(self, key: str, value: str) -> None:
        if key != WSFT_KEY_PREFERENCE:
            raise KeyError(f"Unknown preference '{key}' for {self.id}")
        self.config.put_string(WSFT_KEY_PREFERENCE, value)

    def _require_token(self) -> str:
        token = self.get_token()
        if not token:
            raise AuthenticationMissing("No Météo-France key configured")
        return token

    def _language(self, language: Optional[str]) -> str:
        return language or self.settings.default_language

    # MAIN WEATHER SOURCE

    def request_weather(
        self,
        location: Location,
        ignore_features: Sequence[SecondaryFeature] = (),
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> WeatherResult:
        """Fetch all feeds concurrently, then convert once everything resolved."""
        token = self._require_token()
        lang = self._language(language)
        lat, lon = location.latitude, location.longitude
        session = http.open_session()

        feeds = {
            "current": Feed.required(lambda: api.get_current(lat, lon, lang, token, session=session)),
            "forecast": Feed.required(lambda: api.get_forecast(lat, lon, token, session=session)),
            "ephemeris": Feed.required(
                lambda: api.get_ephemeris(lat, lon, EPHEMERIS_LANGUAGE, token, session=session)
            ),
        }
        if SecondaryFeature.MINUTELY not in ignore_features:
            feeds["rain"] = Feed.optional(
                lambda: api.get_rain(lat, lon, lang, token, session=session), MfRainResult
            )
        else:
            feeds["rain"] = Feed.skipped(MfRainResult)

        if SecondaryFeature.ALERT not in ignore_features and is_warnings_eligible(location):
            feeds["warnings"] = Feed.optional(
                lambda: api.get_warnings(location.province_code, token, session=session), MfWarningsResult
            )
        else:
            feeds["warnings"] = Feed.skipped(MfWarningsResult)

        # TODO: normals only change monthly; fetch them once a month per location.
        if SecondaryFeature.NORMALS not in ignore_features:
            feeds["normals"] = Feed.optional(
                lambda: api.get_normals(lat, lon, token, session=session), MfNormalsResult
            )
        else:
            feeds["normals"] = Feed.skipped(MfNormalsResult)

        logger.info(
            "Requesting Météo-France weather",
            extra={
                "latitude": lat,
                "longitude": lon,
                "feeds": [name for name, feed in feeds.items() if feed.call is not feed.placeholder_factory],
            },
        )
        results = gather_feeds(feeds, cancel_event=cancel_event, session=session, thread_name_prefix="mf")
        return converter.convert(
            location,
            results["current"],
            results["forecast"],
            results["ephemeris"],
            results["rain"],
            results["warnings"],
            results["normals"],
        )

    # SECONDARY WEATHER SOURCE

    def is_feature_supported_for_location(self, feature: SecondaryFeature, location: Location) -> bool:
        if not self.is_configured:
            return False
        if feature == SecondaryFeature.MINUTELY:
            return is_france(location)
        if feature == SecondaryFeature.ALERT:
            return is_warnings_eligible(location)
        return feature == SecondaryFeature.NORMALS

    def request_secondary_weather(
        self,
        location: Location,
        requested_features: Sequence[SecondaryFeature],
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SecondaryWeatherResult:
        """Requested feeds are the point of the call here, so their failures propagate."""
        token = self._require_token()
        lang = self._language(language)
        lat, lon = location.latitude, location.longitude
        session = http.open_session()

        feeds = {}
        if SecondaryFeature.MINUTELY in requested_features:
            feeds["rain"] = Feed.required(lambda: api.get_rain(lat, lon, lang, token, session=session))
        if SecondaryFeature.ALERT in requested_features and is_warnings_eligible(location):
            feeds["warnings"] = Feed.required(
                lambda: api.get_warnings(location.province_code, token, session=session)
            )
        if SecondaryFeature.NORMALS in requested_features:
            feeds["normals"] = Feed.required(lambda: api.get_normals(lat, lon, token, session=session))

        results = gather_feeds(
            feeds, cancel_event=cancel_event, session=session, thread_name_prefix="mf-secondary"
        )
        warnings = results.get("warnings")
        if warnings is None and SecondaryFeature.ALERT in requested_features:
            warnings = MfWarningsResult()
        return converter.convert_secondary(
            location,
            results.get("rain"),
            warnings,
            results.get("normals"),
        )

    # LOCATIONS

    def request_reverse_geocoding_location(
        self, location: Location, *, language: Optional[str] = None
    ) -> List[Location]:
        token = self._require_token()
        forecast = api.get_forecast(location.latitude, location.longitude, token)
        resolved = converter.convert_location(location, forecast)
        return [resolved] if resolved else []

    def request_location_search(self, query: str, *, language: Optional[str] = None) -> List[Location]:
        token = self._require_token()
        return converter.convert_places(api.get_places(query, token))
