"""OpenWeatherMap source (One Call + air pollution)."""
from __future__ import annotations

import threading
from typing import List, Optional, Sequence

from skyfeed.config import settings as app_settings
from skyfeed.config_store import SourceConfigStore
from skyfeed.data_sources.base import SecondaryFeature
from skyfeed.data_sources import http
from skyfeed.data_sources.fanout import Feed, gather_feeds
from skyfeed.data_sources.keyed import ApiKeySource
from skyfeed.data_sources.owm import api, converter
from skyfeed.data_sources.owm.models import OwmAirPollutionResult
from skyfeed.domain import Location, SecondaryWeatherResult, WeatherResult
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="owm_service")


class OwmService(ApiKeySource):
    """Main, secondary, reverse-geocoding and search source."""

    id = "owm"
    name = "OpenWeatherMap"

    supported_features_in_main = [
        SecondaryFeature.MINUTELY,
        SecondaryFeature.ALERT,
        SecondaryFeature.AIR_QUALITY,
    ]
    supported_features = [
        SecondaryFeature.MINUTELY,
        SecondaryFeature.ALERT,
        SecondaryFeature.AIR_QUALITY,
    ]

    def __init__(self, config: SourceConfigStore, settings=None) -> None:
        self.settings = settings or app_settings
        super().__init__(config, default_api_key=self.settings.owm_api_key)

    def _language(self, language: Optional[str]) -> str:
        return language or self.settings.default_language

    def request_weather(
        self,
        location: Location,
        ignore_features: Sequence[SecondaryFeature] = (),
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> WeatherResult:
        api_key = self.require_api_key()
        lat, lon = location.latitude, location.longitude
        lang = self._language(language)
        version = self.settings.owm_one_call_version
        session = http.open_session()

        feeds = {
            "one_call": Feed.required(
                lambda: api.get_one_call(version, api_key, lat, lon, lang=lang, session=session)
            ),
        }
        if SecondaryFeature.AIR_QUALITY not in ignore_features:
            feeds["air_pollution"] = Feed.optional(
                lambda: api.get_air_pollution(api_key, lat, lon, session=session), OwmAirPollutionResult
            )
        else:
            feeds["air_pollution"] = Feed.skipped(OwmAirPollutionResult)

        logger.info("Requesting OpenWeatherMap weather", extra={"latitude": lat, "longitude": lon})
        results = gather_feeds(feeds, cancel_event=cancel_event, session=session, thread_name_prefix="owm")
        weather = converter.convert(results["one_call"], results["air_pollution"])
        # One Call has no switch for these blocks; drop them here instead.
        if SecondaryFeature.MINUTELY in ignore_features:
            weather.minutely_forecast = None
        if SecondaryFeature.ALERT in ignore_features:
            weather.alert_list = None
        return weather

    def is_feature_supported_for_location(self, feature: SecondaryFeature, location: Location) -> bool:
        return self.is_configured and feature in self.supported_features

    def request_secondary_weather(
        self,
        location: Location,
        requested_features: Sequence[SecondaryFeature],
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SecondaryWeatherResult:
        api_key = self.require_api_key()
        lat, lon = location.latitude, location.longitude
        lang = self._language(language)
        version = self.settings.owm_one_call_version
        session = http.open_session()
        with_minutely = SecondaryFeature.MINUTELY in requested_features
        with_alerts = SecondaryFeature.ALERT in requested_features

        feeds = {}
        if with_minutely or with_alerts:
            feeds["one_call"] = Feed.required(
                lambda: api.get_one_call(version, api_key, lat, lon, lang=lang, session=session)
            )
        if SecondaryFeature.AIR_QUALITY in requested_features:
            feeds["air_pollution"] = Feed.required(
                lambda: api.get_air_pollution(api_key, lat, lon, session=session)
            )

        results = gather_feeds(
            feeds, cancel_event=cancel_event, session=session, thread_name_prefix="owm-secondary"
        )
        return converter.convert_secondary(
            results.get("one_call"),
            results.get("air_pollution"),
            with_minutely=with_minutely,
            with_alerts=with_alerts,
        )

    def request_reverse_geocoding_location(
        self, location: Location, *, language: Optional[str] = None
    ) -> List[Location]:
        api_key = self.require_api_key()
        results = api.get_weather_location_by_geo_position(api_key, location.latitude, location.longitude)
        return converter.convert_locations(results, self._language(language))

    def request_location_search(self, query: str, *, language: Optional[str] = None) -> List[Location]:
        api_key = self.require_api_key()
        return converter.convert_locations(api.get_weather_location(api_key, query), self._language(language))
