"""PirateWeather source: a single forecast call feeds main and secondary data."""
from __future__ import annotations

import threading
from typing import List, Optional, Sequence

from skyfeed.config import settings as app_settings
from skyfeed.config_store import SourceConfigStore
from skyfeed.data_sources.base import SecondaryFeature
from skyfeed.data_sources import http
from skyfeed.data_sources.fanout import Feed, gather_feeds
from skyfeed.data_sources.keyed import ApiKeySource
from skyfeed.data_sources.pirateweather import api, converter
from skyfeed.domain import Location, SecondaryWeatherResult, WeatherResult
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="pirateweather_service")

# Forecast blocks to drop from the response for each ignored feature.
EXCLUDE_BLOCK_BY_FEATURE = {
    SecondaryFeature.MINUTELY: "minutely",
    SecondaryFeature.ALERT: "alerts",
}


class PirateWeatherService(ApiKeySource):
    """Main and secondary PirateWeather source."""

    id = "pirateweather"
    name = "PirateWeather"

    supported_features_in_main = [SecondaryFeature.MINUTELY, SecondaryFeature.ALERT]
    supported_features = [SecondaryFeature.MINUTELY, SecondaryFeature.ALERT]

    def __init__(self, config: SourceConfigStore, settings=None) -> None:
        self.settings = settings or app_settings
        super().__init__(config, default_api_key=self.settings.pirateweather_api_key)

    def _language(self, language: Optional[str]) -> str:
        return language or self.settings.default_language

    def _fetch_forecast(
        self,
        api_key: str,
        location: Location,
        language: Optional[str],
        exclude: List[str],
        cancel_event: Optional[threading.Event],
    ):
        # One call, run on its own session so a cancelled query can abandon it.
        session = http.open_session()
        feeds = {
            "forecast": Feed.required(
                lambda: api.get_forecast(
                    api_key,
                    location.latitude,
                    location.longitude,
                    lang=self._language(language),
                    exclude=exclude,
                    session=session,
                )
            )
        }
        results = gather_feeds(
            feeds, cancel_event=cancel_event, session=session, thread_name_prefix="pirateweather"
        )
        return results["forecast"]

    def request_weather(
        self,
        location: Location,
        ignore_features: Sequence[SecondaryFeature] = (),
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> WeatherResult:
        """Fetch and convert a full forecast from a single call."""
        api_key = self.require_api_key()
        exclude = [EXCLUDE_BLOCK_BY_FEATURE[f] for f in ignore_features if f in EXCLUDE_BLOCK_BY_FEATURE]
        logger.info(
            "Requesting PirateWeather forecast",
            extra={"latitude": location.latitude, "longitude": location.longitude, "exclude": exclude},
        )
        result = self._fetch_forecast(api_key, location, language, exclude, cancel_event)
        return converter.convert(result)

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
        exclude: List[str] = ["currently", "hourly", "daily"]
        exclude += [
            block for feature, block in EXCLUDE_BLOCK_BY_FEATURE.items() if feature not in requested_features
        ]
        result = self._fetch_forecast(api_key, location, language, exclude, cancel_event)
        secondary = converter.convert_secondary(result)
        if SecondaryFeature.MINUTELY not in requested_features:
            secondary.minutely_forecast = None
        if SecondaryFeature.ALERT not in requested_features:
            secondary.alert_list = None
        return secondary
