"""Combine a main source with secondary sources into one weather result."""
from __future__ import annotations

import threading
from typing import Dict, List, Mapping, Optional, Sequence

from skyfeed.data_sources.base import (
    LocationSearchSource,
    MainWeatherSource,
    ReverseGeocodingSource,
    SecondaryFeature,
    SecondaryWeatherSource,
)
from skyfeed.data_sources.fanout import Feed, gather_feeds
from skyfeed.domain import Location, SecondaryWeatherResult, UnitSystem, WeatherResult
from skyfeed.exceptions import FetchCancelled, UnsupportedCapability, WeatherSourceError
from skyfeed.units import to_unit_system
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weather_service")


def _source_id(source: object) -> str:
    return getattr(source, "id", type(source).__name__)


def _require_main(source: object) -> MainWeatherSource:
    if not isinstance(source, MainWeatherSource):
        raise UnsupportedCapability(f"Source '{_source_id(source)}' cannot provide a main forecast")
    return source


def _require_secondary(source: object) -> SecondaryWeatherSource:
    if not isinstance(source, SecondaryWeatherSource):
        raise UnsupportedCapability(f"Source '{_source_id(source)}' cannot provide secondary features")
    return source


def _group_delegated(
    main_source: object,
    secondary_sources: Mapping[SecondaryFeature, object],
    ignore_features: Sequence[SecondaryFeature],
) -> Dict[str, tuple]:
    """Features handed to another source, grouped so each source is called once."""
    grouped: Dict[str, tuple] = {}
    for feature, source in secondary_sources.items():
        if source is None or source is main_source or feature in ignore_features:
            continue
        source = _require_secondary(source)
        _, features = grouped.setdefault(_source_id(source), (source, []))
        features.append(SecondaryFeature(feature))
    return grouped


def _secondary_call(
    source: SecondaryWeatherSource,
    location: Location,
    features: List[SecondaryFeature],
    language: Optional[str],
    cancel_event: Optional[threading.Event],
):
    """Secondary data is a bonus: a failure only loses the delegated features."""

    def run() -> Optional[SecondaryWeatherResult]:
        supported = [f for f in features if source.is_feature_supported_for_location(f, location)]
        if not supported:
            logger.info(
                "Secondary source cannot serve this location",
                extra={"source": _source_id(source), "features": [f.value for f in features]},
            )
            return None
        try:
            return source.request_secondary_weather(
                location, supported, language=language, cancel_event=cancel_event
            )
        except FetchCancelled:
            raise
        except WeatherSourceError as exc:
            logger.warning(
                "Secondary source failed; keeping main data",
                extra={"source": _source_id(source), "error": str(exc)},
            )
            return None

    return run


def merge_secondary(
    result: WeatherResult,
    secondary: SecondaryWeatherResult,
    features: Sequence[SecondaryFeature],
) -> WeatherResult:
    """Override the fields of `result` that `secondary` was asked for."""
    if SecondaryFeature.MINUTELY in features:
        result.minutely_forecast = secondary.minutely_forecast
    if SecondaryFeature.ALERT in features:
        result.alert_list = secondary.alert_list
    if SecondaryFeature.NORMALS in features:
        result.normals = secondary.normals
    if SecondaryFeature.AIR_QUALITY in features:
        air_quality = secondary.air_quality or {}
        for hourly in result.hourly_forecast:
            hourly.air_quality = air_quality.get(hourly.date)
    return result


def get_weather(
    location: Location,
    main_source: object,
    secondary_sources: Optional[Mapping[SecondaryFeature, object]] = None,
    ignore_features: Sequence[SecondaryFeature] = (),
    *,
    language: Optional[str] = None,
    units: UnitSystem = UnitSystem.METRIC,
    cancel_event: Optional[threading.Event] = None,
) -> WeatherResult:
    """Fetch a full forecast from `main_source`, completed by secondary sources.

    Features mapped to another source in `secondary_sources` are left out of
    the main call and filled in from that source instead. Main and secondary
    requests run concurrently.
    """
    main = _require_main(main_source)
    ignore_features = [SecondaryFeature(f) for f in ignore_features]
    delegated = _group_delegated(main_source, secondary_sources or {}, ignore_features)
    delegated_features = [f for _, features in delegated.values() for f in features]
    main_ignore = sorted(set(ignore_features) | set(delegated_features), key=lambda f: f.value)

    logger.info(
        "Requesting weather",
        extra={
            "main_source": _source_id(main_source),
            "secondary_sources": sorted(delegated),
            "ignore_features": [f.value for f in main_ignore],
        },
    )
    feeds = {
        "main": Feed.required(
            lambda: main.request_weather(
                location, main_ignore, language=language, cancel_event=cancel_event
            )
        )
    }
    for source_id, (source, features) in delegated.items():
        feeds[f"secondary:{source_id}"] = Feed.required(
            _secondary_call(source, location, features, language, cancel_event)
        )

    results = gather_feeds(feeds, cancel_event=cancel_event, thread_name_prefix="weather")
    result: WeatherResult = results["main"]
    for source_id, (_source, features) in delegated.items():
        secondary = results[f"secondary:{source_id}"]
        if secondary is not None:
            merge_secondary(result, secondary, features)

    return to_unit_system(result, units)


def get_secondary_weather(
    location: Location,
    source: object,
    features: Sequence[SecondaryFeature],
    *,
    language: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
) -> SecondaryWeatherResult:
    """Fetch only `features` from `source`; unsupported features are rejected."""
    secondary = _require_secondary(source)
    features = [SecondaryFeature(f) for f in features]
    unsupported = [f.value for f in features if f not in secondary.supported_features]
    if unsupported:
        raise UnsupportedCapability(f"Source '{_source_id(source)}' does not support {', '.join(unsupported)}")
    return secondary.request_secondary_weather(location, features, language=language, cancel_event=cancel_event)


def reverse_geocode(location: Location, source: object, *, language: Optional[str] = None) -> List[Location]:
    if not isinstance(source, ReverseGeocodingSource):
        raise UnsupportedCapability(f"Source '{_source_id(source)}' cannot reverse geocode")
    return source.request_reverse_geocoding_location(location, language=language)


def search_locations(query: str, source: object, *, language: Optional[str] = None) -> List[Location]:
    if not isinstance(source, LocationSearchSource):
        raise UnsupportedCapability(f"Source '{_source_id(source)}' cannot search locations")
    return source.request_location_search(query, language=language)


def main():
    """Manual test helper: print a Météo-France forecast for Paris."""
    from skyfeed.data_sources.factory import build_source

    paris = Location(
        latitude=48.8566,
        longitude=2.3522,
        timezone="Europe/Paris",
        country_code="FR",
        province_code="75",
        city="Paris",
    )
    result = get_weather(paris, build_source("mf"))
    current = result.current
    if current is not None:
        print(f"now: {current.weather_text} {current.temperature.temperature} °C")
    for daily in result.daily_forecast:
        print(
            f"{daily.date:%Y-%m-%d}: {daily.day.weather_text} "
            f"{daily.night.temperature.temperature} / {daily.day.temperature.temperature} °C"
        )
    for alert in result.alert_list or []:
        print(f"alert [{alert.priority}] {alert.description}")


if __name__ == "__main__":
    main()
