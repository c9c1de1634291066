"""Capability interfaces implemented by weather sources.

A source implements only the capabilities it supports; callers check for a
capability with isinstance() against these runtime-checkable protocols.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from skyfeed.domain import Location, SecondaryWeatherResult, WeatherResult


class SecondaryFeature(str, Enum):
    """Data a source can provide on top of (or instead of) a main forecast."""
    MINUTELY = "minutely"
    ALERT = "alert"
    NORMALS = "normals"
    AIR_QUALITY = "air_quality"


@runtime_checkable
class WeatherSource(Protocol):
    """Anything registered as a source has an id and a display name."""
    id: str
    name: str


@runtime_checkable
class MainWeatherSource(Protocol):
    """Provides a complete forecast for a location."""

    supported_features_in_main: Sequence[SecondaryFeature]

    def request_weather(
        self,
        location: Location,
        ignore_features: Sequence[SecondaryFeature] = (),
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> WeatherResult:
        """Fetch and convert everything needed for a full WeatherResult."""
        ...


@runtime_checkable
class SecondaryWeatherSource(Protocol):
    """Provides individual features to complement another main source."""

    supported_features: Sequence[SecondaryFeature]

    def is_feature_supported_for_location(self, feature: SecondaryFeature, location: Location) -> bool:
        """Return True if `feature` can be served for `location`."""
        ...

    def request_secondary_weather(
        self,
        location: Location,
        requested_features: Sequence[SecondaryFeature],
        *,
        language: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> SecondaryWeatherResult:
        """Fetch only the requested features."""
        ...


@runtime_checkable
class ReverseGeocodingSource(Protocol):
    """Resolves coordinates into named locations."""

    def request_reverse_geocoding_location(
        self, location: Location, *, language: Optional[str] = None
    ) -> List[Location]:
        ...


@runtime_checkable
class LocationSearchSource(Protocol):
    """Resolves free-text queries into locations."""

    def request_location_search(self, query: str, *, language: Optional[str] = None) -> List[Location]:
        ...


@runtime_checkable
class ConfigurableSource(Protocol):
    """Exposes user-editable settings (credential overrides)."""

    @property
    def is_configured(self) -> bool:
        ...

    def get_preferences(self) -> Dict[str, str]:
        """Current values of the editable settings, keyed by setting name."""
        ...

    def set_preference(self, key: str, value: str) -> None:
        ...


def capabilities_of(source: object) -> List[str]:
    """Names of the capabilities `source` implements."""
    checks = (
        ("main", MainWeatherSource),
        ("secondary", SecondaryWeatherSource),
        ("reverse_geocoding", ReverseGeocodingSource),
        ("location_search", LocationSearchSource),
        ("configurable", ConfigurableSource),
    )
    return [label for label, proto in checks if isinstance(source, proto)]
