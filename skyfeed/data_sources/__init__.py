"""Weather source adapters and the helpers they share."""

from .base import (
    ConfigurableSource,
    LocationSearchSource,
    MainWeatherSource,
    ReverseGeocodingSource,
    SecondaryFeature,
    SecondaryWeatherSource,
    WeatherSource,
    capabilities_of,
)
from .factory import build_registry, build_source
from .fanout import Feed, gather_feeds

__all__ = [
    "build_registry",
    "build_source",
    "capabilities_of",
    "ConfigurableSource",
    "Feed",
    "gather_feeds",
    "LocationSearchSource",
    "MainWeatherSource",
    "ReverseGeocodingSource",
    "SecondaryFeature",
    "SecondaryWeatherSource",
    "WeatherSource",
]
