"""Factory helpers for building the weather sources at startup."""

from __future__ import annotations

from typing import Dict, Optional

from skyfeed import config
from skyfeed.config_store import ConfigStore, SourceConfigStore, build_config_store
from skyfeed.data_sources.base import WeatherSource, capabilities_of
from skyfeed.data_sources.mf import MfService
from skyfeed.data_sources.owm import OwmService
from skyfeed.data_sources.pirateweather import PirateWeatherService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")

SOURCE_CLASSES = {
    MfService.id: MfService,
    PirateWeatherService.id: PirateWeatherService,
    OwmService.id: OwmService,
}


def build_source(
    source_id: str,
    settings: Optional[config.Settings] = None,
    store: Optional[ConfigStore] = None,
) -> WeatherSource:
    """Instantiate one source with its own preference namespace."""
    settings = settings or config.settings
    key = (source_id or "").lower()
    source_cls = SOURCE_CLASSES.get(key)
    if source_cls is None:
        raise ValueError(f"Unknown weather source '{source_id}'")
    store = store if store is not None else build_config_store(settings)
    source = source_cls(SourceConfigStore(store, key), settings=settings)
    logger.info(
        "Built weather source",
        extra={"source": key, "capabilities": capabilities_of(source), "configured": source.is_configured},
    )
    return source


def build_registry(
    settings: Optional[config.Settings] = None,
    store: Optional[ConfigStore] = None,
) -> Dict[str, WeatherSource]:
    """Build every known source, sharing a single config store."""
    settings = settings or config.settings
    store = store if store is not None else build_config_store(settings)
    return {source_id: build_source(source_id, settings, store) for source_id in SOURCE_CLASSES}
