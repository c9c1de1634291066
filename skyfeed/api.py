"""HTTP API exposing the weather sources."""

import hmac
from typing import Dict, List, Optional

import redis
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from skyfeed import weather_service
from skyfeed.config import settings
from skyfeed.data_sources import SecondaryFeature, build_registry, capabilities_of
from skyfeed.data_sources.base import ConfigurableSource
from skyfeed.domain import Location, UnitSystem
from skyfeed.exceptions import (
    AuthenticationMissing,
    DataUnavailable,
    DecodeError,
    FetchCancelled,
    TransportError,
    UnsupportedCapability,
    WeatherSourceError,
)
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="api")

# Seconds a client should wait before retrying after a 503.
RETRY_AFTER_SECONDS = 300

_redis_client = None
if settings.api_key_redis_url:
    try:
        _redis_client = redis.Redis.from_url(settings.api_key_redis_url)
        logger.info("API key checks will use Redis backend",
                    extra={"redis_url": mask_url_secrets(settings.api_key_redis_url)})
    except (redis.RedisError, ValueError) as exc:
        logger.warning("Failed to connect to Redis for API key checks; falling back to static key",
                       extra={"error": str(exc)})


def require_api_key(x_api_key: str | None = Header(default=None)):
    """
    Validate X-API-Key header against Redis (if configured) or the static api_key setting.
    """
    # If no key configured anywhere, allow requests (dev/default mode).
    if not settings.api_key and not _redis_client:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if _redis_client:
        logger.debug("Checking API key against Redis")
        try:
            if _redis_client.sismember(settings.api_key_redis_set, x_api_key):
                return
        except redis.RedisError as e:
            logger.warning("Redis API key lookup error; falling back to static key",
                           extra={"error": str(e)})

    if settings.api_key and hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
SOURCES = build_registry(settings)


class SourceNotFound(LookupError):
    """No source is registered under the requested id."""


class SourceInfo(BaseModel):
    """Public description of a registered source."""
    id: str
    name: str
    capabilities: List[str]
    configured: Optional[bool] = None
    supported_features: List[SecondaryFeature] = []


class SourceConfigResponse(BaseModel):
    """Which preferences a source has; stored values are never echoed back."""
    source: str
    configured: bool
    preferences: Dict[str, bool]


class SourceConfigUpdate(BaseModel):
    """Preferences to store; an empty value clears the override."""
    preferences: Dict[str, str]


# ERROR MAPPING

ERROR_STATUS = (
    (AuthenticationMissing, status.HTTP_401_UNAUTHORIZED),
    (UnsupportedCapability, status.HTTP_400_BAD_REQUEST),
    (DataUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (FetchCancelled, status.HTTP_503_SERVICE_UNAVAILABLE),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
    (DecodeError, status.HTTP_502_BAD_GATEWAY),
)


def status_for_error(exc: WeatherSourceError) -> int:
    for error_cls, code in ERROR_STATUS:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_502_BAD_GATEWAY


async def weather_source_error_handler(request: Request, exc: WeatherSourceError) -> JSONResponse:
    code = status_for_error(exc)
    headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if isinstance(exc, DataUnavailable) else None
    logger.warning(
        "Weather source request failed",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "error": str(exc), "status": code},
    )
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "error": type(exc).__name__, "retryable": exc.retryable},
        headers=headers,
    )


async def source_not_found_handler(request: Request, exc: SourceNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "error": "SourceNotFound", "retryable": False},
    )


# HELPERS

def _get_source(source_id: str):
    source = SOURCES.get((source_id or "").lower())
    if source is None:
        raise SourceNotFound(f"Unknown weather source '{source_id}'")
    return source


def _source_info(source) -> SourceInfo:
    return SourceInfo(
        id=source.id,
        name=source.name,
        capabilities=capabilities_of(source),
        configured=source.is_configured if isinstance(source, ConfigurableSource) else None,
        supported_features=list(getattr(source, "supported_features", [])),
    )


def _location(
    lat: float,
    lon: float,
    timezone: str = "UTC",
    country_code: Optional[str] = None,
    province_code: Optional[str] = None,
) -> Location:
    return Location(
        latitude=lat,
        longitude=lon,
        timezone=timezone,
        country_code=country_code,
        province_code=province_code,
    )


def _require_configurable(source):
    if not isinstance(source, ConfigurableSource):
        raise UnsupportedCapability(f"Source '{source.id}' has no configurable preferences")
    return source


def _config_response(source) -> SourceConfigResponse:
    return SourceConfigResponse(
        source=source.id,
        configured=source.is_configured,
        preferences={key: bool(value) for key, value in source.get_preferences().items()},
    )


# ROUTES

@router.get("/sources", response_model=List[SourceInfo])
def list_sources():
    """List registered sources and what each of them can do."""
    return [_source_info(source) for source in SOURCES.values()]


@router.get("/weather")
def get_weather(
    location: Location = Depends(_location),
    source: Optional[str] = None,
    minutely_source: Optional[str] = None,
    alert_source: Optional[str] = None,
    normals_source: Optional[str] = None,
    air_quality_source: Optional[str] = None,
    ignore: List[SecondaryFeature] = Query(default=[]),
    lang: Optional[str] = None,
    units: Optional[UnitSystem] = None,
):
    """Full forecast from the main source, completed by optional secondary sources."""
    main_source = _get_source(source or settings.default_source)
    secondary_ids = {
        SecondaryFeature.MINUTELY: minutely_source,
        SecondaryFeature.ALERT: alert_source,
        SecondaryFeature.NORMALS: normals_source,
        SecondaryFeature.AIR_QUALITY: air_quality_source,
    }
    secondary_sources = {
        feature: _get_source(source_id) for feature, source_id in secondary_ids.items() if source_id
    }
    result = weather_service.get_weather(
        location,
        main_source,
        secondary_sources,
        ignore,
        language=lang,
        units=units or UnitSystem(settings.default_units),
    )
    return jsonable_encoder(result)


@router.get("/weather/secondary")
def get_secondary_weather(
    location: Location = Depends(_location),
    source: str = Query(...),
    features: List[SecondaryFeature] = Query(...),
    lang: Optional[str] = None,
):
    """Only the requested secondary features from one source."""
    result = weather_service.get_secondary_weather(location, _get_source(source), features, language=lang)
    return jsonable_encoder(result)


@router.get("/locations/reverse")
def reverse_geocode(
    lat: float,
    lon: float,
    source: Optional[str] = None,
    lang: Optional[str] = None,
):
    locations = weather_service.reverse_geocode(
        Location(latitude=lat, longitude=lon), _get_source(source or settings.default_source), language=lang
    )
    return jsonable_encoder(locations)


@router.get("/locations/search")
def search_locations(
    q: str = Query(..., min_length=1),
    source: Optional[str] = None,
    lang: Optional[str] = None,
):
    locations = weather_service.search_locations(
        q, _get_source(source or settings.default_source), language=lang
    )
    return jsonable_encoder(locations)


@router.get("/sources/{source_id}/config", response_model=SourceConfigResponse)
def get_source_config(source_id: str):
    return _config_response(_require_configurable(_get_source(source_id)))


@router.put("/sources/{source_id}/config", response_model=SourceConfigResponse)
def set_source_config(source_id: str, update: SourceConfigUpdate):
    """Store credential overrides for a source."""
    source = _require_configurable(_get_source(source_id))
    known = set(source.get_preferences())
    unknown = sorted(set(update.preferences) - known)
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown preferences for {source.id}: {', '.join(unknown)}",
        )
    for key, value in update.preferences.items():
        source.set_preference(key, value)
    logger.info("Updated source preferences", extra={"source": source.id, "keys": sorted(update.preferences)})
    return _config_response(source)
