"""Shared HTTP plumbing for the provider clients.

One GET per call, no retries and no caching: failures are mapped onto
TransportError / DecodeError and left to the aggregator to handle.

Every aggregation owns a QuerySession. Closing it abandons the requests
still in flight: whatever they receive afterwards is dropped and the
branch raises FetchCancelled instead of returning data.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from skyfeed.config import settings
from skyfeed.exceptions import DecodeError, FetchCancelled, TransportError
from utils.logging_utils import get_tagged_logger, is_secret_key, mask_url_secrets, redact_secrets

logger = get_tagged_logger(__name__, tag="data_sources/http")

M = TypeVar("M")


class QuerySession(requests.Session):
    """Connection pool owned by a single aggregation."""

    def __init__(self) -> None:
        super().__init__()
        self.closed = False

    def close(self) -> None:
        self.closed = True
        super().close()


# Swapped out by tests.
session_factory = QuerySession


def open_session() -> requests.Session:
    return session_factory()


def _secrets(params: Mapping[str, Any], path_secrets: tuple[str, ...]) -> list[str]:
    values = [str(value) for key, value in params.items() if value is not None and is_secret_key(key)]
    return values + [secret for secret in path_secrets if secret]


def _send(
    session: requests.Session,
    url: str,
    params: Mapping[str, Any],
    headers: Mapping[str, str],
    timeout: float | None,
    path_secrets: tuple[str, ...],
) -> Any:
    masked_url = mask_url_secrets(url, path_secrets=path_secrets)
    if session.closed:
        raise FetchCancelled(f"Request to {masked_url} abandoned before dispatch")

    try:
        resp = session.get(
            url,
            params=dict(params),
            headers=dict(headers),
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
        )
    except requests.RequestException as exc:
        if session.closed:
            raise FetchCancelled(f"Request to {masked_url} abandoned") from exc
        # The exception text repeats the full request URL, credentials included.
        error = redact_secrets(str(exc), _secrets(params, path_secrets))
        logger.warning(
            "Provider request failed",
            extra={"url": masked_url, "error_type": type(exc).__name__, "error": error},
        )
        raise TransportError(f"Request to {masked_url} failed: {error}") from exc

    if session.closed:
        resp.close()
        raise FetchCancelled(f"Response from {masked_url} arrived after the query was abandoned")

    masked = mask_url_secrets(getattr(resp, "url", "") or url, path_secrets=path_secrets)
    status_code = getattr(resp, "status_code", None)
    logger.debug("Provider response", extra={"url": masked, "status": status_code})

    try:
        resp.raise_for_status()
    except requests.HTTPError as exc:
        raise TransportError(f"HTTP {status_code} from {masked}", status_code=status_code) from exc

    try:
        return resp.json()
    except ValueError as exc:
        raise DecodeError(f"Invalid JSON from {masked}") from exc


def get_json(
    url: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float | None = None,
    path_secrets: tuple[str, ...] = (),
    session: Optional[requests.Session] = None,
) -> Any:
    """GET `url` and return the decoded JSON body.

    Without `session` the call opens and closes a session of its own.
    """
    if session is not None:
        return _send(session, url, params or {}, headers or {}, timeout, path_secrets)

    own = open_session()
    try:
        return _send(own, url, params or {}, headers or {}, timeout, path_secrets)
    finally:
        own.close()


def decode(payload: Any, model: Type[M] | Any) -> M:
    """Validate a decoded JSON payload against a pydantic model or type."""
    try:
        if isinstance(model, type) and issubclass(model, BaseModel):
            return model.model_validate(payload)
        return TypeAdapter(model).validate_python(payload)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected response shape for {getattr(model, '__name__', model)}: "
                          f"{exc.error_count()} error(s)") from exc


def fetch(
    url: str,
    model: Type[M] | Any,
    *,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float | None = None,
    path_secrets: tuple[str, ...] = (),
    session: Optional[requests.Session] = None,
) -> M:
    """GET `url` and validate the body into `model`."""
    payload = get_json(
        url, params=params, headers=headers, timeout=timeout, path_secrets=path_secrets, session=session
    )
    return decode(payload, model)
