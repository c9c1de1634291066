"""
Logging setup shared by the weather adapters and the HTTP API.

Usage
-----
In an entrypoint (server, CLI helper):

    from utils.logging_utils import setup_logging

    def main() -> None:
        setup_logging(level="INFO", service_name="skyfeed")
        ...

In a module:

    from utils.logging_utils import get_tagged_logger

    logger = get_tagged_logger(__name__, tag="mf_service")

    def request_weather() -> None:
        logger.info("Requesting Météo-France weather")

Every record carries `service_name` and `tag` so that lines coming from
different providers can be told apart in a single stream.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import parse_qsl, quote, quote_plus, urlencode, urlparse, urlunparse


# ---------------------------------------------------------------------------
# Bootstrap config (records emitted before setup_logging())
# ---------------------------------------------------------------------------

BOOTSTRAP_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
BOOTSTRAP_DATEFMT = "%Y-%m-%d %H:%M:%S"

logging.basicConfig(
    level=logging.INFO,
    format=BOOTSTRAP_FORMAT,
    datefmt=BOOTSTRAP_DATEFMT,
)


DEFAULT_LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(service_name)s | %(tag)s | %(name)s | %(message)s"
)
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Query parameter names whose values are credentials.
SECRET_QUERY_KEYS = ("token", "key", "appid", "secret", "pass", "pwd")

_CONFIGURED: bool = False


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

class MaxLevelFilter(logging.Filter):
    """Allow only records up to (and including) `max_level`."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """
    Ensure every LogRecord has a `tag` attribute.

    Records coming through get_tagged_logger() already have one; third-party
    loggers (requests, urllib3, uvicorn) get the last segment of their logger
    name, e.g. "urllib3.connectionpool" -> "connectionpool".
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            logger_name = getattr(record, "name", "")
            record.tag = logger_name.split(".")[-1] if logger_name else "-"
        return True


class ServiceNameFilter(logging.Filter):
    """Inject a process-wide `service_name` attribute into every LogRecord."""

    def __init__(self, service_name: Optional[str] = None) -> None:
        super().__init__()
        self._service_name = service_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "service_name"):
            record.service_name = self._service_name
        return True


# ---------------------------------------------------------------------------
# Config builder and setup
# ---------------------------------------------------------------------------


def build_logging_config(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    service_name: Optional[str] = None,
) -> Mapping[str, Any]:
    """
    Build a dictConfig-style logging configuration.

    DEBUG/INFO go to stdout, WARNING and above to stderr.

    Parameters
    ----------
    level:
        Root logger level (e.g., "DEBUG", "INFO", logging.INFO).
    log_format:
        Formatter pattern for log messages.
    date_format:
        Formatter pattern for timestamps.
    service_name:
        Logical name for this process, used for `%(service_name)s`.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "service_name": {"()": ServiceNameFilter, "service_name": service_name},
            "stdout_max_info": {
                "()": MaxLevelFilter,
                "max_level": logging.INFO,
            },
        },
        "formatters": {
            "standard": {
                "format": log_format,
                "datefmt": date_format,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "service_name", "stdout_max_info"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["ensure_tag", "service_name"],
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["stdout", "stderr"],
        },
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    service_name: Optional[str] = None,
    override_existing: bool = False,
) -> None:
    """
    Configure application-wide logging once per process.

    Calling it again is a no-op unless `override_existing` is True.
    """
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    config_dict = build_logging_config(
        level=level,
        log_format=log_format,
        date_format=date_format,
        service_name=service_name,
    )
    logging.config.dictConfig(config_dict)
    _CONFIGURED = True


def get_tagged_logger(
    name: str,
    *,
    tag: Optional[str] = None,
) -> logging.LoggerAdapter:
    """
    Return a LoggerAdapter that always carries a `tag` field.

    If `tag` is omitted it defaults to the last segment of `name`, e.g.
    "skyfeed.data_sources.mf.service" -> "service".
    """
    base_logger = logging.getLogger(name)
    if tag is None:
        tag = name.split(".")[-1]
    return logging.LoggerAdapter(base_logger, {"tag": tag})


def is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SECRET_QUERY_KEYS)


def mask_url_secrets(url: str, *, path_secrets: tuple[str, ...] = ()) -> str:
    """Return a copy of a provider URL with credentials masked.

    Query parameters that look like credentials are replaced with ``***``, as
    are user info in the netloc and any literal values listed in
    `path_secrets` (PirateWeather puts its API key in the path).

    Examples
    --------
    - https://host/rain?lat=1&token=abc -> https://host/rain?lat=1&token=%2A%2A%2A
    - https://host/forecast/KEY/1,2 with path_secrets=("KEY",) -> https://host/forecast/***/1,2
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return url

    masked_query_pairs = []
    for key, value in parse_qsl(parsed.query, keep_blank_values=True):
        masked_query_pairs.append((key, "***" if is_secret_key(key) else value))
    masked_query = urlencode(masked_query_pairs)

    path = parsed.path or ""
    for secret in path_secrets:
        if secret:
            path = path.replace(secret, "***")

    netloc = parsed.netloc
    if parsed.username or parsed.password is not None:
        netloc = "***"
        if parsed.password is not None:
            netloc += ":***"
        netloc += "@" + (parsed.hostname or "")
        if parsed.port:
            netloc += f":{parsed.port}"

    return urlunparse(
        (parsed.scheme, netloc, path, parsed.params or "", masked_query, parsed.fragment or "")
    )


def redact_secrets(text: str, secrets: Iterable[str]) -> str:
    """Replace every literal occurrence of `secrets` in free text with ``***``.

    Exception messages from the transport layer embed the full request URL,
    so both the raw and the percent-encoded form of each value are replaced.
    """
    for secret in secrets:
        if not secret:
            continue
        for form in (secret, quote(secret, safe=""), quote_plus(secret)):
            text = text.replace(form, "***")
    return text
