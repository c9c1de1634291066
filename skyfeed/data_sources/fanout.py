"""Parallel fan-out of provider sub-requests with per-feed fallback.

Each query gets its own executor, so abandoning or failing one query never
touches another. Optional feeds that fail are replaced by their placeholder;
a mandatory failure cancels what is still pending and propagates.
"""
from __future__ import annotations

import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from skyfeed.exceptions import DecodeError, FetchCancelled, TransportError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/fanout")

CANCEL_POLL_SECONDS = 0.1

# Errors an optional feed is allowed to swallow.
RECOVERABLE_ERRORS = (TransportError, DecodeError)


@dataclass(frozen=True)
class Feed:
    """One sub-request of an aggregation."""
    call: Callable[[], Any]
    mandatory: bool = True
    placeholder_factory: Optional[Callable[[], Any]] = None

    @classmethod
    def required(cls, call: Callable[[], Any]) -> "Feed":
        return cls(call=call, mandatory=True)

    @classmethod
    def optional(cls, call: Callable[[], Any], placeholder_factory: Callable[[], Any]) -> "Feed":
        return cls(call=call, mandatory=False, placeholder_factory=placeholder_factory)

    @classmethod
    def skipped(cls, placeholder_factory: Callable[[], Any]) -> "Feed":
        """A feed that is never dispatched and resolves straight to its placeholder."""
        return cls(call=placeholder_factory, mandatory=False, placeholder_factory=placeholder_factory)


def _guard(name: str, feed: Feed) -> Callable[[], Any]:
    """Wrap an optional feed so a recoverable failure yields its placeholder."""
    if feed.mandatory:
        return feed.call

    def run() -> Any:
        try:
            return feed.call()
        except RECOVERABLE_ERRORS as exc:
            logger.warning(
                "Optional feed failed; using empty placeholder",
                extra={"feed": name, "error": str(exc)},
            )
            return feed.placeholder_factory()

    return run


def gather_feeds(
    feeds: Mapping[str, Feed],
    *,
    cancel_event: Optional[threading.Event] = None,
    thread_name_prefix: str = "feed",
    session: Optional[requests.Session] = None,
) -> Dict[str, Any]:
    """Run every feed concurrently and return their values keyed by name.

    Blocks until every branch has resolved. Raises the first mandatory failure,
    or FetchCancelled once `cancel_event` is set.

    `session` is the query's connection pool and is closed on return. When the
    query is cancelled or fails, closing it abandons the branches still in
    flight, so their late responses are dropped.
    """
    if not feeds:
        if session is not None:
            session.close()
        return {}

    executor = ThreadPoolExecutor(max_workers=len(feeds), thread_name_prefix=thread_name_prefix)
    futures: Dict[str, Future] = {}
    try:
        for name, feed in feeds.items():
            futures[name] = executor.submit(_guard(name, feed))

        pending = set(futures.values())
        while pending:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Aggregation cancelled by caller", extra={"pending": len(pending)})
                raise FetchCancelled("Weather query was cancelled")
            timeout = CANCEL_POLL_SECONDS if cancel_event is not None else None
            done, pending = wait(pending, timeout=timeout, return_when=FIRST_EXCEPTION)
            for fut in done:
                exc = fut.exception()
                if exc is not None:
                    failed = next(name for name, f in futures.items() if f is fut)
                    logger.warning("Mandatory feed failed", extra={"feed": failed, "error": str(exc)})
                    raise exc

        return {name: fut.result() for name, fut in futures.items()}
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
        if session is not None:
            session.close()
