import threading
import unittest

from skyfeed.data_sources import http
from skyfeed.data_sources.fanout import Feed, gather_feeds
from skyfeed.exceptions import DataUnavailable, DecodeError, FetchCancelled, TransportError


def _fail(exc):
    def call():
        raise exc

    return call


class DummyResp:
    status_code = 200
    url = "https://example.test/slow"

    def __init__(self, payload):
        self._payload = payload
        self.closed = False

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload

    def close(self):
        self.closed = True


class TrackingSession:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class BlockingSession(TrackingSession):
    """Holds every request open until `release` is set."""

    def __init__(self, payload):
        super().__init__()
        self.response = DummyResp(payload)
        self.started = threading.Event()
        self.release = threading.Event()

    def get(self, url, params=None, headers=None, timeout=None):
        self.started.set()
        self.release.wait(5)
        return self.response


class TestGatherFeeds(unittest.TestCase):
    def test_empty_feeds(self):
        self.assertEqual(gather_feeds({}), {})

    def test_all_values_returned_by_name(self):
        results = gather_feeds({"a": Feed.required(lambda: 1), "b": Feed.optional(lambda: 2, list)})
        self.assertEqual(results, {"a": 1, "b": 2})

    def test_optional_failure_uses_placeholder(self):
        results = gather_feeds(
            {
                "a": Feed.required(lambda: "ok"),
                "b": Feed.optional(_fail(TransportError("down")), list),
                "c": Feed.optional(_fail(DecodeError("garbled")), dict),
            }
        )
        self.assertEqual(results, {"a": "ok", "b": [], "c": {}})

    def test_optional_feed_does_not_swallow_data_unavailable(self):
        with self.assertRaises(DataUnavailable):
            gather_feeds({"b": Feed.optional(_fail(DataUnavailable("empty")), list)})

    def test_mandatory_failure_propagates(self):
        with self.assertRaises(TransportError):
            gather_feeds({"a": Feed.required(_fail(TransportError("down"))), "b": Feed.required(lambda: 1)})

    def test_skipped_feed_never_calls_provider(self):
        results = gather_feeds({"rain": Feed.skipped(lambda: "placeholder")})
        self.assertEqual(results, {"rain": "placeholder"})

    def test_feeds_run_concurrently(self):
        barrier = threading.Barrier(3, timeout=5)

        def call():
            barrier.wait()
            return True

        results = gather_feeds({name: Feed.required(call) for name in ("a", "b", "c")})
        self.assertTrue(all(results.values()))

    def test_cancel_event_raises(self):
        release = threading.Event()
        cancel = threading.Event()
        cancel.set()
        try:
            with self.assertRaises(FetchCancelled):
                gather_feeds({"slow": Feed.required(lambda: release.wait(5))}, cancel_event=cancel)
        finally:
            release.set()

    def test_session_closed_after_success(self):
        session = TrackingSession()
        gather_feeds({"a": Feed.required(lambda: 1)}, session=session)
        self.assertTrue(session.closed)

    def test_cancelled_query_abandons_in_flight_request(self):
        session = BlockingSession({"lat": 1, "lon": 2})
        cancel = threading.Event()
        completed = []
        finished = threading.Event()

        def branch():
            try:
                completed.append(http.get_json("https://example.test/slow", session=session))
            finally:
                finished.set()

        def cancel_once_dispatched():
            session.started.wait(5)
            cancel.set()

        threading.Thread(target=cancel_once_dispatched).start()
        with self.assertRaises(FetchCancelled):
            gather_feeds({"slow": Feed.required(branch)}, cancel_event=cancel, session=session)
        self.assertTrue(session.closed)

        # The server answers after the caller gave up; the answer is dropped.
        session.release.set()
        self.assertTrue(finished.wait(5))
        self.assertEqual(completed, [])
        self.assertTrue(session.response.closed)

    def test_mandatory_failure_abandons_siblings(self):
        session = BlockingSession({"lat": 1, "lon": 2})
        completed = []
        finished = threading.Event()

        def sibling():
            try:
                completed.append(http.get_json("https://example.test/slow", session=session))
            finally:
                finished.set()

        def failing():
            session.started.wait(5)
            raise TransportError("down")

        with self.assertRaises(TransportError):
            gather_feeds(
                {"slow": Feed.optional(sibling, dict), "main": Feed.required(failing)},
                session=session,
            )
        self.assertTrue(session.closed)
        session.release.set()
        self.assertTrue(finished.wait(5))
        self.assertEqual(completed, [])


if __name__ == "__main__":
    unittest.main()
