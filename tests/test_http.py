import unittest
from typing import List
from unittest import mock

import requests
from pydantic import BaseModel

from skyfeed.data_sources import http
from skyfeed.exceptions import DecodeError, FetchCancelled, TransportError


class DummyResp:
    def __init__(self, payload=None, status_code=200, bad_json=False, url="https://example.test/x"):
        self._payload = payload
        self.status_code = status_code
        self._bad_json = bad_json
        self.url = url
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload

    def close(self):
        self.closed = True


class Point(BaseModel):
    lat: float
    lon: float


class RecordingSession:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.resp

    def close(self):
        self.closed = True


class ClosingSession(RecordingSession):
    """Closed by its owner while the request is in flight."""

    def get(self, url, params=None, headers=None, timeout=None):
        self.close()
        return super().get(url, params=params, headers=headers, timeout=timeout)


class TestHttp(unittest.TestCase):
    def setUp(self):
        self._orig_factory = http.session_factory

    def tearDown(self):
        http.session_factory = self._orig_factory

    def _use(self, session):
        http.session_factory = lambda: session
        return session

    def test_fetch_validates_model(self):
        session = self._use(RecordingSession(DummyResp({"lat": 1.5, "lon": 2.5, "extra": True})))
        point = http.fetch("https://example.test/x", Point, params={"a": 1})
        self.assertEqual(point.lat, 1.5)
        self.assertEqual(session.calls[0]["params"], {"a": 1})

    def test_fetch_list_of_models(self):
        self._use(RecordingSession(DummyResp([{"lat": 1, "lon": 2}, {"lat": 3, "lon": 4}])))
        points = http.fetch("https://example.test/x", List[Point])
        self.assertEqual([p.lat for p in points], [1, 3])

    def test_network_error_is_transport_error(self):
        self._use(RecordingSession(exc=requests.ConnectionError("boom")))
        with self.assertRaises(TransportError):
            http.get_json("https://example.test/x?token=abc")

    def test_http_status_is_transport_error(self):
        self._use(RecordingSession(DummyResp({}, status_code=503)))
        with self.assertRaises(TransportError) as ctx:
            http.get_json("https://example.test/x")
        self.assertEqual(ctx.exception.status_code, 503)

    def test_bad_json_is_decode_error(self):
        self._use(RecordingSession(DummyResp(bad_json=True)))
        with self.assertRaises(DecodeError):
            http.get_json("https://example.test/x")

    def test_wrong_shape_is_decode_error(self):
        self._use(RecordingSession(DummyResp({"lat": "north"})))
        with self.assertRaises(DecodeError):
            http.fetch("https://example.test/x", Point)

    def test_default_timeout_from_settings(self):
        from skyfeed.config import settings

        session = self._use(RecordingSession(DummyResp({})))
        http.get_json("https://example.test/x")
        self.assertEqual(session.calls[0]["timeout"], settings.http_timeout_seconds)

    def test_call_without_session_closes_its_own(self):
        session = self._use(RecordingSession(DummyResp({})))
        http.get_json("https://example.test/x")
        self.assertTrue(session.closed)

    def test_shared_session_left_open(self):
        session = RecordingSession(DummyResp({"lat": 1, "lon": 2}))
        http.fetch("https://example.test/x", Point, session=session)
        self.assertFalse(session.closed)

    def test_closed_session_does_not_dispatch(self):
        session = RecordingSession(DummyResp({}))
        session.close()
        with self.assertRaises(FetchCancelled):
            http.get_json("https://example.test/x", session=session)
        self.assertEqual(session.calls, [])

    def test_response_after_close_is_dropped(self):
        resp = DummyResp({"lat": 1, "lon": 2})
        session = ClosingSession(resp)
        with self.assertRaises(FetchCancelled):
            http.fetch("https://example.test/x", Point, session=session)
        self.assertTrue(resp.closed)

    def test_failure_after_close_is_cancellation(self):
        session = ClosingSession(exc=requests.ConnectionError("reset"))
        with self.assertRaises(FetchCancelled):
            http.get_json("https://example.test/x", session=session)


class TestCredentialsStayHidden(unittest.TestCase):
    """Connection failures against a closed local port, with a real session."""

    API_KEY = "SUPERSECRETKEY"
    TOKEN = "JWTSECRET.part-two_x"
    APPID = "appid0123456789"

    def setUp(self):
        self._orig_factory = http.session_factory
        http.session_factory = http.QuerySession

    def tearDown(self):
        http.session_factory = self._orig_factory

    def _assert_hidden(self, text):
        for secret in (self.API_KEY, self.TOKEN, self.APPID):
            self.assertNotIn(secret, text)

    def test_connection_error_masks_path_and_query_secrets(self):
        with self.assertLogs("skyfeed.data_sources.http", level="WARNING") as captured:
            with self.assertRaises(TransportError) as ctx:
                http.get_json(
                    f"http://127.0.0.1:1/forecast/{self.API_KEY}/1.0,2.0",
                    params={"units": "ca", "token": self.TOKEN, "appid": self.APPID},
                    timeout=2,
                    path_secrets=(self.API_KEY,),
                )

        self._assert_hidden(str(ctx.exception))
        self.assertIn("127.0.0.1", str(ctx.exception))
        for record in captured.records:
            self._assert_hidden(record.getMessage())
            self._assert_hidden(str(record.__dict__))

    def test_pirateweather_key_absent_from_error(self):
        from skyfeed.data_sources.pirateweather import api as pw_api

        with mock.patch.object(pw_api, "PIRATE_WEATHER_BASE_URL", "http://127.0.0.1:1/"):
            with self.assertLogs("skyfeed.data_sources.http", level="WARNING") as captured:
                with self.assertRaises(TransportError) as ctx:
                    pw_api.get_forecast(self.API_KEY, 1.0, 2.0)

        self._assert_hidden(str(ctx.exception))
        for record in captured.records:
            self._assert_hidden(str(record.__dict__))


if __name__ == "__main__":
    unittest.main()
