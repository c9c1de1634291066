import datetime as dt
import threading
import unittest

import requests

from skyfeed.config_store import InMemoryConfigStore, SourceConfigStore
from skyfeed.data_sources import http
from skyfeed.data_sources.base import SecondaryFeature
from skyfeed.data_sources.owm import OwmService, converter
from skyfeed.data_sources.owm.models import OwmAirPollutionResult, OwmOneCallResult
from skyfeed.domain import Location, WeatherCode
from skyfeed.exceptions import AuthenticationMissing, DataUnavailable

UTC = dt.timezone.utc
T0 = 1704110400  # 2024-01-01T12:00Z


def _one_call_payload():
    return {
        "lat": 51.5,
        "lon": -0.12,
        "timezone": "Europe/London",
        "current": {
            "dt": T0,
            "temp": 6.2,
            "feels_like": 3.1,
            "pressure": 1008,
            "humidity": 87,
            "clouds": 75,
            "visibility": 10000,
            "wind_speed": 5.0,
            "wind_deg": 230,
            "weather": [{"id": 500, "main": "Rain", "description": "light rain"}],
        },
        "minutely": [
            {"dt": T0, "precipitation": 0.0},
            {"dt": T0 + 60, "precipitation": 0.3},
        ],
        "hourly": [
            {
                "dt": T0,
                "temp": 6.2,
                "pop": 0.45,
                "wind_speed": 5.0,
                "rain": {"1h": 0.3},
                "weather": [{"id": 803, "description": "broken clouds"}],
            },
            {"dt": T0 + 3600, "temp": 6.0, "weather": [{"id": 602, "description": "heavy snow"}]},
        ],
        "daily": [
            {
                "dt": T0,
                "sunrise": T0 - 15000,
                "sunset": T0 + 14000,
                "moonrise": T0 + 30000,
                "moonset": T0 - 2000,
                "moon_phase": 0.75,
                "temp": {"day": 7.0, "night": 2.0, "min": 1.5, "max": 8.0},
                "feels_like": {"day": 4.0, "night": -1.0},
                "uvi": 0.6,
                "weather": [{"id": 211, "description": "thunderstorm"}],
            }
        ],
        "alerts": [
            {
                "sender_name": "Met Office",
                "event": "Yellow wind warning",
                "start": T0,
                "end": T0 + 43200,
                "description": "Strong winds.",
                "tags": ["Wind"],
            }
        ],
    }


def _air_payload():
    return {
        "list": [
            {"dt": T0, "main": {"aqi": 2}, "components": {"pm2_5": 8.1, "pm10": 12.0, "o3": 40.0, "no2": 9.0}},
        ]
    }


def _geo_payload():
    return [
        {"name": "London", "local_names": {"fr": "Londres"}, "lat": 51.5, "lon": -0.12, "country": "GB",
         "state": "England"},
    ]


class DummyResp:
    def __init__(self, payload):
        self._payload = payload
        self.status_code = 200
        self.url = ""

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class RoutingSession:
    closed = False

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, params=None, headers=None, timeout=None):
        path = url.replace("https://api.openweathermap.org/", "")
        with self._lock:
            self.calls.append({"path": path, "params": params})
        if path in self.failing:
            raise requests.Timeout(f"{path} timed out")
        if path.endswith("onecall"):
            return DummyResp(_one_call_payload())
        if path.startswith("data/2.5/air_pollution"):
            return DummyResp(_air_payload())
        return DummyResp(_geo_payload())

    def close(self):
        pass

    def paths(self):
        return sorted(call["path"] for call in self.calls)


class DummySettings:
    default_language = "en"
    owm_api_key = "owm-default"
    owm_one_call_version = "3.0"


class TestOwmConverter(unittest.TestCase):
    def setUp(self):
        self.result = converter.convert(
            OwmOneCallResult.model_validate(_one_call_payload()),
            OwmAirPollutionResult.model_validate(_air_payload()),
        )

    def test_weather_codes(self):
        self.assertEqual(converter.get_weather_code(500), WeatherCode.RAIN)
        self.assertEqual(converter.get_weather_code(211), WeatherCode.THUNDERSTORM)
        self.assertEqual(converter.get_weather_code(612), WeatherCode.SLEET)
        self.assertEqual(converter.get_weather_code(602), WeatherCode.SNOW)
        self.assertEqual(converter.get_weather_code(803), WeatherCode.CLOUDY)
        self.assertIsNone(converter.get_weather_code(999))
        self.assertIsNone(converter.get_weather_code(None))

    def test_current(self):
        current = self.result.current
        self.assertEqual(current.weather_text, "Light rain")
        self.assertEqual(current.weather_code, WeatherCode.RAIN)
        self.assertAlmostEqual(current.wind.speed, 18.0)
        self.assertEqual(current.visibility, 10000)

    def test_hourly_with_air_quality(self):
        first, second = self.result.hourly_forecast
        self.assertAlmostEqual(first.precipitation_probability.total, 45.0)
        self.assertEqual(first.precipitation.rain, 0.3)
        self.assertEqual(first.air_quality.pm25, 8.1)
        self.assertIsNone(second.air_quality)
        self.assertEqual(second.weather_code, WeatherCode.SNOW)

    def test_daily(self):
        daily = self.result.daily_forecast[0]
        self.assertEqual(daily.day.temperature.temperature, 7.0)
        self.assertEqual(daily.night.temperature.apparent_temperature, -1.0)
        self.assertEqual(daily.moon_phase.angle, 270)
        self.assertEqual(daily.date, dt.datetime(2024, 1, 1, 12, 0, tzinfo=UTC))

    def test_alerts_have_lowest_priority(self):
        alert = self.result.alert_list[0]
        self.assertEqual(alert.priority, 5)
        self.assertEqual(alert.description, "Yellow wind warning")
        self.assertEqual(alert.content, "Strong winds.")

    def test_missing_hourly_raises(self):
        payload = _one_call_payload()
        payload["hourly"] = []
        with self.assertRaises(DataUnavailable):
            converter.convert(OwmOneCallResult.model_validate(payload))

    def test_locations_use_local_name(self):
        from skyfeed.data_sources.owm.models import OwmLocationResult

        results = [OwmLocationResult.model_validate(item) for item in _geo_payload()]
        self.assertEqual(converter.convert_locations(results, "fr")[0].city, "Londres")
        self.assertEqual(converter.convert_locations(results, "de")[0].city, "London")


class TestOwmService(unittest.TestCase):
    def setUp(self):
        self._orig_factory = http.session_factory
        self.session = RoutingSession()
        http.session_factory = lambda: self.session
        self.service = OwmService(SourceConfigStore(InMemoryConfigStore(), "owm"), settings=DummySettings())
        self.location = Location(latitude=51.5, longitude=-0.12, timezone="Europe/London")

    def tearDown(self):
        http.session_factory = self._orig_factory

    def test_request_weather_fetches_one_call_and_air(self):
        result = self.service.request_weather(self.location, language="fr")
        self.assertEqual(self.session.paths(), ["data/2.5/air_pollution/forecast", "data/3.0/onecall"])
        one_call = next(c for c in self.session.calls if c["path"].endswith("onecall"))
        self.assertEqual(one_call["params"]["appid"], "owm-default")
        self.assertEqual(one_call["params"]["units"], "metric")
        self.assertEqual(one_call["params"]["lang"], "fr")
        self.assertIsNotNone(result.hourly_forecast[0].air_quality)

    def test_air_pollution_failure_falls_back(self):
        self.session.failing = {"data/2.5/air_pollution/forecast"}
        result = self.service.request_weather(self.location)
        self.assertIsNone(result.hourly_forecast[0].air_quality)
        self.assertTrue(result.daily_forecast)

    def test_ignored_air_quality_is_not_requested(self):
        result = self.service.request_weather(
            self.location, [SecondaryFeature.AIR_QUALITY, SecondaryFeature.ALERT]
        )
        self.assertEqual(self.session.paths(), ["data/3.0/onecall"])
        self.assertIsNone(result.alert_list)

    def test_missing_key(self):
        settings = DummySettings()
        settings.owm_api_key = ""
        service = OwmService(SourceConfigStore(InMemoryConfigStore(), "owm"), settings=settings)
        with self.assertRaises(AuthenticationMissing):
            service.request_weather(self.location)
        self.assertEqual(self.session.calls, [])

    def test_secondary_air_quality_only(self):
        secondary = self.service.request_secondary_weather(self.location, [SecondaryFeature.AIR_QUALITY])
        self.assertEqual(self.session.paths(), ["data/2.5/air_pollution/forecast"])
        self.assertIn(dt.datetime(2024, 1, 1, 12, 0, tzinfo=UTC), secondary.air_quality)
        self.assertIsNone(secondary.minutely_forecast)

    def test_search_and_reverse(self):
        found = self.service.request_location_search("London", language="fr")
        self.assertEqual(found[0].city, "Londres")
        self.service.request_reverse_geocoding_location(self.location)
        self.assertIn("geo/1.0/reverse", self.session.paths())


if __name__ == "__main__":
    unittest.main()
