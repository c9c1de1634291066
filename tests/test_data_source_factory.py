import unittest

from skyfeed.config import Settings
from skyfeed.config_store import InMemoryConfigStore
from skyfeed.data_sources import capabilities_of
from skyfeed.data_sources.base import (
    ConfigurableSource,
    LocationSearchSource,
    MainWeatherSource,
    ReverseGeocodingSource,
    SecondaryWeatherSource,
)
from skyfeed.data_sources.factory import build_registry, build_source
from skyfeed.data_sources.mf import MfService
from skyfeed.data_sources.owm import OwmService
from skyfeed.data_sources.pirateweather import PirateWeatherService


class TestDataSourceFactory(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(pirateweather_api_key="pw", owm_api_key="owm", mf_wsft_key="mf")

    def test_build_each_source(self):
        store = InMemoryConfigStore()
        self.assertIsInstance(build_source("mf", self.settings, store), MfService)
        self.assertIsInstance(build_source("PirateWeather", self.settings, store), PirateWeatherService)
        self.assertIsInstance(build_source("owm", self.settings, store), OwmService)

    def test_unknown_source_raises(self):
        with self.assertRaises(ValueError):
            build_source("unknown-source", self.settings, InMemoryConfigStore())

    def test_registry_shares_store_with_namespaces(self):
        store = InMemoryConfigStore()
        registry = build_registry(self.settings, store)
        self.assertEqual(sorted(registry), ["mf", "owm", "pirateweather"])
        registry["owm"].set_preference("api_key", "mine")
        self.assertEqual(store.get("owm", "api_key"), "mine")
        self.assertIsNone(store.get("pirateweather", "api_key"))

    def test_capabilities(self):
        registry = build_registry(self.settings, InMemoryConfigStore())
        self.assertEqual(
            capabilities_of(registry["mf"]),
            ["main", "secondary", "reverse_geocoding", "location_search", "configurable"],
        )
        self.assertEqual(capabilities_of(registry["pirateweather"]), ["main", "secondary", "configurable"])
        pirate = registry["pirateweather"]
        self.assertIsInstance(pirate, MainWeatherSource)
        self.assertIsInstance(pirate, SecondaryWeatherSource)
        self.assertIsInstance(pirate, ConfigurableSource)
        self.assertNotIsInstance(pirate, ReverseGeocodingSource)
        self.assertNotIsInstance(pirate, LocationSearchSource)
        self.assertIsInstance(registry["owm"], LocationSearchSource)


if __name__ == "__main__":
    unittest.main()
