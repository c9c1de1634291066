import datetime as dt
import unittest

from skyfeed.data_sources.converters import (
    ensure_aware,
    epoch_to_datetime,
    km_to_m,
    minute_intervals,
    moon_phase_angle,
    ms_to_kmh,
    ratio_to_percent,
    ratio_to_rounded_percent,
    round_half_up,
)
from skyfeed.domain import alert_priority, make_alert_id

UTC = dt.timezone.utc


class TestConverters(unittest.TestCase):
    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.49), 2)
        self.assertEqual(round_half_up(0.5), 1)

    def test_epoch_to_datetime_is_aware_utc(self):
        value = epoch_to_datetime(1704110400)
        self.assertEqual(value, dt.datetime(2024, 1, 1, 12, 0, tzinfo=UTC))
        self.assertIsNone(epoch_to_datetime(None))

    def test_ensure_aware(self):
        naive = dt.datetime(2024, 1, 1, 12, 0)
        self.assertEqual(ensure_aware(naive).tzinfo, UTC)
        paris = dt.timezone(dt.timedelta(hours=1))
        aware = dt.datetime(2024, 1, 1, 12, 0, tzinfo=paris)
        self.assertIs(ensure_aware(aware), aware)

    def test_unit_conversions(self):
        self.assertEqual(km_to_m(10.0), 10000.0)
        self.assertAlmostEqual(ms_to_kmh(10.0), 36.0)
        self.assertEqual(ratio_to_percent(0.42), 42.0)
        self.assertEqual(ratio_to_rounded_percent(0.425), 43)
        self.assertIsNone(km_to_m(None))

    def test_invertible_conversions_round_trip(self):
        self.assertAlmostEqual(km_to_m(16.093) / 1000, 16.093)
        self.assertAlmostEqual(ratio_to_percent(0.87) / 100, 0.87)

    def test_moon_phase_angle(self):
        self.assertEqual(moon_phase_angle(0.0), 0)
        self.assertEqual(moon_phase_angle(0.5), 180)
        self.assertEqual(moon_phase_angle(0.25), 90)


class TestMinuteIntervals(unittest.TestCase):
    def _times(self, *minutes):
        base = dt.datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        return [base + dt.timedelta(minutes=m) for m in minutes]

    def test_last_sample_reuses_previous_gap(self):
        self.assertEqual(minute_intervals(self._times(0, 5, 10, 20)), [5, 5, 10, 10])

    def test_uneven_gaps(self):
        self.assertEqual(minute_intervals(self._times(0, 15, 20)), [15, 5, 5])

    def test_short_inputs(self):
        self.assertEqual(minute_intervals([]), [])
        self.assertEqual(minute_intervals(self._times(0)), [None])

    def test_rounds_partial_minutes(self):
        base = dt.datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        times = [base, base + dt.timedelta(seconds=150)]
        self.assertEqual(minute_intervals(times), [3, 3])


class TestAlerts(unittest.TestCase):
    def test_priority_ranking(self):
        severities = ["Extreme", "Severe", "Moderate", "Minor", "Unknown"]
        self.assertEqual([alert_priority(s) for s in severities], [1, 2, 3, 4, 5])
        self.assertEqual(alert_priority(None), 5)

    def test_alert_id_is_deterministic(self):
        first = make_alert_id("Flood Watch", "Severe", 1704110400)
        self.assertEqual(first, make_alert_id("Flood Watch", "Severe", 1704110400))
        self.assertNotEqual(first, make_alert_id("Flood Watch", "Severe", 1704114000))
        self.assertNotEqual(first, make_alert_id("Flood Watch", "Minor", 1704110400))
        self.assertEqual(len(first), 16)


if __name__ == "__main__":
    unittest.main()
