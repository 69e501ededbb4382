#!/usr/bin/env python3
"""Tests for interval progress calculation."""
import unittest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from maintrack.services.progress import compute_progress, elapsed_months, DAYS_PER_MONTH


def _event(km_at_service=10000, interval_km=None, interval_months=None, performed_at=date(2025, 1, 1)):
    return SimpleNamespace(
        kmAtService=km_at_service,
        intervalKm=interval_km,
        intervalTimeMonths=interval_months,
        performedAt=performed_at,
    )


class TestDistanceProgress(unittest.TestCase):

    def test_half_way(self):
        p = compute_progress(_event(interval_km=10000), 15000, date(2025, 6, 1))
        self.assertEqual(p.axis, "distance")
        self.assertEqual(p.percent, 50)
        self.assertEqual(p.consumed, 5000)
        self.assertEqual(p.target, 10000)

    def test_overdue_is_clamped_but_consumed_is_raw(self):
        p = compute_progress(_event(interval_km=10000), 25000, date(2025, 6, 1))
        self.assertEqual(p.percent, 100)
        self.assertEqual(p.consumed, 15000)

    def test_odometer_regression_keeps_negative_consumed(self):
        p = compute_progress(_event(interval_km=10000), 9000, date(2025, 6, 1))
        self.assertEqual(p.percent, 0)
        self.assertEqual(p.consumed, -1000)

    def test_distance_wins_over_time(self):
        p = compute_progress(_event(interval_km=10000, interval_months=1), 10000, date(2030, 1, 1))
        self.assertEqual(p.axis, "distance")
        self.assertEqual(p.percent, 0)


class TestTimeProgress(unittest.TestCase):

    def test_six_months_of_twelve(self):
        performed = date(2025, 1, 1)
        now = performed + timedelta(days=180)
        p = compute_progress(_event(interval_months=12, performed_at=performed), 0, now)
        self.assertEqual(p.axis, "time")
        self.assertAlmostEqual(p.percent, 180 / 30.44 / 12 * 100)
        self.assertAlmostEqual(p.percent, 49.3, places=1)
        self.assertAlmostEqual(p.consumed, 180 / 30.44)
        self.assertEqual(p.target, 12)

    def test_clamped_at_hundred(self):
        p = compute_progress(_event(interval_months=6, performed_at=date(2020, 1, 1)), 0, date(2025, 1, 1))
        self.assertEqual(p.percent, 100)
        self.assertGreater(p.consumed, 6)

    def test_future_event_is_zero(self):
        p = compute_progress(_event(interval_months=6, performed_at=date(2025, 3, 1)), 0, date(2025, 1, 1))
        self.assertEqual(p.percent, 0)
        self.assertLess(p.consumed, 0)

    def test_aware_datetime_counts_fractional_days(self):
        now = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)
        self.assertAlmostEqual(elapsed_months(date(2025, 1, 1), now), 1.5 / DAYS_PER_MONTH)

    def test_naive_datetime(self):
        self.assertAlmostEqual(elapsed_months(date(2025, 1, 1), datetime(2025, 1, 31, 10, 33, 36)),
                               (30 + 10.56 / 24) / 30.44)


class TestNotScheduled(unittest.TestCase):

    def test_no_interval_returns_none(self):
        self.assertIsNone(compute_progress(_event(), 20000, date(2025, 6, 1)))


if __name__ == "__main__":
    unittest.main()
