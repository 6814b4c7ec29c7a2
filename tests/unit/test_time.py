# PATH: tests/unit/test_time.py
"""
Unit tests for time utilities.
"""

import unittest
from datetime import datetime, timedelta, timezone

from core.time import (
    ensure_utc,
    is_within_hours,
    minutes_since,
    now_utc,
    parse_timestamp,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestNowFunctions(unittest.TestCase):
    """Tests for now_* functions."""

    def test_now_utc(self):
        """now_utc returns aware datetime."""
        self.assertIsNotNone(now_utc().tzinfo)


class TestParseTimestamp(unittest.TestCase):
    """Tests for parse_timestamp."""

    def test_iso_with_z(self):
        self.assertEqual(parse_timestamp("2026-10-19T12:00:00.000000Z"), NOW)

    def test_iso_with_offset(self):
        self.assertEqual(parse_timestamp("2026-10-19T21:00:00+09:00"), NOW)

    def test_naive_iso_is_utc(self):
        self.assertEqual(parse_timestamp("2026-10-19T12:00:00"), NOW)

    def test_unix_seconds(self):
        ts = int(NOW.timestamp())
        self.assertEqual(parse_timestamp(ts), NOW)
        self.assertEqual(parse_timestamp(str(ts)), NOW)

    def test_hex_seconds(self):
        self.assertEqual(parse_timestamp(hex(int(NOW.timestamp()))), NOW)

    def test_out_of_range_epochs(self):
        millis = int(NOW.timestamp()) * 1000
        for value in [millis, str(millis), 10**30, str(10**30), hex(10**30), float("inf"), float("nan")]:
            with self.subTest(value=value):
                self.assertIsNone(parse_timestamp(value))

    def test_unparseable(self):
        for value in [None, "", "soon", True, -1, [], "0xzz"]:
            with self.subTest(value=value):
                self.assertIsNone(parse_timestamp(value))


class TestWindows(unittest.TestCase):
    """Tests for window helpers."""

    def test_minutes_since(self):
        self.assertEqual(minutes_since(NOW - timedelta(minutes=45), NOW), 45.0)

    def test_within_hours_bounds(self):
        self.assertTrue(is_within_hours(NOW, NOW))
        self.assertTrue(is_within_hours(NOW - timedelta(hours=23, minutes=59), NOW))
        self.assertFalse(is_within_hours(NOW - timedelta(hours=24), NOW))
        self.assertFalse(is_within_hours(NOW + timedelta(minutes=1), NOW))

    def test_ensure_utc(self):
        naive = datetime(2026, 10, 19, 12, 0)
        self.assertEqual(ensure_utc(naive), NOW)


if __name__ == "__main__":
    unittest.main()
