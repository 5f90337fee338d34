"""Tests for the daily reset boundary detection."""
from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from statscore.services.daily_reset import DailyResetScheduler, parse_reset_time

from fakes import at


class TestResetTimeParsing(unittest.TestCase):
    def test_valid_time_is_applied(self):
        s = DailyResetScheduler()
        self.assertTrue(s.set_reset_time("06:30:15"))
        self.assertEqual(s.reset_time_text, "06:30:15")

    def test_surrounding_whitespace_is_ignored(self):
        s = DailyResetScheduler()
        self.assertTrue(s.set_reset_time("  23:59:59 "))
        self.assertEqual(s.reset_time_text, "23:59:59")

    def test_malformed_values_fall_back_to_midnight(self):
        bad = ["", "6:30", "06:30", "aa:bb:cc", "24:00:00", "12:60:00", "12:00:60",
               "12:00:00:00", "-1:00:00", "06:30:15 UTC+02:00", None]
        for value in bad:
            with self.subTest(value=value):
                s = DailyResetScheduler("05:00:00")
                self.assertFalse(s.set_reset_time(value))
                self.assertEqual(s.reset_time_text, "00:00:00")

    def test_legacy_utc_suffix_is_accepted(self):
        s = DailyResetScheduler()
        self.assertTrue(s.set_reset_time("04:00:00 UTC"))
        self.assertEqual(s.reset_time_text, "04:00:00")

    def test_parse_reset_time_raises(self):
        with self.assertRaises(ValueError):
            parse_reset_time("25:00:00")

    def test_bad_constructor_value_never_raises(self):
        s = DailyResetScheduler("not a time")
        self.assertEqual(s.reset_time_text, "00:00:00")


class TestBoundaryCheck(unittest.TestCase):
    def test_fires_exactly_at_boundary_once_per_day(self):
        for value in ["00:00:00", "06:30:15", "12:00:00", "23:59:59"]:
            with self.subTest(reset=value):
                s = DailyResetScheduler(value, last_checked=at(2024, 3, 1))
                hh, mm, ss = (int(x) for x in value.split(":"))
                day1 = at(2024, 3, 1, hh, mm, ss)
                s.restore(day1 - timedelta(seconds=1))
                self.assertTrue(s.check_and_maybe_reset(day1))
                self.assertFalse(s.check_and_maybe_reset(day1))
                self.assertFalse(s.check_and_maybe_reset(day1 + timedelta(hours=1)))
                day2 = day1 + timedelta(days=1)
                self.assertFalse(s.check_and_maybe_reset(day2 - timedelta(seconds=1)))
                self.assertTrue(s.check_and_maybe_reset(day2))

    def test_same_instant_is_idempotent(self):
        s = DailyResetScheduler("00:00:00", last_checked=at(2024, 3, 1, 23, 0))
        now = at(2024, 3, 2, 0, 5)
        self.assertTrue(s.check_and_maybe_reset(now))
        self.assertFalse(s.check_and_maybe_reset(now))

    def test_multi_day_gap_signals_single_reset(self):
        s = DailyResetScheduler("00:00:00", last_checked=at(2024, 3, 1, 23, 0))
        now = at(2024, 3, 3, 1, 0)
        self.assertTrue(s.check_and_maybe_reset(now))
        self.assertFalse(s.check_and_maybe_reset(now + timedelta(minutes=5)))

    def test_missed_boundary_before_todays_reset_still_fires(self):
        # reset at noon; last check day 1 13:00, next check day 3 01:00 (before day 3 noon)
        s = DailyResetScheduler("12:00:00", last_checked=at(2024, 3, 1, 13, 0))
        self.assertTrue(s.check_and_maybe_reset(at(2024, 3, 3, 1, 0)))
        # and day 3 noon still fires later
        self.assertTrue(s.check_and_maybe_reset(at(2024, 3, 3, 12, 0, 1)))

    def test_no_reset_before_boundary_same_day(self):
        s = DailyResetScheduler("12:00:00", last_checked=at(2024, 3, 1, 8, 0))
        self.assertFalse(s.check_and_maybe_reset(at(2024, 3, 1, 11, 59, 59)))
        self.assertTrue(s.check_and_maybe_reset(at(2024, 3, 1, 12, 0, 0)))

    def test_date_change_before_boundary_after_previous_reset(self):
        s = DailyResetScheduler("12:00:00", last_checked=at(2024, 3, 1, 13, 0))
        # midnight passed but the last boundary (day 1 noon) was already seen
        self.assertFalse(s.check_and_maybe_reset(at(2024, 3, 2, 1, 0)))

    def test_last_checked_never_moves_backwards(self):
        s = DailyResetScheduler("00:00:00", last_checked=at(2024, 3, 2, 10, 0))
        self.assertFalse(s.check_and_maybe_reset(at(2024, 3, 2, 9, 0)))
        self.assertEqual(s.last_checked, at(2024, 3, 2, 10, 0))
        s.check_and_maybe_reset(at(2024, 3, 2, 11, 0))
        self.assertEqual(s.last_checked, at(2024, 3, 2, 11, 0))

    def test_naive_and_offset_datetimes_are_read_as_utc(self):
        s = DailyResetScheduler("00:00:00", last_checked=datetime(2024, 3, 1, 23, 0))
        self.assertEqual(s.last_checked.tzinfo, timezone.utc)
        # 07:30 at UTC+8 on day 2 is 23:30 UTC on day 1: no boundary crossed yet
        plus8 = timezone(timedelta(hours=8))
        self.assertFalse(s.check_and_maybe_reset(datetime(2024, 3, 2, 7, 30, tzinfo=plus8)))
        self.assertTrue(s.check_and_maybe_reset(datetime(2024, 3, 2, 8, 0, 1, tzinfo=plus8)))
