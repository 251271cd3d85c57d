"""
Tests for race weekend detection.
"""

from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace
from django.test import SimpleTestCase, TestCase
from fantasy.processing.race_weekend import detect_race_weekend, check_race_weekend
from fantasy.tests.processing.test_base import make_race

NOW = datetime(2025, 6, 27, 12, 0, tzinfo=dt_timezone.utc)


def race_at(name, delta):
    return SimpleNamespace(name=name, race_date=NOW + delta)


class DetectRaceWeekendTests(SimpleTestCase):

    def test_next_race_in_two_days_is_active(self):
        upcoming = race_at('Dutch GP', timedelta(days=2))

        status = detect_race_weekend(NOW, [upcoming])

        self.assertTrue(status.is_race_weekend)
        self.assertIs(status.race, upcoming)
        self.assertEqual(status.days_away, 2)
        self.assertTrue(status.upcoming)

    def test_races_five_days_away_are_inactive(self):
        races = [race_at('Past GP', timedelta(days=-5)), race_at('Next GP', timedelta(days=5))]

        status = detect_race_weekend(NOW, races)

        self.assertFalse(status.is_race_weekend)
        self.assertIsNone(status.race)

    def test_last_race_within_two_days_is_active(self):
        finished = race_at('Italian GP', timedelta(days=-1, hours=-6))

        status = detect_race_weekend(NOW, [finished, race_at('Far GP', timedelta(days=14))])

        self.assertTrue(status.is_race_weekend)
        self.assertIs(status.race, finished)
        self.assertEqual(status.days_away, 2)
        self.assertFalse(status.upcoming)

    def test_day_distance_is_rounded_up(self):
        """3 days and 1 hour away counts as 4 days"""
        status = detect_race_weekend(NOW, [race_at('GP', timedelta(days=3, hours=1))])

        self.assertFalse(status.is_race_weekend)

    def test_exactly_three_days_ahead_is_active(self):
        status = detect_race_weekend(NOW, [race_at('GP', timedelta(days=3))])

        self.assertTrue(status.is_race_weekend)

    def test_next_race_takes_precedence(self):
        finished = race_at('Last GP', timedelta(days=-1))
        upcoming = race_at('Next GP', timedelta(days=1))

        status = detect_race_weekend(NOW, [finished, upcoming])

        self.assertIs(status.race, upcoming)

    def test_nearest_races_are_used(self):
        races = [
            race_at('Far Future', timedelta(days=20)),
            race_at('Near Future', timedelta(days=3)),
            race_at('Old', timedelta(days=-30)),
        ]

        status = detect_race_weekend(NOW, races)

        self.assertEqual(status.race.name, 'Near Future')

    def test_no_races(self):
        self.assertFalse(detect_race_weekend(NOW, []).is_race_weekend)


class CheckRaceWeekendTests(TestCase):

    def test_uses_races_from_database(self):
        make_race('Far GP', days_from_now=10, round_number=2)
        race = make_race('Close GP', days_from_now=1, round_number=1)

        status = check_race_weekend()

        self.assertTrue(status.is_race_weekend)
        self.assertEqual(status.race, race)

    def test_inactive_without_close_races(self):
        make_race('Past GP', days_from_now=-6, round_number=1)
        make_race('Next GP', days_from_now=6, round_number=2)

        self.assertFalse(check_race_weekend().is_race_weekend)
