"""
Tests for persisting team scores from stored results and lineups.
"""

from datetime import timedelta
from django.test import TestCase
from fantasy.flows.calculate_scores import calculate_scores_flow, score_race_session
from fantasy.models import RaceResult, TeamScore
from fantasy.tests.processing.test_base import (
    InlineTasksMixin,
    make_lineup,
    make_race,
    make_rider,
    make_team,
)


class ScoreRaceSessionTests(TestCase):

    def setUp(self):
        self.race = make_race(days_from_now=-1)
        self.bezzecchi = make_rider('Marco Bezzecchi')
        self.martin = make_rider('Jorge Martin')
        self.moreira = make_rider('Diogo Moreira', category='MOTO2')
        self.team_a = make_team('alice')
        self.team_b = make_team('bob')

        RaceResult.objects.create(race=self.race, rider=self.bezzecchi, session='MAIN', category='MOTOGP', position=1)
        RaceResult.objects.create(
            race=self.race, rider=self.martin, session='MAIN', category='MOTOGP',
            position=None, status=RaceResult.STATUS_DNS
        )
        # no Moto2 line: Moreira scores the fallback penalty

        make_lineup(self.team_a, self.race, [(self.bezzecchi, 1), (self.moreira, 10)])
        make_lineup(self.team_b, self.race, [(self.bezzecchi, 4), (self.martin, 2)])

    def test_scores_every_lineup(self):
        summary = score_race_session(self.race.id, 'MAIN')

        self.assertEqual(summary['status'], 'success')
        self.assertEqual(summary['teams_scored'], 2)

        # 1 + (25 + 15)
        self.assertEqual(TeamScore.objects.get(team=self.team_a).total_points, 41)
        # (1 + 3) + (2 + 0): DNS takes max MotoGP position + 1
        self.assertEqual(TeamScore.objects.get(team=self.team_b).total_points, 6)

    def test_breakdown(self):
        score_race_session(self.race.id, 'MAIN')

        breakdown = TeamScore.objects.get(team=self.team_b).breakdown
        self.assertEqual(breakdown[1], {
            'rider_id': self.martin.id,
            'rider_name': 'Jorge Martin',
            'category': 'MOTOGP',
            'predicted_position': 2,
            'actual_position': None,
            'status': 'DNS',
            'base_points': 2,
            'delta': 0,
            'points': 2,
        })

    def test_rescoring_is_idempotent(self):
        def stored_scores():
            return list(
                TeamScore.objects.order_by('team_id', 'session')
                .values('team_id', 'session', 'total_points', 'breakdown')
            )

        first = score_race_session(self.race.id, 'MAIN')
        stored_after_first = stored_scores()
        second = score_race_session(self.race.id, 'MAIN')

        self.assertEqual(first['scores'], second['scores'])
        self.assertEqual(stored_scores(), stored_after_first)
        self.assertEqual(len(stored_after_first), 2)
        self.assertEqual(len(stored_after_first[0]['breakdown']), 2)

    def test_rescoring_picks_up_corrected_results(self):
        score_race_session(self.race.id, 'MAIN')
        RaceResult.objects.filter(rider=self.bezzecchi).update(position=4)

        score_race_session(self.race.id, 'MAIN')

        # Bezzecchi now P4 for both teams
        self.assertEqual(TeamScore.objects.get(team=self.team_b).total_points, 4 + (5 + 3))

    def test_session_without_results_is_skipped(self):
        summary = score_race_session(self.race.id, 'SPRINT')

        self.assertEqual(summary['status'], 'skipped')
        self.assertEqual(summary['reason'], 'no_results')
        self.assertFalse(TeamScore.objects.filter(session='SPRINT').exists())

    def test_unknown_race_is_skipped(self):
        summary = score_race_session(999, 'MAIN')

        self.assertEqual(summary['reason'], 'race_not_found')


class CalculateScoresFlowTests(InlineTasksMixin, TestCase):

    def test_scores_main_and_sprint(self):
        race = make_race(days_from_now=-1)
        race.sprint_date = race.race_date - timedelta(days=1)
        race.save()
        rider = make_rider('Fabio Quartararo')
        make_lineup(make_team('alice'), race, [(rider, 3)])
        RaceResult.objects.create(race=race, rider=rider, session='MAIN', category='MOTOGP', position=3)
        RaceResult.objects.create(race=race, rider=rider, session='SPRINT', category='MOTOGP', position=5)

        summary = calculate_scores_flow.fn(race.id)

        self.assertEqual(sorted(summary['sessions']), ['MAIN', 'SPRINT'])
        self.assertEqual(TeamScore.objects.get(session='MAIN').total_points, 3)
        self.assertEqual(TeamScore.objects.get(session='SPRINT').total_points, 7)

    def test_single_session(self):
        race = make_race(days_from_now=-1)

        summary = calculate_scores_flow.fn(race.id, session='MAIN')

        self.assertEqual(list(summary['sessions']), ['MAIN'])
        self.assertEqual(summary['sessions']['MAIN']['status'], 'skipped')
