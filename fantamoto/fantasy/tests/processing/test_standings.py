"""
Tests for standings (lower totals rank first).
"""

from django.test import SimpleTestCase, TestCase
from fantasy.models import League, TeamScore
from fantasy.processing.standings import rank_team_totals, race_standings, league_standings
from fantasy.tests.processing.test_base import make_race, make_team


class RankTeamTotalsTests(SimpleTestCase):

    def test_lower_total_ranks_first(self):
        rows = [{'team_id': 1, 'total_points': 55}, {'team_id': 2, 'total_points': 40}]

        ranked = rank_team_totals(rows)

        self.assertEqual([row['team_id'] for row in ranked], [2, 1])
        self.assertEqual([row['position'] for row in ranked], [1, 2])

    def test_ties_keep_input_order(self):
        rows = [
            {'team_id': 3, 'total_points': 30},
            {'team_id': 1, 'total_points': 30},
            {'team_id': 2, 'total_points': 10},
        ]

        ranked = rank_team_totals(rows)

        self.assertEqual([row['team_id'] for row in ranked], [2, 3, 1])


class StandingsQueryTests(TestCase):

    def setUp(self):
        self.league = League.objects.create(name='Paddock League')
        self.team_a = make_team('alice', league=self.league)
        self.team_b = make_team('bob', league=self.league)
        self.race = make_race(round_number=1)
        self.other_race = make_race('Second GP', days_from_now=7, round_number=2)

        TeamScore.objects.create(team=self.team_a, race=self.race, session='MAIN', total_points=55)
        TeamScore.objects.create(team=self.team_b, race=self.race, session='MAIN', total_points=40)
        TeamScore.objects.create(team=self.team_a, race=self.race, session='SPRINT', total_points=10)
        TeamScore.objects.create(team=self.team_b, race=self.other_race, session='MAIN', total_points=30)

    def test_race_standings_for_one_session(self):
        standings = race_standings(self.race.id, 'MAIN')

        self.assertEqual([row['team_id'] for row in standings], [self.team_b.id, self.team_a.id])
        self.assertEqual(standings[0]['total_points'], 40)

    def test_race_standings_sum_sessions(self):
        standings = race_standings(self.race.id)

        totals = {row['team_id']: row['total_points'] for row in standings}
        self.assertEqual(totals, {self.team_a.id: 65, self.team_b.id: 40})

    def test_league_standings(self):
        standings = league_standings(self.league.id)

        self.assertEqual(
            [(row['team_name'], row['total_points']) for row in standings],
            [('alice team', 65), ('bob team', 70)]
        )
        self.assertEqual(standings[0]['sessions_scored'], 2)
        self.assertEqual(standings[0]['position'], 1)

    def test_unscored_teams_listed_last(self):
        make_team('carol', league=self.league)

        standings = league_standings(self.league.id)

        self.assertEqual(standings[-1]['team_name'], 'carol team')
        self.assertEqual(standings[-1]['position'], 3)
