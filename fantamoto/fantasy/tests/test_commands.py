"""
Tests for the sync management commands.

The sync jobs are patched; these tests cover argument handling and output.
"""

from io import StringIO
from unittest import mock
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from fantasy.models import SyncLog
from fantasy.tests.processing.test_base import make_race

COMMANDS = 'fantasy.management.commands'


def run(*args, **kwargs):
    out = StringIO()
    call_command(*args, stdout=out, **kwargs)
    return out.getvalue()


class SyncRidersCommandTests(TestCase):

    @mock.patch(f'{COMMANDS}.sync_riders.riders_sync_job')
    def test_prints_summary(self, mock_job):
        mock_job.return_value = {
            'status': 'partial',
            'synced': 60,
            'created': 2,
            'failures': [{'key': 'uuid-x', 'error': 'bad payload'}],
        }

        output = run('sync_riders')

        self.assertIn('Riders synced:', output)
        self.assertIn('60', output)
        self.assertIn('uuid-x: bad payload', output)
        self.assertIn('Status: PARTIAL', output)

    @mock.patch(f'{COMMANDS}.sync_riders.riders_sync_job')
    def test_failed_job_raises_command_error(self, mock_job):
        mock_job.return_value = {'status': 'failed', 'error': 'riders endpoint answered 503'}

        with self.assertRaisesMessage(CommandError, 'riders endpoint answered 503'):
            run('sync_riders')


class SyncCalendarCommandTests(TestCase):

    @mock.patch(f'{COMMANDS}.sync_calendar.calendar_sync_job')
    def test_passes_options(self, mock_job):
        mock_job.return_value = {'status': 'success', 'created': 21}

        output = run('sync_calendar', year=2024, finished_only=True)

        mock_job.assert_called_once_with(year=2024, finished_only=True)
        self.assertIn('2024 Season', output)
        self.assertIn('Finished events only', output)
        self.assertIn('Status: SUCCESS', output)


class SyncRaceResultsCommandTests(TestCase):

    def setUp(self):
        self.finished = make_race('Past GP', days_from_now=-7, round_number=1)
        self.upcoming = make_race('Next GP', days_from_now=14, round_number=2)
        self.summary = {
            'status': 'success',
            'race_name': 'Past GP',
            'results_created': 40,
            'results_updated': 0,
            'failures': [],
        }

    @mock.patch(f'{COMMANDS}.sync_race_results.race_results_sync_job')
    def test_race_id(self, mock_job):
        mock_job.return_value = self.summary

        output = run('sync_race_results', race_id=self.finished.id)

        mock_job.assert_called_once_with(self.finished.id)
        self.assertIn('Race: Past GP', output)

    @mock.patch(f'{COMMANDS}.sync_race_results.race_results_sync_job')
    def test_latest(self, mock_job):
        mock_job.return_value = self.summary

        run('sync_race_results', latest=True)

        mock_job.assert_called_once_with(self.finished.id)

    @mock.patch(f'{COMMANDS}.sync_race_results.race_results_sync_job')
    def test_season_finished(self, mock_job):
        mock_job.return_value = self.summary

        output = run('sync_race_results', season_finished=True, year=2025)

        mock_job.assert_called_once_with(self.finished.id)
        self.assertIn('1 finished races', output)
        self.assertIn('Status: SUCCESS', output)

    @mock.patch(f'{COMMANDS}.sync_race_results.race_results_sync_job')
    def test_season_with_failure_is_partial(self, mock_job):
        mock_job.return_value = {'status': 'failed', 'error': 'timeout'}

        output = run('sync_race_results', season_finished=True, year=2025)

        self.assertIn('timeout', output)
        self.assertIn('Status: PARTIAL', output)

    def test_latest_without_races(self):
        self.finished.delete()
        self.upcoming.delete()

        with self.assertRaisesMessage(CommandError, 'No races in the database'):
            run('sync_race_results', latest=True)


class CalculateScoresCommandTests(TestCase):

    @mock.patch(f'{COMMANDS}.calculate_scores.calculate_scores_flow')
    def test_prints_scores(self, mock_flow):
        race = make_race()
        mock_flow.return_value = {
            'race_id': race.id,
            'sessions': {
                'MAIN': {
                    'status': 'success',
                    'teams_scored': 2,
                    'scores': [{'team_id': 1, 'total_points': 50}, {'team_id': 2, 'total_points': 31}],
                },
                'SPRINT': {'status': 'skipped', 'reason': 'no_results'},
            },
        }

        output = run('calculate_scores', race_id=race.id)

        mock_flow.assert_called_once_with(race_id=race.id, session=None)
        self.assertIn('MAIN: 2 teams scored', output)
        self.assertLess(output.index('Team 2: 31 pts'), output.index('Team 1: 50 pts'))
        self.assertIn('SPRINT: skipped (no_results)', output)

    def test_unknown_race(self):
        with self.assertRaisesMessage(CommandError, 'Race 999 not found'):
            run('calculate_scores', race_id=999)


class PollRaceResultsCommandTests(TestCase):

    @mock.patch(f'{COMMANDS}.poll_race_results.poll_race_results_flow')
    def test_outside_race_weekend(self, mock_flow):
        mock_flow.return_value = {'status': 'skipped', 'races': []}

        output = run('poll_race_results')

        mock_flow.assert_called_once_with(force=False)
        self.assertIn('nothing polled', output)

    @mock.patch(f'{COMMANDS}.poll_race_results.poll_race_results_flow')
    def test_force(self, mock_flow):
        mock_flow.return_value = {
            'status': 'success',
            'races_polled': 1,
            'races': [{'race_id': 1, 'race_name': 'Dutch TT', 'status': 'success'}],
        }

        output = run('poll_race_results', force=True)

        mock_flow.assert_called_once_with(force=True)
        self.assertIn('FORCE MODE', output)
        self.assertIn('Dutch TT: success', output)


class SyncStatusCommandTests(TestCase):

    def test_report(self):
        failed = SyncLog.objects.create(sync_type=SyncLog.TYPE_CALENDAR)
        failed.mark_failed(RuntimeError('season not found'))
        make_race('Next GP', days_from_now=10)

        output = run('sync_status')

        self.assertIn('RIDERS', output)
        self.assertIn('never run', output)
        self.assertIn('season not found', output)
        self.assertIn('Past races without results: 0', output)
        self.assertIn('Next race: Next GP', output)
        self.assertIn('Race weekend: no', output)


class ServeSyncSchedulesCommandTests(TestCase):

    @mock.patch(f'{COMMANDS}.serve_sync_schedules.serve_sync_schedules')
    def test_serves(self, mock_serve):
        output = run('serve_sync_schedules')

        mock_serve.assert_called_once_with()
        self.assertIn('poll-race-results', output)
