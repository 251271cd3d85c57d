"""
Tests for the scheduled sync jobs: SyncLog bookkeeping, results
notifications and race weekend gated polling.
"""

from datetime import timedelta
from unittest import mock
from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from fantasy.flows import orchestrator
from fantasy.flows.orchestrator import (
    notify_results_available,
    poll_race_results_flow,
    race_results_sync_job,
    riders_sync_job,
    run_with_sync_log,
)
from fantasy.models import League, Notification, SyncLog, Team
from fantasy.processing.exceptions import UpstreamUnavailable
from fantasy.tests.processing.test_base import InlineTasksMixin, make_race, make_team


def make_team_for_user(user, name):
    league = League.objects.create(name=f'{name} league')
    return Team.objects.create(name=name, user=user, league=league)


class RunWithSyncLogTests(TestCase):

    def test_success_completes_log(self):
        job = mock.Mock(return_value={'status': 'success', 'message': '3 riders synced', 'synced': 3})

        summary = run_with_sync_log(SyncLog.TYPE_RIDERS, job, 'arg', log_details={'year': 2025}, flag=True)

        job.assert_called_once_with('arg', flag=True)
        sync_log = SyncLog.objects.get(id=summary['sync_log_id'])
        self.assertEqual(sync_log.status, SyncLog.STATUS_COMPLETED)
        self.assertEqual(sync_log.message, '3 riders synced')
        self.assertEqual(sync_log.details, {'year': 2025, 'status': 'success', 'synced': 3})

    def test_partial_summary_keeps_failures(self):
        job = mock.Mock(return_value={
            'status': 'partial',
            'message': 'Calendar 2025: 1 created',
            'failures': [{'key': 'TBC', 'error': 'No date'}],
        })

        summary = run_with_sync_log(SyncLog.TYPE_CALENDAR, job)

        sync_log = SyncLog.objects.get(id=summary['sync_log_id'])
        self.assertEqual(sync_log.status, SyncLog.STATUS_COMPLETED)
        self.assertEqual(sync_log.details['failures'][0]['key'], 'TBC')

    @mock.patch('fantasy.flows.orchestrator.send_sync_failure_notification')
    def test_failure_fails_log_and_alerts(self, mock_alert):
        job = mock.Mock(side_effect=UpstreamUnavailable('riders endpoint answered 503'))

        summary = run_with_sync_log(SyncLog.TYPE_RIDERS, job)

        self.assertEqual(summary['status'], 'failed')
        self.assertEqual(summary['error_type'], 'UpstreamUnavailable')
        sync_log = SyncLog.objects.get(id=summary['sync_log_id'])
        self.assertEqual(sync_log.status, SyncLog.STATUS_FAILED)
        self.assertEqual(sync_log.message, 'riders endpoint answered 503')
        mock_alert.assert_called_once_with(sync_log)

    @mock.patch('fantasy.flows.orchestrator.send_sync_failure_notification', side_effect=RuntimeError('slack down'))
    def test_alert_failure_is_not_raised(self, mock_alert):
        job = mock.Mock(side_effect=ValueError('boom'))

        summary = run_with_sync_log(SyncLog.TYPE_RIDERS, job)

        self.assertEqual(summary['status'], 'failed')
        self.assertEqual(SyncLog.objects.get().status, SyncLog.STATUS_FAILED)


class RidersSyncJobTests(InlineTasksMixin, TestCase):

    def test_wraps_rider_sync(self):
        client = mock.Mock()
        client.get_riders.return_value = []

        summary = riders_sync_job.fn(client=client)

        self.assertEqual(summary['status'], 'success')
        sync_log = SyncLog.objects.get(id=summary['sync_log_id'])
        self.assertEqual(sync_log.sync_type, SyncLog.TYPE_RIDERS)
        self.assertEqual(sync_log.status, SyncLog.STATUS_COMPLETED)


class NotifyResultsAvailableTests(InlineTasksMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.race = make_race('Dutch TT', days_from_now=-1)
        now = timezone.now()

        self.alice = make_team('alice').user
        ended = League.objects.create(name='Last season', end_date=now - timedelta(days=30))
        self.bob = make_team('bob', league=ended).user
        upcoming = League.objects.create(name='Next season', start_date=now + timedelta(days=30))
        self.carol = make_team('carol', league=upcoming).user
        self.dave = get_user_model().objects.create_user(username='dave', password='test-pass')
        running = League.objects.create(
            name='Running', start_date=now - timedelta(days=30), end_date=now + timedelta(days=30)
        )
        erin_team = make_team('erin', league=running)
        self.erin = erin_team.user
        make_team_for_user(self.erin, 'erin second team')

    def test_notifies_users_with_team_in_active_league(self):
        created = notify_results_available.fn(self.race.id)

        self.assertEqual(created, 2)
        notified = set(Notification.objects.values_list('user__username', flat=True))
        self.assertEqual(notified, {'alice', 'erin'})

        notification = Notification.objects.get(user=self.alice)
        self.assertEqual(notification.title, 'Results available!')
        self.assertEqual(
            notification.message,
            'The results of Dutch TT are now available. Check your scores!'
        )
        self.assertEqual(notification.notification_type, Notification.TYPE_RACE_RESULTS)
        self.assertFalse(notification.is_read)

    def test_second_run_creates_nothing(self):
        notify_results_available.fn(self.race.id)

        self.assertEqual(notify_results_available.fn(self.race.id), 0)
        self.assertEqual(Notification.objects.count(), 2)

    def test_other_race_is_notified_separately(self):
        notify_results_available.fn(self.race.id)
        other = make_race('Czech Grand Prix', days_from_now=-8, round_number=2)

        self.assertEqual(notify_results_available.fn(other.id), 2)

    def test_same_grand_prix_next_season_is_notified(self):
        qatar_2025 = make_race('Grand Prix of Qatar', days_from_now=-370, season=2025, round_number=4)
        qatar_2026 = make_race('Grand Prix of Qatar', days_from_now=-5, season=2026, round_number=4)

        self.assertEqual(notify_results_available.fn(qatar_2025.id), 2)
        self.assertEqual(notify_results_available.fn(qatar_2026.id), 2)
        self.assertEqual(Notification.objects.filter(race=qatar_2026).count(), 2)

    def test_race_named_inside_earlier_race_name_is_notified(self):
        spain = make_race('Grand Prix of Spain', days_from_now=-20, round_number=5)
        short_name = make_race('Spain', days_from_now=-6, round_number=6)

        notify_results_available.fn(spain.id)

        self.assertEqual(notify_results_available.fn(short_name.id), 2)

    def test_notification_is_linked_to_race(self):
        notify_results_available.fn(self.race.id)

        self.assertEqual(Notification.objects.get(user=self.alice).race, self.race)
        self.run_logger.info.assert_called_with('2 results notifications created for Dutch TT')

    def test_unknown_race(self):
        self.assertEqual(notify_results_available.fn(999), 0)
        self.run_logger.warning.assert_called_once_with('Race 999 not found, no notifications sent')


class RaceResultsSyncJobTests(InlineTasksMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.race = make_race('Dutch TT', days_from_now=-1, external_event_id='ev-assen')
        make_team('alice')
        self.client = mock.Mock()

    def test_notifies_when_results_available(self):
        result = {'status': 'success', 'message': 'done', 'results_available': True}
        with mock.patch.object(orchestrator, 'sync_race_results_flow', return_value=result) as mock_sync:
            summary = race_results_sync_job.fn(self.race.id, client=self.client)

        mock_sync.assert_called_once_with(self.race.id, client=self.client)
        self.assertEqual(summary['notifications_created'], 1)
        sync_log = SyncLog.objects.get(id=summary['sync_log_id'])
        self.assertEqual(sync_log.details['race_id'], self.race.id)

    def test_no_notification_without_results(self):
        result = {'status': 'success', 'message': 'done', 'results_available': False}
        with mock.patch.object(orchestrator, 'sync_race_results_flow', return_value=result):
            summary = race_results_sync_job.fn(self.race.id, client=self.client)

        self.assertEqual(summary['notifications_created'], 0)
        self.assertEqual(Notification.objects.count(), 0)

    def test_failed_sync_is_logged_not_raised(self):
        with mock.patch.object(orchestrator, 'sync_race_results_flow', side_effect=UpstreamUnavailable('down')):
            summary = race_results_sync_job.fn(self.race.id, client=self.client)

        self.assertEqual(summary['status'], 'failed')
        self.assertEqual(summary['notifications_created'], 0)
        self.assertEqual(SyncLog.objects.get().status, SyncLog.STATUS_FAILED)


class PollRaceResultsFlowTests(InlineTasksMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = mock.Mock()
        self.job_patcher = mock.patch.object(
            orchestrator, 'race_results_sync_job',
            return_value={'status': 'success', 'notifications_created': 2}
        )
        self.mock_job = self.job_patcher.start()

    def tearDown(self):
        self.job_patcher.stop()
        super().tearDown()

    def test_skipped_outside_race_weekend(self):
        make_race('Far away GP', days_from_now=10, external_event_id='ev-far')

        summary = poll_race_results_flow.fn(client=self.client)

        self.assertEqual(summary['status'], 'skipped')
        self.mock_job.assert_not_called()

    def test_polls_races_during_race_weekend(self):
        race = make_race('Dutch TT', days_from_now=1, external_event_id='ev-assen')

        summary = poll_race_results_flow.fn(client=self.client)

        self.assertEqual(summary['race_weekend'], 'Dutch TT')
        self.assertEqual(summary['races_polled'], 1)
        self.assertEqual(summary['succeeded'], 1)
        self.assertEqual(summary['notifications_created'], 2)
        self.mock_job.assert_called_once_with(race.id, client=self.client)

    def test_force_skips_gate(self):
        # just outside the weekend window, still inside the polling window
        make_race('Last weekend GP', days_from_now=-2.5, external_event_id='ev-last')

        summary = poll_race_results_flow.fn(force=True, client=self.client)

        self.assertEqual(summary['status'], 'success')
        self.assertEqual(summary['races_polled'], 1)

    def test_race_without_event_id_is_skipped(self):
        make_race('Unlinked GP', days_from_now=-1)

        summary = poll_race_results_flow.fn(force=True, client=self.client)

        self.assertEqual(summary['skipped'], 1)
        self.mock_job.assert_not_called()

    def test_failure_is_isolated_per_race(self):
        make_race('First GP', days_from_now=-2, external_event_id='ev-1', round_number=1)
        make_race('Second GP', days_from_now=1, external_event_id='ev-2', round_number=2)
        self.mock_job.side_effect = [
            {'status': 'failed', 'error': 'down', 'notifications_created': 0},
            {'status': 'success', 'notifications_created': 1},
        ]

        summary = poll_race_results_flow.fn(force=True, client=self.client)

        self.assertEqual(summary['status'], 'partial')
        self.assertEqual(summary['failed'], 1)
        self.assertEqual(summary['succeeded'], 1)
        self.assertEqual([race['status'] for race in summary['races']], ['failed', 'success'])


class ServeSyncSchedulesTests(TestCase):

    @mock.patch('fantasy.flows.orchestrator.serve')
    def test_registers_every_deployment(self, mock_serve):
        with mock.patch.object(orchestrator.riders_sync_job, 'to_deployment') as riders, \
                mock.patch.object(orchestrator.calendar_sync_job, 'to_deployment') as calendar, \
                mock.patch.object(orchestrator.poll_race_results_flow, 'to_deployment') as poll:
            orchestrator.serve_sync_schedules()

        self.assertEqual(len(mock_serve.call_args.args), 4)
        riders.assert_called_once_with(name='sync-riders', cron=settings.SYNC_RIDERS_CRON)
        calendar.assert_called_once()
        names = [call.kwargs['name'] for call in poll.call_args_list]
        self.assertEqual(names, ['poll-race-results', 'sweep-race-results'])
        self.assertEqual(poll.call_args_list[1].kwargs['parameters'], {'force': True})
