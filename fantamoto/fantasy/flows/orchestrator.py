"""
Scheduled sync jobs.

Every job wraps one sync flow with a SyncLog:
    1. SyncLog created IN_PROGRESS before the sync starts
    2. COMPLETED with a summary (partial failures kept in details)
    3. FAILED with the error when the sync raises, plus an operator alert

Results polling runs every 30 minutes but only works during a race weekend;
a daily sweep runs ungated. Both re-sync every race whose main session is
within the polling window, each race isolated from the others, and notify
users once results become available.

Usage:
    # Register cron schedules and serve them
    serve_sync_schedules()

    # One-off runs
    riders_sync_job()
    poll_race_results_flow(force=True)
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional

from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from prefect import flow, task, get_run_logger, serve
from prefect.cache_policies import NONE

from fantasy.flows.sync_calendar import sync_calendar_flow
from fantasy.flows.sync_results import sync_race_results_flow
from fantasy.flows.sync_riders import sync_riders_flow
from fantasy.processing.api_client import MotoGPClient
from fantasy.processing.race_weekend import check_race_weekend
from fantasy.processing.utils import get_races_in_polling_window
from config.notifications import send_sync_failure_notification

logger = logging.getLogger(__name__)

RESULTS_NOTIFICATION_TITLE = "Results available!"


def run_with_sync_log(sync_type: str, job: Callable, *args, log_details: Optional[Dict] = None, **kwargs) -> Dict:
    """
    Run ``job`` under a SyncLog.

    The log never stays IN_PROGRESS: it is completed with the job summary or
    failed with the exception. Failures are returned as a summary with
    status 'failed' instead of raised.

    Args:
        sync_type: SyncLog.TYPE_* value
        job: Sync callable returning a summary dict with a 'message'
        log_details: Extra context stored in the log details (e.g. race_id)
    """
    from fantasy.models import SyncLog

    sync_log = SyncLog.objects.create(sync_type=sync_type, details=dict(log_details or {}))

    try:
        summary = job(*args, **kwargs)
    except Exception as e:
        sync_log.mark_failed(e)
        try:
            send_sync_failure_notification(sync_log)
        except Exception as alert_error:
            logger.warning(f"Failed to alert about SyncLog {sync_log.id}: {alert_error}")
        return {
            'status': 'failed',
            'error': str(e),
            'error_type': type(e).__name__,
            'sync_log_id': sync_log.id,
        }

    details = {key: value for key, value in summary.items() if key != 'message'}
    sync_log.mark_completed(summary.get('message', 'Sync completed'), details)
    summary['sync_log_id'] = sync_log.id
    return summary


@flow(name="Riders Sync Job", validate_parameters=False)
def riders_sync_job(client: Optional[MotoGPClient] = None) -> Dict:
    from fantasy.models import SyncLog

    return run_with_sync_log(SyncLog.TYPE_RIDERS, sync_riders_flow, client=client)


@flow(name="Calendar Sync Job", validate_parameters=False)
def calendar_sync_job(
    year: Optional[int] = None,
    finished_only: bool = False,
    client: Optional[MotoGPClient] = None
) -> Dict:
    from fantasy.models import SyncLog

    return run_with_sync_log(
        SyncLog.TYPE_CALENDAR,
        sync_calendar_flow,
        year=year,
        finished_only=finished_only,
        client=client,
        log_details={'year': year or timezone.now().year},
    )


@task(name="Notify Results Available", cache_policy=NONE)
def notify_results_available(race_id: int, now: Optional[datetime] = None) -> int:
    """
    Tell every user with a team in an active league that results are out.

    A user who already has a results notification for this race is skipped,
    so repeated polling creates at most one notification per user and race.

    Returns:
        Number of notifications created
    """
    from django.contrib.auth import get_user_model
    from fantasy.models import Notification, Race

    run_logger = get_run_logger()
    now = now or timezone.now()

    race = Race.objects.filter(id=race_id).first()
    if race is None:
        run_logger.warning(f"Race {race_id} not found, no notifications sent")
        return 0

    users = get_user_model().objects.filter(
        Q(teams__league__start_date__isnull=True) | Q(teams__league__start_date__lte=now),
        Q(teams__league__end_date__isnull=True) | Q(teams__league__end_date__gte=now),
        teams__isnull=False,
    ).distinct().order_by('id')

    created = 0
    for user in users:
        already_notified = Notification.objects.filter(
            user=user,
            notification_type=Notification.TYPE_RACE_RESULTS,
            race=race,
        ).exists()
        if already_notified:
            continue

        Notification.objects.create(
            user=user,
            title=RESULTS_NOTIFICATION_TITLE,
            message=f"The results of {race.name} are now available. Check your scores!",
            notification_type=Notification.TYPE_RACE_RESULTS,
            race=race,
        )
        created += 1

    run_logger.info(f"{created} results notifications created for {race.name}")
    return created


@flow(name="Race Results Sync Job", validate_parameters=False)
def race_results_sync_job(race_id: int, client: Optional[MotoGPClient] = None) -> Dict:
    """Sync one race's results under a SyncLog and notify users when results are in."""
    from fantasy.models import SyncLog

    summary = run_with_sync_log(
        SyncLog.TYPE_RACE_RESULTS,
        sync_race_results_flow,
        race_id,
        client=client,
        log_details={'race_id': race_id},
    )

    summary['notifications_created'] = 0
    if summary['status'] != 'failed' and summary.get('results_available'):
        summary['notifications_created'] = notify_results_available(race_id)
    return summary


@flow(name="Poll Race Results", validate_parameters=False)
def poll_race_results_flow(
    now: Optional[datetime] = None,
    force: bool = False,
    client: Optional[MotoGPClient] = None
) -> Dict:
    """
    Re-sync every race in the polling window.

    Args:
        now: Reference time (defaults to the current time)
        force: Skip the race weekend gate (daily sweep, manual runs)
        client: MotoGP API client shared by every race of the batch
    """
    run_logger = get_run_logger()
    now = now or timezone.now()

    summary = {
        'status': 'success',
        'force': force,
        'race_weekend': None,
        'races_found': 0,
        'races_polled': 0,
        'succeeded': 0,
        'failed': 0,
        'skipped': 0,
        'notifications_created': 0,
        'races': [],
    }

    if not force:
        weekend = check_race_weekend(now)
        if not weekend.is_race_weekend:
            run_logger.info("No race weekend in progress, skipping results polling")
            summary['status'] = 'skipped'
            return summary
        summary['race_weekend'] = weekend.race.name

    races = get_races_in_polling_window(now)
    summary['races_found'] = len(races)
    run_logger.info(f"{len(races)} races in the polling window")

    owns_client = client is None
    client = client or MotoGPClient.from_settings()

    try:
        for race in races:
            if not race.external_event_id:
                run_logger.warning(f"Skipping {race.name}: no external event id")
                summary['skipped'] += 1
                continue

            result = race_results_sync_job(race.id, client=client)
            summary['races_polled'] += 1
            summary['notifications_created'] += result.get('notifications_created', 0)

            if result['status'] == 'failed':
                summary['failed'] += 1
                run_logger.error(f"Results sync failed for {race.name}: {result.get('error')}")
            else:
                summary['succeeded'] += 1

            summary['races'].append({
                'race_id': race.id,
                'race_name': race.name,
                'status': result['status'],
            })
    finally:
        if owns_client:
            client.close()

    if summary['failed']:
        summary['status'] = 'partial'

    run_logger.info(
        f"Results polling done: {summary['succeeded']} succeeded, {summary['failed']} failed, "
        f"{summary['skipped']} skipped, {summary['notifications_created']} notifications"
    )
    return summary


def serve_sync_schedules():
    """Register the cron deployments of every sync job and serve them (blocks)."""
    serve(
        riders_sync_job.to_deployment(name="sync-riders", cron=settings.SYNC_RIDERS_CRON),
        calendar_sync_job.to_deployment(name="sync-calendar", cron=settings.SYNC_CALENDAR_CRON),
        poll_race_results_flow.to_deployment(name="poll-race-results", cron=settings.RESULTS_POLL_CRON),
        poll_race_results_flow.to_deployment(
            name="sweep-race-results",
            cron=settings.RESULTS_SWEEP_CRON,
            parameters={'force': True},
        ),
    )
