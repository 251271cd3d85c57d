"""
Management command to serve the cron-scheduled sync jobs with Prefect.

Schedules (configurable in settings):
- Riders: Monday 03:00
- Calendar: Tuesday 03:00
- Results polling: every 30 minutes during race weekends
- Results sweep: daily 06:00

Usage:
    python manage.py serve_sync_schedules
"""

from django.conf import settings
from django.core.management.base import BaseCommand
from fantasy.flows.orchestrator import serve_sync_schedules


class Command(BaseCommand):
    help = 'Serve the scheduled sync jobs (blocks until interrupted)'

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Serving sync schedules:'))
        self.stdout.write(f'  sync-riders         {settings.SYNC_RIDERS_CRON}')
        self.stdout.write(f'  sync-calendar       {settings.SYNC_CALENDAR_CRON}')
        self.stdout.write(f'  poll-race-results   {settings.RESULTS_POLL_CRON}')
        self.stdout.write(f'  sweep-race-results  {settings.RESULTS_SWEEP_CRON}')

        serve_sync_schedules()
