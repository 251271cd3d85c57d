"""
Management command to sync the race calendar of a season.

Usage:
    # Current season
    python manage.py sync_calendar

    # Specific season, only events already run
    python manage.py sync_calendar --year 2024 --finished-only
"""

from django.core.management.base import BaseCommand
from django.utils import timezone
from fantasy.flows.orchestrator import calendar_sync_job
from ._sync_output import write_header, write_summary


class Command(BaseCommand):
    help = 'Sync the MotoGP race calendar into the database'

    def add_arguments(self, parser):
        parser.add_argument(
            '--year',
            type=int,
            default=timezone.now().year,
            help='Season year (default: current year)'
        )
        parser.add_argument(
            '--finished-only',
            action='store_true',
            help='Only sync events that are already finished'
        )

    def handle(self, *args, **options):
        year = options['year']
        finished_only = options.get('finished_only', False)

        notes = ['Finished events only'] if finished_only else []
        write_header(self, f'MotoGP Calendar Sync - {year} Season', notes)

        summary = calendar_sync_job(year=year, finished_only=finished_only)

        write_summary(self, summary, [
            ('Events found', 'events_found'),
            ('Races created', 'created'),
            ('Races updated', 'updated'),
            ('Test events skipped', 'skipped_tests'),
            ('Date fallbacks', 'session_time_fallbacks'),
        ])
