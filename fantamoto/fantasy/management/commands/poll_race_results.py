"""
Management command to poll results of the races around now.

Without --force nothing happens outside a race weekend.

Usage:
    python manage.py poll_race_results
    python manage.py poll_race_results --force
"""

from django.core.management.base import BaseCommand
from fantasy.flows.orchestrator import poll_race_results_flow
from ._sync_output import write_header, write_summary


class Command(BaseCommand):
    help = 'Sync results of every race in the polling window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Poll even when no race weekend is in progress'
        )

    def handle(self, *args, **options):
        force = options.get('force', False)

        notes = ['FORCE MODE: race weekend check skipped'] if force else []
        write_header(self, 'MotoGP Results Polling', notes)

        summary = poll_race_results_flow(force=force)

        if summary['status'] == 'skipped':
            self.stdout.write(self.style.WARNING('No race weekend in progress, nothing polled'))
            return

        for race in summary['races']:
            self.stdout.write(f'  {race["race_name"]}: {race["status"]}')

        write_summary(self, summary, [
            ('Races in window', 'races_found'),
            ('Races polled', 'races_polled'),
            ('Succeeded', 'succeeded'),
            ('Failed', 'failed'),
            ('Notifications', 'notifications_created'),
        ])
