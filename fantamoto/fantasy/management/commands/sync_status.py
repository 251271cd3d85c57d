"""
Management command to show the state of the sync pipeline.

Usage:
    python manage.py sync_status
"""

from django.core.management.base import BaseCommand
from fantasy.processing.race_weekend import check_race_weekend
from fantasy.processing.utils import get_sync_status


class Command(BaseCommand):
    help = 'Show the latest syncs, races missing results and the race weekend status'

    def handle(self, *args, **options):
        status = get_sync_status()

        self.stdout.write(self.style.SUCCESS('Last syncs:'))
        for sync_type, log in status['last_syncs'].items():
            if log is None:
                self.stdout.write(f'  {sync_type:<14} never run')
                continue
            line = f'  {sync_type:<14} {log["status"]:<12} {log["created_at"]:%Y-%m-%d %H:%M}  {log["message"]}'
            if log['status'] == 'FAILED':
                self.stdout.write(self.style.ERROR(line))
            else:
                self.stdout.write(line)

        missing = status['races_without_results']
        style = self.style.WARNING if missing else self.style.SUCCESS
        self.stdout.write(style(f'\nPast races without results: {missing}'))

        next_race = status['next_race']
        if next_race:
            self.stdout.write(f'Next race: {next_race.name} on {next_race.race_date:%Y-%m-%d %H:%M}')
        else:
            self.stdout.write('Next race: none scheduled')

        weekend = check_race_weekend()
        if weekend.is_race_weekend:
            self.stdout.write(self.style.SUCCESS(f'Race weekend: {weekend.race.name}'))
        else:
            self.stdout.write('Race weekend: no')
