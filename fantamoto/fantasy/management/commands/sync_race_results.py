"""
Management command to sync race results and recompute scores.

Usage:
    # One race
    python manage.py sync_race_results --race-id 12

    # The race closest to now (last run or next scheduled)
    python manage.py sync_race_results --latest

    # Every race of a season already run
    python manage.py sync_race_results --season-finished --year 2025
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from fantasy.flows.orchestrator import race_results_sync_job
from fantasy.processing.utils import get_finished_races, select_latest_race
from ._sync_output import write_header, write_summary, write_status

RESULT_FIELDS = [
    ('Sessions synced', 'sessions_synced'),
    ('Results created', 'results_created'),
    ('Results updated', 'results_updated'),
    ('Riders skipped', 'riders_skipped'),
    ('Notifications', 'notifications_created'),
]


class Command(BaseCommand):
    help = 'Sync race results from the MotoGP API and recalculate team scores'

    def add_arguments(self, parser):
        target = parser.add_mutually_exclusive_group(required=True)
        target.add_argument(
            '--race-id',
            type=int,
            help='Database id of the race to sync'
        )
        target.add_argument(
            '--latest',
            action='store_true',
            help='Sync the race closest to now'
        )
        target.add_argument(
            '--season-finished',
            action='store_true',
            help='Sync every finished race of --year'
        )
        parser.add_argument(
            '--year',
            type=int,
            default=timezone.now().year,
            help='Season year for --season-finished (default: current year)'
        )

    def handle(self, *args, **options):
        if options.get('season_finished'):
            self.sync_season(options['year'])
            return

        if options.get('latest'):
            race = select_latest_race()
            if race is None:
                raise CommandError('No races in the database. Run sync_calendar first.')
            race_id = race.id
        else:
            race_id = options['race_id']

        write_header(self, f'MotoGP Results Sync - Race {race_id}')
        summary = race_results_sync_job(race_id)

        if summary.get('race_name'):
            self.stdout.write(f'Race: {summary["race_name"]}')
        write_summary(self, summary, RESULT_FIELDS)

    def sync_season(self, year):
        races = get_finished_races(year)
        write_header(self, f'MotoGP Results Sync - {year} Season ({len(races)} finished races)')

        failed = 0
        for i, race in enumerate(races, 1):
            self.stdout.write(f'\n[{i}/{len(races)}] {race.name}')
            summary = race_results_sync_job(race.id)
            if summary['status'] == 'failed':
                failed += 1
                self.stdout.write(self.style.ERROR(f'  ❌ {summary.get("error")}'))
            else:
                self.stdout.write(
                    f'  {summary["results_created"]} created, {summary["results_updated"]} updated, '
                    f'{len(summary["failures"])} categories failed'
                )

        self.stdout.write('')
        write_status(self, {'status': 'partial' if failed else 'success'})
