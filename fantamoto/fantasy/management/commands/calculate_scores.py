"""
Management command to recalculate team scores for a race.

Usage:
    # Main race, plus sprint when the race has one
    python manage.py calculate_scores --race-id 12

    # One session only
    python manage.py calculate_scores --race-id 12 --session SPRINT
"""

from django.core.management.base import BaseCommand, CommandError
from fantasy.flows.calculate_scores import calculate_scores_flow
from fantasy.models import Race, SessionType


class Command(BaseCommand):
    help = 'Recalculate team scores of a race from the stored results'

    def add_arguments(self, parser):
        parser.add_argument(
            '--race-id',
            type=int,
            required=True,
            help='Database id of the race'
        )
        parser.add_argument(
            '--session',
            choices=SessionType.values,
            help='Session to score (default: main race and sprint if any)'
        )

    def handle(self, *args, **options):
        race_id = options['race_id']

        if not Race.objects.filter(id=race_id).exists():
            raise CommandError(f'Race {race_id} not found')

        summary = calculate_scores_flow(race_id=race_id, session=options.get('session'))

        for session, result in summary['sessions'].items():
            if result['status'] == 'skipped':
                self.stdout.write(self.style.WARNING(f'{session}: skipped ({result["reason"]})'))
                continue

            self.stdout.write(self.style.SUCCESS(f'{session}: {result["teams_scored"]} teams scored'))
            for score in sorted(result['scores'], key=lambda s: s['total_points']):
                self.stdout.write(f'  Team {score["team_id"]}: {score["total_points"]} pts')
