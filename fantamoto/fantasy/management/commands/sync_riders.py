"""
Management command to sync riders from the MotoGP API.

Upserts every rider of the three classes by MotoGP rider uuid, refreshes
market values and deactivates riders no longer in the grid. The run is
recorded as a SyncLog.

Usage:
    python manage.py sync_riders
"""

from django.core.management.base import BaseCommand
from fantasy.flows.orchestrator import riders_sync_job
from ._sync_output import write_header, write_summary


class Command(BaseCommand):
    help = 'Sync MotoGP, Moto2 and Moto3 riders from the MotoGP API'

    def handle(self, *args, **options):
        write_header(self, 'MotoGP Riders Sync')

        summary = riders_sync_job()

        write_summary(self, summary, [
            ('Riders synced', 'synced'),
            ('Created', 'created'),
            ('Updated', 'updated'),
            ('Deactivated', 'deactivated'),
            ('Skipped', 'skipped'),
        ])
