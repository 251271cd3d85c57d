"""
Sync the rider roster from the MotoGP API.

For every rider in the /riders payload:
- Resolve the championship class from the career step category legacy id
- Compute the fantasy market value from career stats
- Upsert by MotoGP rider uuid (created if unknown)
- Deactivate known riders that are no longer in the grid

Architecture:
    1. Fetch the roster (retried on upstream errors)
    2. Save each rider independently; one bad payload never aborts the batch
"""

from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction
from prefect import flow, task, get_run_logger
from prefect.cache_policies import NONE

from fantasy.processing.api_client import MotoGPClient
from fantasy.processing.payloads import RiderPayload
from fantasy.processing.utils import calculate_rider_value, classify_rider_type
from config.rules import CURRENT_CATEGORY_TABLE


@task(
    name="Fetch Riders",
    cache_policy=NONE,
    retries=settings.MOTOGP_TASK_RETRIES,
    retry_delay_seconds=settings.MOTOGP_TASK_RETRY_DELAY
)
def fetch_riders(client: MotoGPClient) -> List[Dict]:
    """Fetch the raw rider roster."""
    logger = get_run_logger()
    riders = client.get_riders()
    logger.info(f"Fetched {len(riders)} riders from MotoGP API")
    return riders


@task(name="Save Riders to DB", cache_policy=NONE)
def save_riders_to_db(raw_riders: List[Dict], category_table: Optional[Dict] = None) -> Dict:
    """
    Upsert riders from raw API payloads.

    Args:
        raw_riders: Rider dicts as returned by the /riders endpoint
        category_table: Versioned category mapping (defaults to the current table)

    Returns:
        dict: Summary with created/updated/deactivated/skipped counts and a
        ``failures`` list for payloads that raised.
    """
    from fantasy.models import Rider

    logger = get_run_logger()
    category_table = category_table or CURRENT_CATEGORY_TABLE
    legacy_ids = category_table['legacy_ids']

    summary = {
        'status': 'success',
        'table_version': category_table.get('version'),
        'total': len(raw_riders),
        'synced': 0,
        'created': 0,
        'updated': 0,
        'deactivated': 0,
        'skipped': 0,
        'failures': [],
    }

    for raw in raw_riders:
        key = raw.get('id') if isinstance(raw, dict) else None
        try:
            payload = RiderPayload.from_api(raw)
            key = payload.full_name or payload.external_id
            existing = Rider.objects.filter(external_id=payload.external_id).first()

            if not payload.in_grid:
                if existing and existing.is_active:
                    existing.is_active = False
                    existing.save(update_fields=['is_active', 'updated_at'])
                    summary['deactivated'] += 1
                    logger.info(f"Deactivated {existing.name}: no longer in the grid")
                else:
                    summary['skipped'] += 1
                continue

            category = legacy_ids.get(payload.legacy_category_id)
            if category is None:
                logger.warning(
                    f"Skipping {key}: unmapped category {payload.legacy_category_id} "
                    f"(table {category_table.get('version')})"
                )
                summary['skipped'] += 1
                continue

            with transaction.atomic():
                rider, created = Rider.objects.update_or_create(
                    external_id=payload.external_id,
                    defaults={
                        'name': payload.full_name,
                        'number': payload.number,
                        'team_name': payload.team_name,
                        'nationality': payload.nationality,
                        'category': category,
                        'value': calculate_rider_value(payload.championships, payload.wins),
                        'is_active': True,
                        'rider_type': classify_rider_type(payload.career_type),
                        'photo_url': payload.photo_url,
                    }
                )

            summary['synced'] += 1
            if created:
                summary['created'] += 1
                logger.info(f"Created rider {rider}")
            else:
                summary['updated'] += 1

        except Exception as e:
            logger.error(f"Error saving rider {key}: {e}")
            summary['failures'].append({'key': str(key), 'error': str(e)})

    if summary['failures']:
        summary['status'] = 'partial'

    logger.info(
        f"Riders synced: {summary['synced']} ({summary['created']} created, "
        f"{summary['updated']} updated), {summary['deactivated']} deactivated, "
        f"{summary['skipped']} skipped, {len(summary['failures'])} failed"
    )
    return summary


@flow(name="Sync Riders", validate_parameters=False)
def sync_riders_flow(
    client: Optional[MotoGPClient] = None,
    category_table: Optional[Dict] = None
) -> Dict:
    """
    Sync all riders of the three classes.

    A failure to fetch the roster propagates; per-rider failures are
    reported in the summary with status 'partial'.
    """
    logger = get_run_logger()
    owns_client = client is None
    client = client or MotoGPClient.from_settings()

    try:
        raw_riders = fetch_riders(client)
    finally:
        if owns_client:
            client.close()

    summary = save_riders_to_db(raw_riders, category_table)
    summary['message'] = (
        f"{summary['synced']} riders synced, {summary['deactivated']} deactivated, "
        f"{summary['skipped']} skipped"
    )
    logger.info(summary['message'])
    return summary
