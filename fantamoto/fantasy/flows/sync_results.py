"""
Sync race results from the MotoGP results API.

For one race, every category of the category table is processed on its own:
    1. List the sessions of (event, category)
    2. Pick the main race (RAC) and sprint (SPR) sessions when present
    3. Fetch each classification and upsert RaceResult rows on (race, rider, session)

A category whose upstream calls fail is logged and reported in the summary;
the other categories still sync. Once results are persisted the main race is
scored, and the sprint too when the race has one.

``save_manual_results`` is the admin path for entering a classification by
hand; it shares the upsert and the rescoring.
"""

import logging
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from prefect import flow, task, get_run_logger
from prefect.cache_policies import NONE

from fantasy.flows.calculate_scores import calculate_team_scores, score_race_session
from fantasy.processing.api_client import MotoGPClient
from fantasy.processing.exceptions import InvalidState, NotFound
from fantasy.processing.payloads import ClassificationEntry, SessionPayload
from fantasy.processing.rider_matching import find_rider_for_result
from fantasy.processing.utils import derive_result_status
from config.rules import CURRENT_CATEGORY_TABLE, SESSION_TYPE_CODES

logger = logging.getLogger(__name__)

# upstream session type code -> SessionType value
SESSIONS_BY_CODE = {code: session for session, code in SESSION_TYPE_CODES.items()}


@task(
    name="Fetch Category Sessions",
    cache_policy=NONE,
    retries=settings.MOTOGP_TASK_RETRIES,
    retry_delay_seconds=settings.MOTOGP_TASK_RETRY_DELAY
)
def fetch_category_sessions(client: MotoGPClient, event_uuid: str, category_uuid: str) -> Dict[str, str]:
    """
    Locate the main race and sprint sessions of one category.

    Returns:
        dict: {'MAIN': session uuid, 'SPRINT': session uuid}, only with the
        sessions that exist for the category.
    """
    run_logger = get_run_logger()

    sessions = {}
    for raw in client.get_sessions(event_uuid, category_uuid):
        try:
            session = SessionPayload.from_api(raw)
        except ValueError as e:
            run_logger.warning(f"Ignoring session of event {event_uuid}: {e}")
            continue

        session_type = SESSIONS_BY_CODE.get(session.session_type)
        if session_type:
            sessions[session_type] = session.external_id

    return sessions


@task(
    name="Fetch Classification",
    cache_policy=NONE,
    retries=settings.MOTOGP_TASK_RETRIES,
    retry_delay_seconds=settings.MOTOGP_TASK_RETRY_DELAY
)
def fetch_classification(client: MotoGPClient, session_uuid: str) -> List[Dict]:
    """Raw classification lines of a session."""
    run_logger = get_run_logger()
    classification = client.get_classification(session_uuid)
    run_logger.info(f"Session {session_uuid}: {len(classification)} classified riders")
    return classification


def upsert_race_result(race, rider, session: str, category: str, position: Optional[int], status: str) -> bool:
    """Create or overwrite the RaceResult of (race, rider, session). Returns True when created."""
    from fantasy.models import RaceResult

    _, created = RaceResult.objects.update_or_create(
        race=race,
        rider=rider,
        session=session,
        defaults={
            'category': category,
            'position': position,
            'status': status,
        }
    )
    return created


@task(name="Save Classification to DB", cache_policy=NONE)
def save_classification_to_db(race_id: int, session: str, category: str, classification: List[Dict]) -> Dict:
    """
    Upsert the RaceResult rows of one classification.

    Riders are resolved by MotoGP uuid, then by name within ``category``.
    Lines whose rider can't be resolved are skipped, never created.

    Returns:
        dict: {'created', 'updated', 'skipped', 'unmatched': [names]}
    """
    from fantasy.models import Race

    run_logger = get_run_logger()
    race = Race.objects.get(id=race_id)

    summary = {'created': 0, 'updated': 0, 'skipped': 0, 'unmatched': []}

    with transaction.atomic():
        for raw in classification:
            try:
                entry = ClassificationEntry.from_api(raw)
            except ValueError as e:
                run_logger.warning(f"Skipping classification line of {race.name}: {e}")
                summary['skipped'] += 1
                continue

            rider, match_method = find_rider_for_result(
                category,
                external_id=entry.rider_external_id,
                full_name=entry.rider_name,
                number=entry.rider_number,
            )
            if rider is None:
                run_logger.warning(
                    f"Unknown rider {entry.rider_name or entry.rider_external_id} "
                    f"in {race.name} {session} ({category}), skipping"
                )
                summary['skipped'] += 1
                summary['unmatched'].append(entry.rider_name or entry.rider_external_id)
                continue

            status = derive_result_status(entry.status, entry.position)
            created = upsert_race_result(race, rider, session, category, entry.position, status)
            summary['created' if created else 'updated'] += 1

    run_logger.info(
        f"{race.name} {session} {category}: {summary['created']} created, "
        f"{summary['updated']} updated, {summary['skipped']} skipped"
    )
    return summary


@flow(name="Sync Race Results", validate_parameters=False)
def sync_race_results_flow(
    race_id: int,
    client: Optional[MotoGPClient] = None,
    category_table: Optional[Dict] = None,
    score: bool = True
) -> Dict:
    """
    Sync main race and sprint results of every category for one race.

    Raises:
        NotFound: the race doesn't exist
        InvalidState: the race has no MotoGP event uuid
    """
    from fantasy.models import Race, RaceResult, SessionType

    run_logger = get_run_logger()
    category_table = category_table or CURRENT_CATEGORY_TABLE

    race = Race.objects.filter(id=race_id).first()
    if race is None:
        raise NotFound(f"Race {race_id} not found")
    if not race.external_event_id:
        raise InvalidState(f"Race {race.name} has no external event id")

    run_logger.info(f"Syncing results for {race}")

    summary = {
        'status': 'success',
        'race_id': race.id,
        'race_name': race.name,
        'categories_synced': [],
        'sessions_synced': 0,
        'results_created': 0,
        'results_updated': 0,
        'riders_skipped': 0,
        'unmatched_riders': [],
        'failures': [],
        'scores': {},
    }

    owns_client = client is None
    client = client or MotoGPClient.from_settings()

    try:
        for category_uuid, category in category_table['uuids'].items():
            try:
                sessions = fetch_category_sessions(client, race.external_event_id, category_uuid)
                if not sessions:
                    run_logger.warning(f"No race sessions published for {race.name} {category}")

                for session_type, session_uuid in sessions.items():
                    classification = fetch_classification(client, session_uuid)
                    saved = save_classification_to_db(race.id, session_type, category, classification)

                    summary['sessions_synced'] += 1
                    summary['results_created'] += saved['created']
                    summary['results_updated'] += saved['updated']
                    summary['riders_skipped'] += saved['skipped']
                    summary['unmatched_riders'].extend(saved['unmatched'])

                summary['categories_synced'].append(category)

            except Exception as e:
                run_logger.error(f"Failed to sync {category} results for {race.name}: {e}")
                summary['failures'].append({'key': category, 'error': str(e)})
    finally:
        if owns_client:
            client.close()

    if summary['failures']:
        summary['status'] = 'partial'

    if score:
        sessions_to_score = [SessionType.MAIN.value]
        if race.has_sprint:
            sessions_to_score.append(SessionType.SPRINT.value)
        for session_type in sessions_to_score:
            summary['scores'][session_type] = calculate_team_scores(race.id, session_type)

    summary['results_available'] = RaceResult.objects.filter(race=race).exists()
    summary['message'] = (
        f"{race.name}: {summary['results_created']} results created, "
        f"{summary['results_updated']} updated, {summary['riders_skipped']} skipped, "
        f"{len(summary['failures'])} categories failed"
    )
    run_logger.info(summary['message'])
    return summary


def save_manual_results(race_id: int, session: str, entries: Iterable[Dict]) -> Dict:
    """
    Enter a session classification by hand and rescore the session.

    Args:
        race_id: Race to save results for
        session: SessionType value
        entries: dicts with 'rider_id', 'position' (or None) and optional 'status'

    Raises:
        NotFound: the race or one of the riders doesn't exist
    """
    from fantasy.models import Race, Rider

    race = Race.objects.filter(id=race_id).first()
    if race is None:
        raise NotFound(f"Race {race_id} not found")

    entries = list(entries)
    rider_ids = [entry['rider_id'] for entry in entries]
    riders = Rider.objects.in_bulk(rider_ids)
    missing = [rider_id for rider_id in rider_ids if rider_id not in riders]
    if missing:
        raise NotFound(f"Unknown riders: {missing}")

    created = updated = 0
    with transaction.atomic():
        for entry in entries:
            position = entry.get('position')
            status = derive_result_status(entry.get('status', ''), position)
            rider = riders[entry['rider_id']]
            if upsert_race_result(race, rider, session, rider.category, position, status):
                created += 1
            else:
                updated += 1

    logger.info(f"Manual results for {race.name} {session}: {created} created, {updated} updated")

    return {
        'race_id': race.id,
        'session': session,
        'created': created,
        'updated': updated,
        'scores': score_race_session(race.id, session),
    }
