"""
Sync the race calendar of a season.

Resolves the season uuid for a year, lists its events and upserts one Race
per event keyed by the MotoGP event uuid. Main race and sprint start times
come from the session list of the calendar category (MotoGP); when that
lookup fails the event's own start/end dates are used instead.

Test events are skipped.
"""

from typing import Dict, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from prefect import flow, task, get_run_logger
from prefect.cache_policies import NONE

from fantasy.processing.api_client import MotoGPClient
from fantasy.processing.exceptions import NotFound
from fantasy.processing.payloads import EventPayload, SessionPayload
from config.rules import CURRENT_CATEGORY_TABLE, SESSION_TYPE_CODES


def category_uuid_for(category: str, category_table: Dict) -> Optional[str]:
    """Reverse lookup of a category in the table's results-API uuids."""
    for uuid, mapped in category_table['uuids'].items():
        if mapped == category:
            return uuid
    return None


@task(
    name="Fetch Season Events",
    cache_policy=NONE,
    retries=settings.MOTOGP_TASK_RETRIES,
    retry_delay_seconds=settings.MOTOGP_TASK_RETRY_DELAY
)
def fetch_season_events(client: MotoGPClient, year: int, finished_only: bool = False) -> Optional[Dict]:
    """
    Resolve the season and list its events.

    Returns:
        dict: {'season': season payload, 'events': [event payloads]} or None
        when the season does not exist upstream (not retried).
    """
    logger = get_run_logger()

    try:
        season = client.get_season(year)
    except NotFound as e:
        logger.error(str(e))
        return None

    season_uuid = season.get('id')
    if not season_uuid:
        logger.error(f"Season {year} payload has no id")
        return None

    events = client.get_events(season_uuid, finished_only=finished_only)
    logger.info(f"Season {year}: {len(events)} events (finished_only={finished_only})")
    return {'season': season, 'events': events}


@task(name="Fetch Session Times", cache_policy=NONE)
def fetch_session_times(client: MotoGPClient, event_uuid: str, category_uuid: str) -> Dict:
    """
    Start times of the main race and sprint of an event.

    Returns:
        dict: {'race_date': datetime or None, 'sprint_date': datetime or None}
    """
    logger = get_run_logger()

    times = {'race_date': None, 'sprint_date': None}
    for raw in client.get_sessions(event_uuid, category_uuid):
        try:
            session = SessionPayload.from_api(raw)
        except ValueError as e:
            logger.warning(f"Ignoring session of event {event_uuid}: {e}")
            continue

        if session.session_type == SESSION_TYPE_CODES['MAIN']:
            times['race_date'] = session.date
        elif session.session_type == SESSION_TYPE_CODES['SPRINT']:
            times['sprint_date'] = session.date

    return times


@task(name="Save Race to DB", cache_policy=NONE)
def save_race_to_db(event: EventPayload, season: int, session_times: Dict) -> Dict:
    """
    Upsert a Race by external event id.

    The main race time falls back to the event end (then start) date when the
    session lookup didn't provide one.

    Returns:
        dict: {'race_id', 'created'}

    Raises:
        ValueError: when no date at all is known for the event
    """
    from fantasy.models import Race

    logger = get_run_logger()

    race_date = session_times.get('race_date') or event.date_end or event.date_start
    if race_date is None:
        raise ValueError(f"No date available for event {event.name}")

    with transaction.atomic():
        race, created = Race.objects.update_or_create(
            external_event_id=event.external_id,
            defaults={
                'name': event.name,
                'circuit': event.circuit,
                'country': event.country,
                'season': season,
                'round_number': event.round_number,
                'race_date': race_date,
                'sprint_date': session_times.get('sprint_date'),
            }
        )

    action = "Created" if created else "Updated"
    logger.info(f"{action} race {race}")
    return {'race_id': race.id, 'created': created}


@flow(name="Sync Race Calendar", validate_parameters=False)
def sync_calendar_flow(
    year: Optional[int] = None,
    finished_only: bool = False,
    client: Optional[MotoGPClient] = None,
    category_table: Optional[Dict] = None
) -> Dict:
    """
    Sync the calendar of ``year`` (current year by default).

    Raises:
        NotFound: the season is unknown upstream
    """
    logger = get_run_logger()
    year = year or timezone.now().year
    category_table = category_table or CURRENT_CATEGORY_TABLE
    calendar_uuid = category_uuid_for(category_table['calendar_category'], category_table)

    summary = {
        'status': 'success',
        'year': year,
        'finished_only': finished_only,
        'events_found': 0,
        'created': 0,
        'updated': 0,
        'skipped_tests': 0,
        'session_time_fallbacks': 0,
        'failures': [],
    }

    owns_client = client is None
    client = client or MotoGPClient.from_settings()

    try:
        season_data = fetch_season_events(client, year, finished_only)
        if season_data is None:
            raise NotFound(f"Season {year} not found upstream")

        events: List[Dict] = season_data['events']
        summary['events_found'] = len(events)

        for raw in events:
            key = raw.get('name') or raw.get('id')
            try:
                event = EventPayload.from_api(raw)
                key = event.name or event.external_id

                if event.is_test:
                    logger.info(f"Skipping test event {key}")
                    summary['skipped_tests'] += 1
                    continue

                session_times = {}
                if calendar_uuid:
                    try:
                        session_times = fetch_session_times(client, event.external_id, calendar_uuid)
                    except Exception as e:
                        logger.warning(f"Session times unavailable for {key}, using event dates: {e}")

                if not session_times.get('race_date'):
                    summary['session_time_fallbacks'] += 1

                saved = save_race_to_db(event, year, session_times)
                summary['created' if saved['created'] else 'updated'] += 1

            except Exception as e:
                logger.error(f"Error syncing event {key}: {e}")
                summary['failures'].append({'key': str(key), 'error': str(e)})
    finally:
        if owns_client:
            client.close()

    if summary['failures']:
        summary['status'] = 'partial'

    summary['message'] = (
        f"Calendar {year}: {summary['created']} created, {summary['updated']} updated, "
        f"{summary['skipped_tests']} test events skipped"
    )
    logger.info(summary['message'])
    return summary
