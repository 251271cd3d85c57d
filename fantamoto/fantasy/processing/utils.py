"""
Utility functions for MotoGP data processing.

Helpers for deriving values from upstream payloads and for querying which
races the pipeline should work on.
"""

import math
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from django.db.models import Exists, OuterRef
from django.utils import timezone

from config.rules import (
    RIDER_VALUE_RULES,
    RIDER_TYPE_CODES,
    RESULT_STATUS_CODES,
    RESULTS_POLLING_WINDOW,
)


def calculate_rider_value(championships: int, wins: int, rules: Dict = None) -> int:
    """
    Market value of a rider.

    value = min(cap, base + championships * championship_weight + wins * win_weight)
    """
    rules = rules or RIDER_VALUE_RULES
    value = (
        rules['base']
        + max(championships or 0, 0) * rules['championship_weight']
        + max(wins or 0, 0) * rules['win_weight']
    )
    return min(rules['cap'], value)


def classify_rider_type(career_type: str) -> str:
    """Map the upstream career step type to a Rider.rider_type (OFFICIAL when unknown)."""
    from fantasy.models import Rider

    if not career_type:
        return Rider.TYPE_OFFICIAL
    return RIDER_TYPE_CODES.get(career_type.strip().lower(), Rider.TYPE_OFFICIAL)


def derive_result_status(status_code: str, position: Optional[int]) -> str:
    """
    RaceResult status from an upstream classification line.

    Explicit DNF/OUTSTND → DNF, DNS → DNS, DSQ → DSQ; otherwise a line with
    no position is a DNF and anything else FINISHED.
    """
    from fantasy.models import RaceResult

    mapped = RESULT_STATUS_CODES.get((status_code or '').upper())
    if mapped:
        return mapped
    if position is None:
        return RaceResult.STATUS_DNF
    return RaceResult.STATUS_FINISHED


def days_between(first: datetime, second: datetime) -> int:
    """Whole days between two datetimes, rounded up (|second - first|)."""
    seconds = abs((second - first).total_seconds())
    return math.ceil(seconds / 86400)


def get_races_in_polling_window(now: Optional[datetime] = None) -> List:
    """
    Races whose main session falls in [now - 3 days, now + 2 days].

    Every session of a race weekend is re-synced while it is in the window,
    so practice/sprint/race results are picked up as they get published.
    """
    from fantasy.models import Race

    now = now or timezone.now()
    window_start = now - timedelta(days=RESULTS_POLLING_WINDOW['days_behind'])
    window_end = now + timedelta(days=RESULTS_POLLING_WINDOW['days_ahead'])

    return list(
        Race.objects.filter(
            race_date__gte=window_start,
            race_date__lte=window_end,
        ).order_by('race_date')
    )


def select_latest_race(now: Optional[datetime] = None):
    """
    The race closest to ``now``: the last one run or the next one scheduled,
    whichever is nearer in time.
    """
    from fantasy.models import Race

    now = now or timezone.now()
    last_race = Race.objects.filter(race_date__lte=now).order_by('-race_date').first()
    next_race = Race.objects.filter(race_date__gte=now).order_by('race_date').first()

    if last_race and next_race:
        if (now - last_race.race_date) < (next_race.race_date - now):
            return last_race
        return next_race
    return last_race or next_race


def get_finished_races(season: int, now: Optional[datetime] = None) -> List:
    """Races of a season whose main session start is in the past, oldest first."""
    from fantasy.models import Race

    now = now or timezone.now()
    return list(
        Race.objects.filter(season=season, race_date__lt=now).order_by('race_date')
    )


def get_sync_status(now: Optional[datetime] = None) -> Dict:
    """
    Overview of the sync pipeline.

    Returns:
        dict: {
            'last_syncs': {sync_type: {status, message, created_at, completed_at} or None},
            'races_without_results': count of past races with no RaceResult rows,
            'next_race': Race or None,
        }
    """
    from fantasy.models import Race, RaceResult, SyncLog

    now = now or timezone.now()

    last_syncs = {}
    for sync_type, _label in SyncLog.SYNC_TYPE_CHOICES:
        log = SyncLog.objects.filter(sync_type=sync_type).order_by('-created_at', '-id').first()
        last_syncs[sync_type] = None if log is None else {
            'id': log.id,
            'status': log.status,
            'message': log.message,
            'created_at': log.created_at,
            'completed_at': log.completed_at,
        }

    has_results = RaceResult.objects.filter(race=OuterRef('pk'))
    races_without_results = Race.objects.filter(race_date__lt=now).exclude(
        Exists(has_results)
    ).count()

    next_race = Race.objects.filter(race_date__gt=now).order_by('race_date').first()

    return {
        'last_syncs': last_syncs,
        'races_without_results': races_without_results,
        'next_race': next_race,
    }
