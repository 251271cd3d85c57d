"""
Compute TeamScore rows for a race session.

Reads the persisted RaceResult rows of one (race, session) and every lineup
submitted for the race, scores each lineup with
``fantasy.processing.scoring`` and replaces the team's TeamScore for that
(race, session). Running it again with unchanged inputs writes the same
totals and breakdowns.

No score is written when the race doesn't exist or the session has no
results yet.
"""

import logging
from typing import Dict, Optional

from django.db import transaction
from prefect import flow, task, get_run_logger
from prefect.cache_policies import NONE

from fantasy.processing.scoring import (
    LineupPick,
    ResultLine,
    RiderInfo,
    compute_max_positions,
    score_lineup,
)

logger = logging.getLogger(__name__)


def score_race_session(race_id: int, session: str) -> Dict:
    """
    Score every lineup of a race for one session and upsert the TeamScores.

    Returns:
        dict: {'status': 'success' | 'skipped', 'race_id', 'session',
               'teams_scored', 'scores': [{'team_id', 'total_points'}], 'reason'?}
    """
    from fantasy.models import Race, RaceResult, RaceLineup, TeamScore

    summary = {
        'status': 'success',
        'race_id': race_id,
        'session': session,
        'teams_scored': 0,
        'scores': [],
    }

    race = Race.objects.filter(id=race_id).first()
    if race is None:
        logger.warning(f"Race {race_id} not found, nothing to score")
        summary['status'] = 'skipped'
        summary['reason'] = 'race_not_found'
        return summary

    results = [
        ResultLine(
            rider_id=result.rider_id,
            category=result.category,
            position=result.position,
            status=result.status,
        )
        for result in RaceResult.objects.filter(race=race, session=session).order_by('id')
    ]
    if not results:
        logger.info(f"No {session} results for {race.name} yet, nothing to score")
        summary['status'] = 'skipped'
        summary['reason'] = 'no_results'
        return summary

    max_positions = compute_max_positions(results)
    results_by_rider = {line.rider_id: line for line in results}

    lineups = (
        RaceLineup.objects.filter(race=race)
        .select_related('team')
        .prefetch_related('lineup_riders__rider')
        .order_by('team_id')
    )

    with transaction.atomic():
        for lineup in lineups:
            picks = []
            riders = {}
            for lineup_rider in lineup.lineup_riders.all():
                picks.append(LineupPick(lineup_rider.rider_id, lineup_rider.predicted_position))
                rider = lineup_rider.rider
                if rider is not None:
                    riders[rider.id] = RiderInfo(rider.id, rider.name, rider.category)

            total_points, breakdown = score_lineup(picks, riders, results_by_rider, max_positions)

            TeamScore.objects.update_or_create(
                team=lineup.team,
                race=race,
                session=session,
                defaults={
                    'total_points': total_points,
                    'breakdown': breakdown,
                }
            )
            summary['teams_scored'] += 1
            summary['scores'].append({'team_id': lineup.team_id, 'total_points': total_points})

    logger.info(f"Scored {summary['teams_scored']} teams for {race.name} ({session})")
    return summary


@task(name="Calculate Team Scores", cache_policy=NONE)
def calculate_team_scores(race_id: int, session: str) -> Dict:
    """Prefect wrapper around score_race_session."""
    run_logger = get_run_logger()
    summary = score_race_session(race_id, session)

    if summary['status'] == 'skipped':
        run_logger.info(f"Scoring skipped for race {race_id} ({session}): {summary['reason']}")
    else:
        run_logger.info(f"Race {race_id} ({session}): {summary['teams_scored']} teams scored")
    return summary


@flow(name="Calculate Scores")
def calculate_scores_flow(race_id: int, session: Optional[str] = None) -> Dict:
    """
    Recompute scores of a race.

    Without ``session`` the main race is scored, plus the sprint when the race
    has one.
    """
    from fantasy.models import Race, SessionType

    run_logger = get_run_logger()

    if session:
        sessions = [session]
    else:
        race = Race.objects.filter(id=race_id).first()
        sessions = [SessionType.MAIN.value]
        if race is not None and race.has_sprint:
            sessions.append(SessionType.SPRINT.value)

    summary = {'race_id': race_id, 'sessions': {}}
    for session_type in sessions:
        summary['sessions'][session_type] = calculate_team_scores(race_id, session_type)

    run_logger.info(f"Scores recalculated for race {race_id}: {', '.join(summary['sessions'])}")
    return summary
