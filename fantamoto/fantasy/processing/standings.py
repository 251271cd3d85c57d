"""
Standings built from TeamScore rows.

Lower totals are better, so every ranking sorts ascending by points. Ties
keep their input order (team id order for the DB helpers).
"""

from typing import Dict, List, Optional, Sequence

from django.db.models import Count, Sum


def rank_team_totals(rows: Sequence[Dict], key: str = 'total_points') -> List[Dict]:
    """
    Sort standings rows ascending by ``key`` and number them.

    Python's sort is stable, so rows with equal totals keep their input order.
    """
    ranked = sorted(rows, key=lambda row: row[key])
    for position, row in enumerate(ranked, 1):
        row['position'] = position
    return ranked


def race_standings(race_id: int, session: Optional[str] = None) -> List[Dict]:
    """Standings for one race, either one session or both sessions summed."""
    from fantasy.models import TeamScore

    scores = TeamScore.objects.filter(race_id=race_id)
    if session:
        scores = scores.filter(session=session)

    rows = (
        scores.values('team_id', 'team__name')
        .annotate(total_points=Sum('total_points'))
        .order_by('team_id')
    )
    return rank_team_totals([
        {
            'team_id': row['team_id'],
            'team_name': row['team__name'],
            'total_points': row['total_points'] or 0,
        }
        for row in rows
    ])


def league_standings(league_id: int) -> List[Dict]:
    """
    Season standings of a league: sum of every TeamScore of each team.

    Teams without any score yet are listed after the scored ones; a zero
    total would otherwise put them in the lead.
    """
    from fantasy.models import Team

    teams = (
        Team.objects.filter(league_id=league_id)
        .annotate(total=Sum('scores__total_points'), sessions_scored=Count('scores'))
        .order_by('id')
    )
    rows = [
        {
            'team_id': team.id,
            'team_name': team.name,
            'user_id': team.user_id,
            'total_points': team.total or 0,
            'sessions_scored': team.sessions_scored,
        }
        for team in teams
    ]

    ranked = rank_team_totals([row for row in rows if row['sessions_scored']])
    for row in rows:
        if not row['sessions_scored']:
            row['position'] = len(ranked) + 1
            ranked.append(row)
    return ranked
