"""
Fantasy models module.

Everything is re-exported so callers can use: from fantasy.models import Race, Rider, etc.

Model organization:
- base.py: Riders, leagues and fantasy teams (Rider, League, Team)
- events.py: Race calendar and session results (Race, RaceResult)
- fantasy.py: Predictions and computed scores (RaceLineup, LineupRider, TeamScore)
- pipeline.py: Sync audit and user notifications (SyncLog, Notification)
"""

from .base import (
    Category,
    Rider,
    League,
    Team,
)

from .events import (
    SessionType,
    Race,
    RaceResult,
)

from .fantasy import (
    RaceLineup,
    LineupRider,
    TeamScore,
)

from .pipeline import (
    SyncLog,
    Notification,
)

__all__ = [
    # Base models (base.py)
    'Category',
    'Rider',
    'League',
    'Team',
    # Event models (events.py)
    'SessionType',
    'Race',
    'RaceResult',
    # Fantasy models (fantasy.py)
    'RaceLineup',
    'LineupRider',
    'TeamScore',
    # Pipeline models (pipeline.py)
    'SyncLog',
    'Notification',
]
