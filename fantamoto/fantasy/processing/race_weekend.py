"""
Race weekend detection.

Decides whether the pipeline is inside an active race window, which gates
how often race results are polled. The window is asymmetric: up to 3 days
before the next main race (Friday practice) and up to 2 days after the last
one (Monday results).

``detect_race_weekend`` is a pure function of "now" and the known races and
can be called at any frequency; ``check_race_weekend`` feeds it from the DB.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional
import logging

from django.utils import timezone

from config.rules import RACE_WEEKEND_WINDOW
from .utils import days_between

logger = logging.getLogger(__name__)


@dataclass
class RaceWeekendStatus:
    """
    Attributes:
        is_race_weekend: Whether now is inside a race window
        race: The upcoming or just-finished race that opened the window
        days_away: Whole days between now and that race's main session
        upcoming: True when the window comes from the next race, False for the last one
    """
    is_race_weekend: bool
    race: Optional[object] = None
    days_away: Optional[int] = None
    upcoming: Optional[bool] = None

    def __repr__(self):
        if not self.is_race_weekend:
            return "RaceWeekendStatus(no active race weekend)"
        if self.upcoming:
            return f"RaceWeekendStatus({self.race} in {self.days_away} days)"
        return f"RaceWeekendStatus({self.race} {self.days_away} days ago)"


def detect_race_weekend(
    now: datetime,
    races: Iterable,
    days_ahead: int = RACE_WEEKEND_WINDOW['days_ahead'],
    days_behind: int = RACE_WEEKEND_WINDOW['days_behind'],
) -> RaceWeekendStatus:
    """
    Find whether ``now`` falls in a race weekend.

    Args:
        now: Reference time (aware datetime)
        races: Objects with a ``race_date`` attribute (main session start)
        days_ahead: Look-ahead window before the next race
        days_behind: Look-back window after the last race

    Returns:
        RaceWeekendStatus referencing the next race if it is within
        ``days_ahead`` days, else the last race if within ``days_behind``
        days, else an inactive status.
    """
    next_race = None
    last_race = None

    for race in races:
        race_date = getattr(race, 'race_date', None)
        if race_date is None:
            continue
        if race_date >= now:
            if next_race is None or race_date < next_race.race_date:
                next_race = race
        elif last_race is None or race_date > last_race.race_date:
            last_race = race

    if next_race is not None:
        days_until = days_between(now, next_race.race_date)
        if days_until <= days_ahead:
            logger.info(f"Race weekend in progress: {next_race} (in {days_until} days)")
            return RaceWeekendStatus(True, next_race, days_until, upcoming=True)

    if last_race is not None:
        days_since = days_between(last_race.race_date, now)
        if days_since <= days_behind:
            logger.info(f"Race weekend just finished: {last_race} ({days_since} days ago)")
            return RaceWeekendStatus(True, last_race, days_since, upcoming=False)

    logger.info("No race weekend in progress")
    return RaceWeekendStatus(False)


def check_race_weekend(now: Optional[datetime] = None) -> RaceWeekendStatus:
    """Run the detector against the nearest past and future races in the database."""
    from fantasy.models import Race

    now = now or timezone.now()
    candidates = [
        race for race in (
            Race.objects.filter(race_date__gte=now).order_by('race_date').first(),
            Race.objects.filter(race_date__lt=now).order_by('-race_date').first(),
        )
        if race is not None
    ]
    return detect_race_weekend(now, candidates)
