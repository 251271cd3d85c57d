"""
Fantasy game models: lineups (predictions) and computed team scores.

Lineups are written by the lineup layer and only read by the scoring engine.
TeamScore rows are fully replaced on every recomputation.
"""

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from config.rules import MAX_PREDICTED_POSITION, MIN_PREDICTED_POSITION
from .base import Rider, Team
from .events import Race, SessionType


class RaceLineup(models.Model):
    """A team's prediction for one race: six rider picks, two per category."""
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='lineups')
    race = models.ForeignKey(Race, on_delete=models.CASCADE, related_name='lineups')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['race', 'team']
        unique_together = [['team', 'race']]

    def __str__(self):
        return f"{self.team.name} - {self.race.name}"


class LineupRider(models.Model):
    lineup = models.ForeignKey(RaceLineup, on_delete=models.CASCADE, related_name='lineup_riders')
    rider = models.ForeignKey(Rider, on_delete=models.PROTECT, related_name='lineup_picks')
    predicted_position = models.IntegerField(
        validators=[MinValueValidator(MIN_PREDICTED_POSITION), MaxValueValidator(MAX_PREDICTED_POSITION)]
    )

    class Meta:
        ordering = ['lineup', 'id']
        unique_together = [['lineup', 'rider']]

    def __str__(self):
        return f"{self.rider.name} → P{self.predicted_position}"


class TeamScore(models.Model):
    """
    Score of a team for one session of a race. Lower totals are better.

    ``breakdown`` holds one entry per pick:
    {rider_id, rider_name, category, predicted_position, actual_position,
     status, base_points, delta, points}
    """
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='scores')
    race = models.ForeignKey(Race, on_delete=models.CASCADE, related_name='team_scores')
    session = models.CharField(max_length=10, choices=SessionType.choices, default=SessionType.MAIN)
    total_points = models.IntegerField(default=0)
    breakdown = models.JSONField(default=list, blank=True)
    calculated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['race', 'session', 'total_points']
        unique_together = [['team', 'race', 'session']]
        indexes = [
            models.Index(fields=['race', 'session', 'total_points'], name='score_race_session_total_idx'),
        ]

    def __str__(self):
        return f"{self.team.name} - {self.race.name} {self.session}: {self.total_points} pts"
