"""
Race calendar and result models.

Structure:
- Race: a race weekend, upserted by external event id from the calendar sync
- RaceResult: one rider's classification in one session (MAIN or SPRINT)
"""

from django.db import models
from .base import Rider, Category


class SessionType(models.TextChoices):
    MAIN = 'MAIN', 'Race'
    SPRINT = 'SPRINT', 'Sprint'


class Race(models.Model):
    """
    A race weekend in a season.

    ``race_date`` is the scheduled start of the main race session and drives
    both the race weekend detector and the results polling window. Weekends
    without a sprint leave ``sprint_date`` empty.
    """
    external_event_id = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        help_text="MotoGP results API event uuid"
    )
    name = models.CharField(max_length=200)
    circuit = models.CharField(max_length=200, blank=True)
    country = models.CharField(max_length=100, blank=True)
    season = models.IntegerField()
    round_number = models.IntegerField(default=0)
    race_date = models.DateTimeField(help_text="Scheduled main race start (UTC)")
    sprint_date = models.DateTimeField(null=True, blank=True, help_text="Scheduled sprint start (UTC)")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['season', 'round_number', 'race_date']
        indexes = [
            models.Index(fields=['race_date'], name='race_date_idx'),
            models.Index(fields=['season', 'round_number'], name='race_season_round_idx'),
        ]

    def __str__(self):
        return f"{self.season} {self.name} (Round {self.round_number})"

    @property
    def has_sprint(self):
        return self.sprint_date is not None


class RaceResult(models.Model):
    """
    Classification of one rider in one session of a race.

    The (race, rider, session) triple is the upsert key: re-ingesting a
    session overwrites position and status instead of adding rows.
    """

    STATUS_FINISHED = 'FINISHED'
    STATUS_DNF = 'DNF'
    STATUS_DNS = 'DNS'
    STATUS_DSQ = 'DSQ'

    STATUS_CHOICES = [
        (STATUS_FINISHED, 'Finished'),
        (STATUS_DNF, 'Did Not Finish'),
        (STATUS_DNS, 'Did Not Start'),
        (STATUS_DSQ, 'Disqualified'),
    ]

    race = models.ForeignKey(Race, on_delete=models.CASCADE, related_name='results')
    rider = models.ForeignKey(Rider, on_delete=models.PROTECT, related_name='results')
    session = models.CharField(max_length=10, choices=SessionType.choices, default=SessionType.MAIN)
    category = models.CharField(
        max_length=10,
        choices=Category.choices,
        help_text="Class the classification was published for"
    )
    position = models.IntegerField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_FINISHED)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['race', 'session', 'category', 'position']
        unique_together = [['race', 'rider', 'session']]
        indexes = [
            models.Index(fields=['race', 'session'], name='result_race_session_idx'),
        ]

    def __str__(self):
        position = self.position if self.position is not None else self.status
        return f"{self.race.name} {self.session} - {self.rider.name}: {position}"
