"""
Base models shared across the sync pipeline and the fantasy game.

Riders are imported from the MotoGP API; leagues and teams are user-created
data owned by the (external) league management layer and only read here.
"""

from django.conf import settings
from django.db import models


class Category(models.TextChoices):
    MOTOGP = 'MOTOGP', 'MotoGP'
    MOTO2 = 'MOTO2', 'Moto2'
    MOTO3 = 'MOTO3', 'Moto3'


class Rider(models.Model):
    """
    A rider in one of the three championship classes.

    Created and updated by the rider sync; never deleted, only deactivated.
    ``external_id`` is the MotoGP API rider uuid and the stable join key for
    result payloads.
    """

    TYPE_OFFICIAL = 'OFFICIAL'
    TYPE_WILDCARD = 'WILDCARD'
    TYPE_REPLACEMENT = 'REPLACEMENT'
    TYPE_TEST = 'TEST'

    RIDER_TYPE_CHOICES = [
        (TYPE_OFFICIAL, 'Official'),
        (TYPE_WILDCARD, 'Wildcard'),
        (TYPE_REPLACEMENT, 'Replacement'),
        (TYPE_TEST, 'Test Rider'),
    ]

    external_id = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        help_text="MotoGP API rider uuid"
    )
    name = models.CharField(max_length=200)
    number = models.IntegerField(null=True, blank=True)
    team_name = models.CharField(max_length=200, blank=True)
    nationality = models.CharField(max_length=3, blank=True)
    category = models.CharField(max_length=10, choices=Category.choices)
    value = models.IntegerField(default=0, help_text="Fantasy market value")
    is_active = models.BooleanField(default=True)
    rider_type = models.CharField(
        max_length=20,
        choices=RIDER_TYPE_CHOICES,
        default=TYPE_OFFICIAL
    )
    photo_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['category', '-value', 'number']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='rider_category_active_idx'),
            models.Index(fields=['name'], name='rider_name_idx'),
        ]

    def __str__(self):
        if self.number is not None:
            return f"{self.name} #{self.number} ({self.get_category_display()})"
        return f"{self.name} ({self.get_category_display()})"


class League(models.Model):
    """
    Fantasy league. A league is active while now is between its start and end dates.
    """
    name = models.CharField(max_length=100)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Team(models.Model):
    """A user's fantasy team inside a league."""
    name = models.CharField(max_length=100)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='teams')
    league = models.ForeignKey(League, on_delete=models.CASCADE, related_name='teams')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['league', 'name']
        unique_together = [['user', 'league']]

    def __str__(self):
        return f"{self.name} ({self.league.name})"
