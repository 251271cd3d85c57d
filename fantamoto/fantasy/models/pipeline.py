"""
Pipeline and infrastructure models.

These models track the sync pipeline itself rather than game data.

Models:
- SyncLog: one audit row per sync attempt (riders, calendar, race results)
- Notification: in-app message appended for users when results land
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from .events import Race


class SyncLog(models.Model):
    """
    Append-only audit record of a single sync attempt.

    Created IN_PROGRESS before the sync starts and moved exactly once to
    COMPLETED or FAILED. One row per attempt, not per sub-item; sub-item
    failures are kept in ``details``.
    """

    TYPE_RIDERS = 'RIDERS'
    TYPE_CALENDAR = 'CALENDAR'
    TYPE_RACE_RESULTS = 'RACE_RESULTS'

    SYNC_TYPE_CHOICES = [
        (TYPE_RIDERS, 'Riders'),
        (TYPE_CALENDAR, 'Calendar'),
        (TYPE_RACE_RESULTS, 'Race Results'),
    ]

    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_FAILED = 'FAILED'

    STATUS_CHOICES = [
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_FAILED, 'Failed'),
    ]

    sync_type = models.CharField(max_length=20, choices=SYNC_TYPE_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_IN_PROGRESS)
    message = models.TextField(blank=True)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['sync_type', '-created_at'], name='synclog_type_created_idx'),
            models.Index(fields=['status'], name='synclog_status_idx'),
        ]

    def __str__(self):
        return f"{self.get_sync_type_display()} sync #{self.pk} - {self.status}"

    @property
    def is_terminal(self):
        return self.status != self.STATUS_IN_PROGRESS

    def _finish(self, status, message, details=None):
        from fantasy.processing.exceptions import InvalidState

        if self.is_terminal:
            raise InvalidState(f"SyncLog {self.pk} already {self.status}")

        self.status = status
        self.message = message
        if details:
            self.details = {**self.details, **details}
        self.completed_at = timezone.now()
        self.save(update_fields=['status', 'message', 'details', 'completed_at'])

    def mark_completed(self, message, details=None):
        """Terminal transition to COMPLETED."""
        self._finish(self.STATUS_COMPLETED, message, details)

    def mark_failed(self, error, details=None):
        """Terminal transition to FAILED, keeping the error type and text."""
        error_details = {
            'error': str(error),
            'error_type': type(error).__name__,
        }
        if details:
            error_details.update(details)
        self._finish(self.STATUS_FAILED, str(error) or type(error).__name__, error_details)


class Notification(models.Model):
    TYPE_RACE_RESULTS = 'RACE_RESULTS'

    TYPE_CHOICES = [
        (TYPE_RACE_RESULTS, 'Race Results'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=200)
    message = models.TextField()
    notification_type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    race = models.ForeignKey(Race, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
            models.Index(fields=['notification_type'], name='notification_type_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.title}"
