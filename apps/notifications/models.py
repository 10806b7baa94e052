from django.db import models
from core.constants import RECIPIENT_TYPE_CHOICES, NOTIFICATION_EVENT_CHOICES


class Notification(models.Model):
    """In-app notification delivered to a worker or an employer."""
    recipient_id = models.PositiveBigIntegerField()
    recipient_type = models.CharField(max_length=10, choices=RECIPIENT_TYPE_CHOICES)
    event_type = models.CharField(max_length=40, choices=NOTIFICATION_EVENT_CHOICES)
    title = models.CharField(max_length=200)
    message = models.TextField()
    payload = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['recipient_type', 'recipient_id', 'is_read'], name='notif_recipient_unread_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} for {self.recipient_type} {self.recipient_id}"

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.save(update_fields=['is_read'])
