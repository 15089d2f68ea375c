from django.db import models

from internportal.attachments import Attachment
from users.models import AdminPrincipal


class Notification(models.Model):
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('user', 'Intern'),
    ]

    # Recipient is an admin or an intern depending on recipient_role
    recipient_id = models.PositiveBigIntegerField()
    recipient_role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    # Null for system generated notifications
    sender_id = models.PositiveBigIntegerField(null=True, blank=True)

    message = models.TextField()
    section = models.CharField(max_length=50)
    entity_id = models.PositiveBigIntegerField(null=True, blank=True)
    link = models.CharField(max_length=255)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['recipient_role', 'recipient_id', 'is_read'], name='notif_recipient_idx'),
        ]

    def __str__(self):
        return f"To {self.recipient_role}#{self.recipient_id}: {self.message[:50]}"


class Message(models.Model):
    """A broadcast from an admin to every approved intern."""

    title = models.CharField(max_length=255)
    body = models.TextField()
    file_data = models.BinaryField(null=True, blank=True)
    file_mime_type = models.CharField(max_length=100, blank=True)
    file_name = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        AdminPrincipal,
        on_delete=models.SET_NULL,
        null=True,
        related_name='messages',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title

    @property
    def has_file(self):
        return bool(self.file_mime_type)

    @property
    def attachment(self):
        if not self.file_data:
            return None
        return Attachment(
            data=bytes(self.file_data),
            mime_type=self.file_mime_type,
            size=len(self.file_data),
            name=self.file_name or f"message-{self.pk}",
        )
