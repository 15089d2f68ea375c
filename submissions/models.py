from django.db import models

from internportal.attachments import Attachment
from users.models import AdminPrincipal, Intern


class AttachmentModel(models.Model):
    """Optional file stored inline on the row."""

    attachment_data = models.BinaryField(null=True, blank=True)
    attachment_name = models.CharField(max_length=255, blank=True)
    attachment_mime_type = models.CharField(max_length=100, blank=True)
    attachment_size = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def has_attachment(self):
        return bool(self.attachment_mime_type)

    @property
    def attachment(self):
        if not self.attachment_data:
            return None
        return Attachment(
            data=bytes(self.attachment_data),
            mime_type=self.attachment_mime_type,
            size=self.attachment_size or len(self.attachment_data),
            name=self.attachment_name,
        )

    def set_attachment(self, attachment):
        if attachment is None:
            return
        self.attachment_data = attachment.data
        self.attachment_name = attachment.name
        self.attachment_mime_type = attachment.mime_type
        self.attachment_size = attachment.size


class LogbookReport(AttachmentModel):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('graded', 'Graded'),
    ]

    owner = models.ForeignKey(Intern, on_delete=models.CASCADE, related_name='logbook_reports')
    week_date = models.DateField()
    week_range = models.CharField(max_length=100)
    reports = models.JSONField()
    # ISO 8601 week of week_date, one report per intern per week
    iso_year = models.PositiveSmallIntegerField()
    iso_week = models.PositiveSmallIntegerField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    grade = models.CharField(max_length=5, null=True, blank=True)
    graded_by = models.ForeignKey(
        AdminPrincipal, on_delete=models.SET_NULL, null=True, blank=True, related_name='graded_reports'
    )
    graded_at = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-submitted_at', '-id']
        constraints = [
            models.UniqueConstraint(fields=['owner', 'iso_year', 'iso_week'], name='one_logbook_report_per_week'),
        ]

    def __str__(self):
        return f"Logbook {self.week_range} by {self.owner.email}"


class LeaveRequest(AttachmentModel):
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    owner = models.ForeignKey(Intern, on_delete=models.CASCADE, related_name='leave_requests')
    leave_type = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    rejection_reason = models.TextField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        AdminPrincipal, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviewed_leave_requests'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    requested_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-requested_at', '-id']

    def __str__(self):
        return f"{self.leave_type} leave for {self.owner.email} ({self.status})"


class ComplaintSuggestion(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('resolved', 'Resolved'),
        ('dismissed', 'Dismissed'),
    ]

    owner = models.ForeignKey(Intern, on_delete=models.CASCADE, related_name='complaints')
    # Suggestion part
    subject = models.CharField(max_length=255, null=True, blank=True)
    message = models.TextField(null=True, blank=True)
    # Complaint part
    incident_date_time = models.DateTimeField(null=True, blank=True)
    incident_location = models.CharField(max_length=255, null=True, blank=True)
    complaint_details = models.TextField(null=True, blank=True)
    participants = models.JSONField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    response = models.TextField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        AdminPrincipal, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviewed_complaints'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-submitted_at', '-id']

    def __str__(self):
        return f"{self.subject or 'Complaint'} by {self.owner.email}"


class ProjectUpload(AttachmentModel):
    owner = models.ForeignKey(Intern, on_delete=models.CASCADE, related_name='projects')
    project_name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at', '-id']

    def __str__(self):
        return self.project_name
