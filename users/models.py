# users/models.py
from django.db import models
from django.db.models import Q

from internportal.attachments import Attachment


class AdminPrincipal(models.Model):
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('superadmin', 'Superadmin'),
    ]

    email = models.EmailField(unique=True)
    password_hash = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='admin')
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Admin'

    def __str__(self):
        return f"{self.first_name} {self.last_name} ({self.role})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


class Intern(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    APPROVAL_STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    email = models.EmailField(unique=True)
    matric_number = models.CharField(max_length=50, unique=True)
    password_hash = models.CharField(max_length=255)

    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100)
    institution = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=30)

    # Documents uploaded at registration, kept inline as blobs
    user_image = models.BinaryField(null=True, blank=True)
    user_image_mime_type = models.CharField(max_length=100, blank=True)
    acceptance_letter = models.BinaryField(null=True, blank=True)
    acceptance_letter_mime_type = models.CharField(max_length=100, blank=True)
    acceptance_letter_name = models.CharField(max_length=255, blank=True)

    is_approved = models.BooleanField(default=False)
    approval_status = models.CharField(max_length=20, choices=APPROVAL_STATUS_CHOICES, default=STATUS_PENDING)
    approved_by = models.ForeignKey(
        AdminPrincipal,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_interns',
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(null=True, blank=True)
    # Set by a superadmin; a disabled intern cannot log in
    is_disabled = models.BooleanField(default=False)
    disabled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(is_approved=True, approval_status='approved')
                    | (Q(is_approved=False) & ~Q(approval_status='approved'))
                ),
                name='intern_is_approved_matches_status',
            ),
        ]

    def __str__(self):
        return f"{self.full_name} <{self.email}>"

    @property
    def full_name(self):
        return " ".join(part for part in (self.first_name, self.middle_name, self.last_name) if part)

    def _attachment(self, data, mime_type, name):
        if not data:
            return None
        return Attachment(data=bytes(data), mime_type=mime_type, size=len(data), name=name)

    @property
    def user_image_attachment(self):
        return self._attachment(self.user_image, self.user_image_mime_type, f"intern-{self.pk}-photo")

    @property
    def acceptance_letter_attachment(self):
        return self._attachment(
            self.acceptance_letter,
            self.acceptance_letter_mime_type,
            self.acceptance_letter_name or f"intern-{self.pk}-acceptance-letter",
        )


class PasswordResetToken(models.Model):
    intern = models.ForeignKey(Intern, on_delete=models.CASCADE, related_name='reset_tokens')
    token = models.CharField(max_length=64, unique=True)
    expires_at = models.DateTimeField()
    used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Reset token for {self.intern.email}"
