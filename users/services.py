import logging
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from internportal.exceptions import Conflict, InvalidCredentials
from notifications.dispatch import notify_admins
from notifications.mail import send_templated_email

from .credentials import hash_password, verify_password
from .models import AdminPrincipal, Intern, PasswordResetToken

logger = logging.getLogger(__name__)


def email_taken(email):
    return (
        AdminPrincipal.objects.filter(email__iexact=email).exists()
        or Intern.objects.filter(email__iexact=email).exists()
    )


def register_intern(data, user_image=None, acceptance_letter=None):
    """
    Create a pending intern from validated registration data and tell the
    admins about it once the row is committed.
    """
    email = data['email_address']
    matric_number = data['matric_number']

    if email_taken(email) or Intern.objects.filter(matric_number=matric_number).exists():
        raise Conflict('Email or Matric Number already registered.')

    try:
        with transaction.atomic():
            intern = Intern.objects.create(
                email=email,
                matric_number=matric_number,
                password_hash=hash_password(data['password']),
                first_name=data['first_name'],
                middle_name=data.get('middle_name') or '',
                last_name=data['last_name'],
                institution=data['institution'],
                phone_number=data['phone_number'],
                user_image=user_image.data if user_image else None,
                user_image_mime_type=user_image.mime_type if user_image else '',
                acceptance_letter=acceptance_letter.data if acceptance_letter else None,
                acceptance_letter_mime_type=acceptance_letter.mime_type if acceptance_letter else '',
                acceptance_letter_name=acceptance_letter.name if acceptance_letter else '',
            )
    except IntegrityError as e:
        # Lost a race with a concurrent registration using the same email or matric number
        logger.warning(f"Registration for {email} hit a unique constraint: {e}")
        raise Conflict('Email or Matric Number already registered.') from e

    logger.info(f"Intern #{intern.pk} ({intern.email}) registered, pending approval")

    notify_admins(
        'user_registered',
        sender_id=intern.pk,
        entity_id=intern.pk,
        name=intern.full_name,
        email_template='new_registration',
        email_context={
            'recipient_name': 'Admin',
            'intern_name': intern.full_name,
            'intern_email': intern.email,
            'registered_at': intern.created_at,
        },
    )
    return intern


def register_admin(actor, data):
    email = data['email']
    if email_taken(email):
        raise Conflict('An account with this email already exists.')

    try:
        with transaction.atomic():
            admin = AdminPrincipal.objects.create(
                email=email,
                password_hash=hash_password(data['password']),
                role=data['role'],
                first_name=data['first_name'],
                last_name=data['last_name'],
            )
    except IntegrityError as e:
        raise Conflict('An account with this email already exists.') from e

    logger.info(f"{admin.role} {admin.email} registered by superadmin#{actor.id}")
    return admin


def request_password_reset(email):
    """
    Issue a reset token for the intern with this email and mail it. Earlier
    unused tokens stop working. Returns the new token, or None when no such
    intern exists.
    """
    intern = Intern.objects.filter(email__iexact=email).first()
    if intern is None:
        logger.info(f"Password reset requested for unknown email {email}")
        return None

    ttl = settings.PORTAL['RESET_TOKEN_TTL_SECONDS']
    with transaction.atomic():
        PasswordResetToken.objects.filter(intern=intern, used=False).update(used=True)
        token = PasswordResetToken.objects.create(
            intern=intern,
            token=uuid.uuid4().hex,
            expires_at=timezone.now() + timedelta(seconds=ttl),
        )

    result = send_templated_email(
        intern.email,
        'Password Reset Request',
        'password_reset',
        {'recipient_name': intern.full_name, 'token': token.token},
    )
    if not result.ok:
        logger.error(f"Password reset email for intern #{intern.pk} was not delivered: {result.error}")
    return token


def reset_password(token_value, new_password):
    with transaction.atomic():
        token = (
            PasswordResetToken.objects.select_for_update()
            .select_related('intern')
            .filter(token=token_value)
            .first()
        )
        if token is None or token.used or token.expires_at <= timezone.now():
            raise ValidationError({'token': ['Invalid or expired token.']})

        intern = token.intern
        intern.password_hash = hash_password(new_password)
        intern.save(update_fields=['password_hash'])
        token.used = True
        token.save(update_fields=['used'])

    logger.info(f"Password reset completed for intern #{intern.pk}")
    return intern


def change_password(principal, current_password, new_password):
    with transaction.atomic():
        intern = Intern.objects.select_for_update().filter(pk=principal.id).first()
        if intern is None:
            raise NotFound('User not found.')
        if not verify_password(current_password, intern.password_hash):
            raise InvalidCredentials('Incorrect current password.')
        if current_password == new_password:
            raise ValidationError({'new_password': ['New password cannot be the same as the current password.']})
        intern.password_hash = hash_password(new_password)
        intern.save(update_fields=['password_hash'])

    logger.info(f"Intern #{intern.pk} changed their password")
    return intern


def update_profile(principal, data):
    fields = ['first_name', 'middle_name', 'last_name', 'institution', 'phone_number']
    with transaction.atomic():
        intern = Intern.objects.select_for_update().filter(pk=principal.id).first()
        if intern is None:
            raise NotFound('User not found.')
        changed = [f for f in fields if f in data]
        for f in changed:
            setattr(intern, f, data[f] or '')
        if changed:
            intern.save(update_fields=changed)

    logger.info(f"Intern #{intern.pk} updated profile fields {changed}")
    return intern


def update_email(principal, new_email, current_password):
    """Move the intern to a new login email after re-checking their password."""
    new_email = new_email.strip()
    try:
        with transaction.atomic():
            intern = Intern.objects.select_for_update().filter(pk=principal.id).first()
            if intern is None:
                raise NotFound('User not found.')
            if not verify_password(current_password, intern.password_hash):
                raise InvalidCredentials('Incorrect current password.')
            if intern.email.lower() == new_email.lower():
                raise ValidationError({'new_email': ['New email is the same as the current email.']})
            if (
                AdminPrincipal.objects.filter(email__iexact=new_email).exists()
                or Intern.objects.filter(email__iexact=new_email).exclude(pk=intern.pk).exists()
            ):
                raise Conflict('This email is already registered to another account.')
            old_email = intern.email
            intern.email = new_email
            intern.save(update_fields=['email'])
    except IntegrityError as e:
        raise Conflict('This email is already registered to another account.') from e

    logger.info(f"Intern #{intern.pk} changed email from {old_email} to {new_email}")
    return intern


def set_profile_picture(principal, attachment):
    if attachment is None:
        raise ValidationError({'profile_image': ['No file uploaded.']})
    if not attachment.mime_type.startswith('image/'):
        raise ValidationError({'profile_image': ['Profile picture must be an image.']})

    updated = Intern.objects.filter(pk=principal.id).update(
        user_image=attachment.data,
        user_image_mime_type=attachment.mime_type,
    )
    if not updated:
        raise NotFound('User not found.')
    logger.info(f"Intern #{principal.id} uploaded a profile picture ({attachment.size} bytes)")


def remove_profile_picture(principal):
    updated = Intern.objects.filter(pk=principal.id).update(user_image=None, user_image_mime_type='')
    if not updated:
        raise NotFound('User not found.')
    logger.info(f"Intern #{principal.id} removed their profile picture")


def set_account_disabled(actor, intern_id, disabled):
    """
    Disable or re-enable an intern account. A disabled intern is refused at
    login; sessions already open run until they expire or log out.
    """
    with transaction.atomic():
        intern = Intern.objects.select_for_update().filter(pk=intern_id).first()
        if intern is None:
            raise NotFound('User not found.')
        intern.is_disabled = disabled
        intern.disabled_at = timezone.now() if disabled else None
        intern.save(update_fields=['is_disabled', 'disabled_at'])

    logger.info(
        f"Intern #{intern.pk} ({intern.email}) {'disabled' if disabled else 'enabled'} "
        f"by superadmin#{actor.id}"
    )
    return intern
