"""
Intern admission: pending -> approved | rejected.

Both transitions lock the row, refuse anything that is no longer pending,
commit, and only then email the intern. The email is best-effort.
"""
import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from internportal.exceptions import AlreadyProcessed
from notifications.mail import send_templated_email

from .models import Intern

logger = logging.getLogger(__name__)


def _lock_pending(intern_id):
    intern = Intern.objects.select_for_update().filter(pk=intern_id).first()
    if intern is None:
        raise NotFound('User not found.')
    if intern.approval_status != Intern.STATUS_PENDING:
        raise AlreadyProcessed(f'User has already been {intern.approval_status}.')
    return intern


def approve_intern(actor, intern_id):
    with transaction.atomic():
        intern = _lock_pending(intern_id)
        intern.is_approved = True
        intern.approval_status = Intern.STATUS_APPROVED
        intern.approved_by_id = actor.id
        intern.approved_at = timezone.now()
        intern.rejection_reason = None
        intern.save(update_fields=['is_approved', 'approval_status', 'approved_by', 'approved_at', 'rejection_reason'])

    logger.info(f"Intern #{intern.pk} ({intern.email}) approved by {actor.role}#{actor.id}")

    result = send_templated_email(
        intern.email,
        'Account Approved - Welcome!',
        'account_approved',
        {'recipient_name': intern.full_name},
    )
    if not result.ok:
        logger.error(f"Approval email for intern #{intern.pk} was not delivered: {result.error}")
    return intern, result


def reject_intern(actor, intern_id, reason=None, delete=False):
    """
    Reject a pending intern. With ``delete`` the row is purged, otherwise it
    is kept with the reason recorded. Returns ``(intern, mail_result)``; the
    intern has no pk after a delete.
    """
    reason = (reason or '').strip() or None

    with transaction.atomic():
        intern = _lock_pending(intern_id)
        email, name = intern.email, intern.full_name
        if delete:
            intern.delete()
        else:
            intern.is_approved = False
            intern.approval_status = Intern.STATUS_REJECTED
            intern.approved_by_id = actor.id
            intern.approved_at = timezone.now()
            intern.rejection_reason = reason
            intern.save(update_fields=['is_approved', 'approval_status', 'approved_by', 'approved_at', 'rejection_reason'])

    logger.info(
        f"Intern {email} rejected by {actor.role}#{actor.id}"
        f"{' and deleted' if delete else ''}"
    )

    result = send_templated_email(
        email,
        'Account Registration Update',
        'account_rejected',
        {'recipient_name': name, 'reason': reason},
    )
    if not result.ok:
        logger.error(f"Rejection email for {email} was not delivered: {result.error}")
    return intern, result
