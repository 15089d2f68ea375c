"""
Notification fan-out.

Every workflow reports its outcome through this module after its own
transaction has committed. One Notification row is written per recipient,
each in its own savepoint, and an email is attempted independently of the
row. Failures are logged and collected on a FanOutReport; nothing here
raises back into the caller, except ``broadcast_message`` which is
all-or-nothing.
"""
import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.db import DatabaseError, transaction

from internportal.exceptions import InternalError
from users.models import AdminPrincipal, Intern

from .mail import send_templated_email, shared_connection
from .models import Message, Notification

logger = logging.getLogger(__name__)

ADMIN = 'admin'
USER = 'user'


@dataclass(frozen=True)
class Recipient:
    role: str
    id: int
    email: str = ''
    name: str = ''

    @classmethod
    def for_admin(cls, admin):
        return cls(role=ADMIN, id=admin.pk, email=admin.email, name=admin.full_name)

    @classmethod
    def for_intern(cls, intern):
        return cls(role=USER, id=intern.pk, email=intern.email, name=intern.full_name)


@dataclass(frozen=True)
class EmailContent:
    subject: str
    template: str = 'notification'
    context: dict = field(default_factory=dict)


@dataclass(frozen=True)
class DeliveryFailure:
    recipient: Recipient
    stage: str
    error: str


@dataclass
class FanOutReport:
    notifications: list = field(default_factory=list)
    emails_sent: int = 0
    failures: list = field(default_factory=list)

    @property
    def ok(self):
        return not self.failures


def build_link(role, section, entity_id=None):
    """Deep link into the recipient's dashboard, e.g. ``/admin_dashboard.html#logbook?id=4``."""
    link = f"/{role}_dashboard.html#{section}"
    if entity_id:
        link += f"?id={entity_id}"
    return link


def _absolute(link):
    return f"{settings.PORTAL['FRONTEND_URL'].rstrip('/')}{link}"


def notify(recipients, *, sender_id, message, section, entity_id=None, email=None):
    """
    Persist one notification per recipient and, when ``email`` is given,
    mail each recipient that has an address. Every row is written before the
    first email goes out, and all emails share one mail connection. Returns
    a FanOutReport.
    """
    report = FanOutReport()
    outbox = []

    for recipient in recipients:
        link = build_link(recipient.role, section, entity_id)
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    recipient_id=recipient.id,
                    recipient_role=recipient.role,
                    sender_id=sender_id,
                    message=message,
                    section=section,
                    entity_id=entity_id,
                    link=link,
                )
            report.notifications.append(notification)
        except Exception as e:
            logger.error(
                f"Failed to store notification for {recipient.role}#{recipient.id} "
                f"(section={section}, entity_id={entity_id}): {e}",
                exc_info=True,
            )
            report.failures.append(DeliveryFailure(recipient, 'notification', str(e)))

        if email is not None and recipient.email:
            outbox.append((recipient, link))

    if outbox:
        with shared_connection() as (connection, connection_error):
            for recipient, link in outbox:
                if connection is None:
                    report.failures.append(DeliveryFailure(recipient, 'email', connection_error))
                    continue
                context = {
                    'recipient_name': recipient.name,
                    'message': message,
                    'link': _absolute(link),
                    **email.context,
                }
                result = send_templated_email(
                    recipient.email, email.subject, email.template, context, connection=connection,
                )
                if result.ok:
                    report.emails_sent += 1
                else:
                    report.failures.append(DeliveryFailure(recipient, 'email', result.error))

    if report.failures:
        logger.warning(
            f"Fan-out for section={section} entity_id={entity_id} finished with "
            f"{len(report.failures)} failure(s) across {len(recipients)} recipient(s)"
        )
    return report


# action -> (message template, dashboard section, email subject)
ADMIN_ACTIONS = {
    'user_registered': (
        'New user registered: {name}',
        'user-details',
        'New User Registration Pending Approval',
    ),
    'logbook_submitted': (
        '{name} submitted a logbook report ({week_range})',
        'logbook',
        'New Logbook Report',
    ),
    'leave_submitted': (
        '{name} submitted a leave request for {leave_type}',
        'leave-requests',
        'New Leave Request',
    ),
    'complaint_submitted': (
        '{name} submitted a new complaint: "{subject}"',
        'complaints',
        'New Complaint / Suggestion',
    ),
    'project_uploaded': (
        '{name} uploaded a new project: "{project_name}"',
        'projects',
        'New Project Upload',
    ),
}


def admin_recipients():
    return [Recipient.for_admin(admin) for admin in AdminPrincipal.objects.order_by('id')]


def notify_admins(action, *, sender_id, entity_id=None, email_template='notification', email_context=None, **params):
    """Tell every admin and superadmin about something an intern did."""
    template, section, subject = ADMIN_ACTIONS[action]
    message = template.format(**params)
    try:
        recipients = admin_recipients()
    except DatabaseError as e:
        logger.error(f"Could not load admins for '{action}' (entity_id={entity_id}): {e}", exc_info=True)
        return FanOutReport()

    email = EmailContent(subject=subject, template=email_template, context=email_context or {})
    report = notify(
        recipients,
        sender_id=sender_id,
        message=message,
        section=section,
        entity_id=entity_id,
        email=email,
    )
    logger.info(f"Notified {len(report.notifications)}/{len(recipients)} admin(s) of {action} (entity_id={entity_id})")
    return report


def notify_intern(intern, *, sender_id, message, section, entity_id=None, subject=None):
    """Tell one intern about the outcome of a review."""
    email = EmailContent(subject=subject) if subject else None
    return notify(
        [Recipient.for_intern(intern)],
        sender_id=sender_id,
        message=message,
        section=section,
        entity_id=entity_id,
        email=email,
    )


def broadcast_message(sender, *, title, body, attachment=None):
    """
    Store a Message and one notification per approved intern in a single
    transaction. Either all rows are written or none are.
    """
    try:
        with transaction.atomic():
            message = Message.objects.create(
                title=title,
                body=body,
                file_data=attachment.data if attachment else None,
                file_mime_type=attachment.mime_type if attachment else '',
                file_name=attachment.name if attachment else '',
                created_by_id=sender.id,
            )
            # Approved interns only: pending and rejected accounts cannot log in to read it
            intern_ids = list(
                Intern.objects.filter(approval_status=Intern.STATUS_APPROVED).values_list('id', flat=True)
            )
            Notification.objects.bulk_create([
                Notification(
                    recipient_id=intern_id,
                    recipient_role=USER,
                    sender_id=sender.id,
                    message=f"New message: {title}",
                    section='messages',
                    entity_id=message.pk,
                    link=build_link(USER, 'messages', message.pk),
                )
                for intern_id in intern_ids
            ])
    except DatabaseError as e:
        logger.error(f"Broadcast '{title}' by admin#{sender.id} failed and was rolled back: {e}", exc_info=True)
        raise InternalError('Failed to send message.') from e

    logger.info(f"Admin#{sender.id} broadcast message #{message.pk} to {len(intern_ids)} intern(s)")
    return message, len(intern_ids)


def unread_count(principal):
    return Notification.objects.filter(
        recipient_id=principal.id,
        recipient_role=principal.recipient_role,
        is_read=False,
    ).count()


def mark_read(principal, notification_id):
    """Mark one of the principal's notifications read. Returns False when it is not theirs."""
    updated = Notification.objects.filter(
        pk=notification_id,
        recipient_id=principal.id,
        recipient_role=principal.recipient_role,
    ).update(is_read=True)
    return bool(updated)


def mark_all_read(principal):
    return Notification.objects.filter(
        recipient_id=principal.id,
        recipient_role=principal.recipient_role,
        is_read=False,
    ).update(is_read=True)
