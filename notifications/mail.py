import logging
from contextlib import contextmanager
from dataclasses import dataclass

from django.conf import settings
from django.core.mail import get_connection, send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailResult:
    ok: bool
    error: str = ''


def render_email(template_name, context):
    """Render one of the HTML bodies under templates/notifications/email/."""
    context = {'frontend_url': settings.PORTAL['FRONTEND_URL'], **context}
    return render_to_string(f'notifications/email/{template_name}.html', context)


@contextmanager
def shared_connection():
    """
    One mail connection for a batch of sends, so an unreachable server costs
    a single timeout. Yields ``(connection, '')``, or ``(None, error)`` when
    the connection cannot be opened.
    """
    connection = get_connection()
    try:
        connection.open()
    except Exception as e:
        logger.error(f"Could not open a mail connection: {e}", exc_info=True)
        yield None, str(e)
        return

    try:
        yield connection, ''
    finally:
        try:
            connection.close()
        except Exception as e:
            logger.warning(f"Mail connection did not close cleanly: {e}")


def send_email(to, subject, html, connection=None):
    """
    Send one HTML email. Transport errors are logged and reported through
    the returned MailResult, never raised.
    """
    try:
        send_mail(
            subject,
            strip_tags(html),
            settings.DEFAULT_FROM_EMAIL,
            [to],
            html_message=html,
            fail_silently=False,
            connection=connection,
        )
    except Exception as e:
        logger.error(f"Failed to send email '{subject}' to {to}: {e}", exc_info=True)
        return MailResult(ok=False, error=str(e))

    logger.info(f"Email '{subject}' sent to {to}")
    return MailResult(ok=True)


def send_templated_email(to, subject, template_name, context, connection=None):
    try:
        html = render_email(template_name, context)
    except Exception as e:
        logger.error(f"Failed to render email template {template_name} for {to}: {e}", exc_info=True)
        return MailResult(ok=False, error=str(e))
    return send_email(to, subject, html, connection=connection)
