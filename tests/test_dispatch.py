"""Notification fan-out: per-recipient isolation and all-or-nothing broadcasts."""
from smtplib import SMTPException
from unittest.mock import Mock, patch

import pytest
from django.core.mail import get_connection
from django.db import DatabaseError

from internportal.attachments import Attachment
from internportal.exceptions import InternalError
from notifications import dispatch
from notifications.models import Message, Notification
from tests.conftest import principal_of


class TestBuildLink:
    def test_with_entity(self):
        assert dispatch.build_link('admin', 'logbook', 7) == '/admin_dashboard.html#logbook?id=7'

    def test_without_entity(self):
        assert dispatch.build_link('user', 'messages') == '/user_dashboard.html#messages'


class TestNotify:
    def test_one_row_per_recipient(self, make_admin):
        admins = [make_admin(), make_admin()]
        recipients = [dispatch.Recipient.for_admin(a) for a in admins]

        report = dispatch.notify(recipients, sender_id=None, message='hello', section='logbook', entity_id=3)

        assert report.ok
        assert len(report.notifications) == 2
        rows = Notification.objects.order_by('recipient_id')
        assert [r.recipient_id for r in rows] == sorted(a.pk for a in admins)
        assert all(r.link == '/admin_dashboard.html#logbook?id=3' for r in rows)
        assert all(r.sender_id is None and not r.is_read for r in rows)

    def test_store_failure_for_one_recipient_does_not_stop_the_rest(self, make_admin):
        first, second, third = make_admin(), make_admin(), make_admin()
        real_create = Notification.objects.create

        def flaky(**kwargs):
            if kwargs['recipient_id'] == second.pk:
                raise DatabaseError('disk full')
            return real_create(**kwargs)

        with patch.object(Notification.objects, 'create', side_effect=flaky):
            report = dispatch.notify(
                [dispatch.Recipient.for_admin(a) for a in (first, second, third)],
                sender_id=None, message='m', section='complaints',
            )

        assert not report.ok
        assert len(report.failures) == 1
        assert report.failures[0].recipient.id == second.pk
        assert report.failures[0].stage == 'notification'
        assert set(Notification.objects.values_list('recipient_id', flat=True)) == {first.pk, third.pk}

    def test_email_failure_is_collected_not_raised(self, make_admin, mailoutbox):
        admins = [make_admin(), make_admin()]
        email = dispatch.EmailContent(subject='Heads up')
        calls = {'n': 0}

        def flaky_send(*args, **kwargs):
            calls['n'] += 1
            if calls['n'] == 1:
                raise SMTPException('timeout')
            return 1

        with patch('notifications.mail.send_mail', side_effect=flaky_send):
            report = dispatch.notify(
                [dispatch.Recipient.for_admin(a) for a in admins],
                sender_id=None, message='m', section='projects', email=email,
            )

        assert Notification.objects.count() == 2
        assert report.emails_sent == 1
        assert [f.stage for f in report.failures] == ['email']

    def test_email_carries_deep_link(self, make_intern, mailoutbox, settings):
        settings.PORTAL = {**settings.PORTAL, 'FRONTEND_URL': 'https://portal.example'}
        intern = make_intern()

        dispatch.notify_intern(
            intern, sender_id=1, message='Graded', section='logbook', entity_id=12, subject='Logbook Report Graded',
        )

        assert len(mailoutbox) == 1
        html = mailoutbox[0].alternatives[0][0]
        assert 'https://portal.example/user_dashboard.html#logbook?id=12' in html

    def test_emails_share_one_connection(self, make_admin, mailoutbox):
        admins = [make_admin(), make_admin(), make_admin()]

        with patch('notifications.mail.get_connection', wraps=get_connection) as connect:
            report = dispatch.notify(
                [dispatch.Recipient.for_admin(a) for a in admins],
                sender_id=None, message='m', section='logbook', email=dispatch.EmailContent(subject='Heads up'),
            )

        assert connect.call_count == 1
        assert report.emails_sent == 3
        assert len(mailoutbox) == 3

    def test_unreachable_mail_server_is_tried_once(self, make_admin):
        admins = [make_admin(), make_admin()]
        connection = Mock()
        connection.open.side_effect = SMTPException('connection refused')

        with patch('notifications.mail.get_connection', return_value=connection), \
                patch('notifications.mail.send_mail') as send:
            report = dispatch.notify(
                [dispatch.Recipient.for_admin(a) for a in admins],
                sender_id=None, message='m', section='logbook', email=dispatch.EmailContent(subject='Heads up'),
            )

        assert connection.open.call_count == 1
        send.assert_not_called()
        assert Notification.objects.count() == 2
        assert report.emails_sent == 0
        assert [(f.stage, f.error) for f in report.failures] == [('email', 'connection refused')] * 2

    def test_no_connection_without_email(self, make_admin):
        with patch('notifications.mail.get_connection') as connect:
            dispatch.notify(
                [dispatch.Recipient.for_admin(make_admin())], sender_id=None, message='m', section='logbook',
            )

        connect.assert_not_called()


class TestNotifyAdmins:
    @pytest.mark.parametrize('action, params, expected, section', [
        ('logbook_submitted', {'name': 'Tobi Ade', 'week_range': 'Oct 12 - Oct 16'},
         'Tobi Ade submitted a logbook report (Oct 12 - Oct 16)', 'logbook'),
        ('leave_submitted', {'name': 'Tobi Ade', 'leave_type': 'Sick'},
         'Tobi Ade submitted a leave request for Sick', 'leave-requests'),
        ('complaint_submitted', {'name': 'Tobi Ade', 'subject': 'Noise'},
         'Tobi Ade submitted a new complaint: "Noise"', 'complaints'),
        ('project_uploaded', {'name': 'Tobi Ade', 'project_name': 'Payroll'},
         'Tobi Ade uploaded a new project: "Payroll"', 'projects'),
    ])
    def test_message_templates(self, make_admin, action, params, expected, section):
        make_admin()
        make_admin(role='superadmin')

        dispatch.notify_admins(action, sender_id=5, entity_id=9, **params)

        rows = Notification.objects.all()
        assert rows.count() == 2
        assert {r.message for r in rows} == {expected}
        assert {r.section for r in rows} == {section}
        assert {r.link for r in rows} == {f'/admin_dashboard.html#{section}?id=9'}

    def test_no_admins_is_not_an_error(self):
        report = dispatch.notify_admins('leave_submitted', sender_id=1, name='X', leave_type='Annual')
        assert report.ok
        assert report.notifications == []


class TestBroadcast:
    def test_one_message_and_one_notification_per_approved_intern(self, admin_user, make_intern):
        approved = [make_intern(), make_intern(), make_intern()]
        make_intern(status='pending')

        message, count = dispatch.broadcast_message(principal_of(admin_user), title='Holiday', body='Office closed')

        assert count == 3
        assert Message.objects.count() == 1
        rows = Notification.objects.filter(section='messages')
        assert rows.count() == 3
        assert {r.recipient_id for r in rows} == {i.pk for i in approved}
        assert {r.message for r in rows} == {'New message: Holiday'}
        assert {r.entity_id for r in rows} == {message.pk}
        assert {r.link for r in rows} == {f'/user_dashboard.html#messages?id={message.pk}'}

    def test_failed_fan_out_persists_nothing(self, admin_user, make_intern):
        make_intern()
        make_intern()

        with patch.object(Notification.objects, 'bulk_create', side_effect=DatabaseError('lost connection')):
            with pytest.raises(InternalError):
                dispatch.broadcast_message(principal_of(admin_user), title='T', body='B')

        assert Message.objects.count() == 0
        assert Notification.objects.count() == 0

    def test_attachment_is_stored_on_message(self, admin_user):
        attachment = Attachment(data=b'abc', mime_type='text/plain', size=3, name='notes.txt')

        message, _ = dispatch.broadcast_message(principal_of(admin_user), title='T', body='B', attachment=attachment)

        message.refresh_from_db()
        assert message.attachment.data == b'abc'
        assert message.attachment.name == 'notes.txt'


class TestMarkRead:
    def test_scoped_to_recipient_role(self, make_admin, make_intern):
        admin = make_admin()
        intern = make_intern(pk=admin.pk)
        note = dispatch.notify(
            [dispatch.Recipient.for_admin(admin)], sender_id=None, message='m', section='logbook',
        ).notifications[0]

        # Same numeric id, different principal kind
        assert not dispatch.mark_read(principal_of(intern), note.pk)
        assert dispatch.mark_read(principal_of(admin), note.pk)
        note.refresh_from_db()
        assert note.is_read

    def test_mark_all_read_counts_only_own(self, make_admin):
        me, other = make_admin(), make_admin()
        for admin in (me, me, other):
            dispatch.notify([dispatch.Recipient.for_admin(admin)], sender_id=None, message='m', section='logbook')

        assert dispatch.mark_all_read(principal_of(me)) == 2
        assert dispatch.unread_count(principal_of(me)) == 0
        assert dispatch.unread_count(principal_of(other)) == 1
