"""Intern submissions: guard, transactional insert, then notify every admin."""
import datetime
import json
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError

from notifications.models import Notification
from submissions import services
from submissions.models import ComplaintSuggestion, LeaveRequest, LogbookReport, ProjectUpload

LAGOS = ZoneInfo('Africa/Lagos')

# 2026-10-19 is a Monday
MONDAY_BEFORE_CUTOFF = datetime.datetime(2026, 10, 19, 8, 59, tzinfo=LAGOS)
MONDAY_AT_CUTOFF = datetime.datetime(2026, 10, 19, 9, 0, tzinfo=LAGOS)
WEDNESDAY = datetime.datetime(2026, 10, 21, 14, 30, tzinfo=LAGOS)


@pytest.fixture()
def clock():
    with patch('submissions.services.local_now', return_value=WEDNESDAY) as mocked:
        yield mocked


def logbook_payload(**overrides):
    data = {
        'week_date': '2026-10-12',
        'week_range': 'Oct 12 - Oct 16',
        'reports': [{'day': 'Monday', 'activity': 'Onboarding'}],
    }
    data.update(overrides)
    return data


class TestSubmissionWindow:
    def test_open_before_nine_on_monday(self):
        assert services.submission_window_open(MONDAY_BEFORE_CUTOFF)

    def test_closed_from_nine_on_monday(self):
        assert not services.submission_window_open(MONDAY_AT_CUTOFF)
        assert not services.submission_window_open(MONDAY_AT_CUTOFF.replace(hour=23, minute=59))

    def test_open_rest_of_week(self):
        sunday = datetime.datetime(2026, 10, 18, 23, 0, tzinfo=LAGOS)
        assert services.submission_window_open(sunday)
        assert services.submission_window_open(WEDNESDAY)

    def test_local_now_uses_portal_zone(self):
        assert services.local_now().utcoffset() == datetime.timedelta(hours=1)


class TestLogbookSubmission:
    def test_submit_notifies_every_admin(self, intern_api, approved_intern, make_admin, clock):
        admins = [make_admin(), make_admin(role='superadmin')]

        res = intern_api.post('/api/users/logbook/', logbook_payload(), format='json')

        assert res.status_code == 201
        report = LogbookReport.objects.get()
        assert report.owner_id == approved_intern.pk
        assert (report.iso_year, report.iso_week) == (2026, 42)
        assert report.status == 'pending'

        rows = Notification.objects.filter(section='logbook', recipient_role='admin')
        assert {r.recipient_id for r in rows} == {a.pk for a in admins}
        assert {r.message for r in rows} == {'Tobi Adewale submitted a logbook report (Oct 12 - Oct 16)'}
        assert {r.entity_id for r in rows} == {report.pk}

    def test_same_iso_week_twice_is_conflict(self, intern_api, clock):
        assert intern_api.post('/api/users/logbook/', logbook_payload(), format='json').status_code == 201

        # Friday of the same ISO week
        res = intern_api.post('/api/users/logbook/', logbook_payload(week_date='2026-10-16'), format='json')

        assert res.status_code == 409
        assert res.json()['message'] == 'You have already submitted a report for this week.'
        assert LogbookReport.objects.count() == 1

    def test_next_week_is_accepted(self, intern_api, clock):
        intern_api.post('/api/users/logbook/', logbook_payload(), format='json')
        res = intern_api.post('/api/users/logbook/', logbook_payload(week_date='2026-10-19'), format='json')
        assert res.status_code == 201
        assert LogbookReport.objects.count() == 2

    def test_refused_after_monday_cutoff(self, intern_api, make_admin):
        make_admin()
        with patch('submissions.services.local_now', return_value=MONDAY_AT_CUTOFF):
            res = intern_api.post('/api/users/logbook/', logbook_payload(), format='json')

        assert res.status_code == 403
        assert res.json()['message'] == 'Reports can only be submitted before 9:00 AM on Monday.'
        assert not LogbookReport.objects.exists()
        assert not Notification.objects.exists()

    def test_accepted_just_before_cutoff(self, intern_api):
        with patch('submissions.services.local_now', return_value=MONDAY_BEFORE_CUTOFF):
            res = intern_api.post('/api/users/logbook/', logbook_payload(), format='json')
        assert res.status_code == 201

    def test_reports_as_json_string_with_attachment(self, intern_api, clock):
        upload = SimpleUploadedFile('week.pdf', b'%PDF-week', content_type='application/pdf')
        payload = logbook_payload(reports=json.dumps([{'day': 'Tue'}]), file_attachment=upload)

        res = intern_api.post('/api/users/logbook/', payload, format='multipart')

        assert res.status_code == 201
        report = LogbookReport.objects.get()
        assert report.reports == [{'day': 'Tue'}]
        assert bytes(report.attachment_data) == b'%PDF-week'
        assert report.attachment_size == len(b'%PDF-week')

        listed = intern_api.get('/api/users/logbook/').json()['rows'][0]
        assert listed['has_attachment'] is True
        assert 'attachment_data' not in listed

    def test_malformed_reports_json(self, intern_api, clock):
        res = intern_api.post('/api/users/logbook/', logbook_payload(reports='{not json'), format='multipart')
        assert res.status_code == 400
        assert res.json()['message'] == 'Invalid reports JSON format'

    def test_missing_fields(self, intern_api, clock):
        res = intern_api.post('/api/users/logbook/', {'week_range': 'x'}, format='json')
        assert res.status_code == 400
        assert set(res.json()['errors']) >= {'week_date', 'reports'}

    def test_notification_failure_keeps_the_report(self, intern_api, make_admin, clock):
        make_admin()
        with patch.object(Notification.objects, 'create', side_effect=DatabaseError('gone')):
            res = intern_api.post('/api/users/logbook/', logbook_payload(), format='json')

        assert res.status_code == 201
        assert res.json()['success'] is True
        assert LogbookReport.objects.count() == 1
        assert not Notification.objects.exists()

    def test_failed_insert_sends_no_notification(self, intern_api, make_admin, clock):
        make_admin()
        with patch.object(LogbookReport, 'save', side_effect=DatabaseError('connection reset')):
            res = intern_api.post('/api/users/logbook/', logbook_payload(), format='json')

        assert res.status_code == 500
        assert res.json()['success'] is False
        assert not Notification.objects.exists()


class TestLeaveSubmission:
    def payload(self, **overrides):
        data = {'leave_type': 'Sick', 'start_date': '2026-11-02', 'end_date': '2026-11-04', 'reason': 'Flu'}
        data.update(overrides)
        return data

    def test_submit(self, intern_api, make_admin):
        make_admin()
        res = intern_api.post('/api/users/leave-requests/', self.payload(), format='json')

        assert res.status_code == 201
        leave = LeaveRequest.objects.get()
        assert leave.status == 'Pending'
        note = Notification.objects.get()
        assert note.message == 'Tobi Adewale submitted a leave request for Sick'
        assert note.link == f'/admin_dashboard.html#leave-requests?id={leave.pk}'

    def test_start_after_end_is_rejected_before_any_write(self, intern_api, make_admin):
        make_admin()
        res = intern_api.post(
            '/api/users/leave-requests/',
            self.payload(start_date='2026-11-05', end_date='2026-11-04'),
            format='json',
        )

        assert res.status_code == 400
        assert res.json()['message'] == 'Start Date cannot be after End Date.'
        assert not LeaveRequest.objects.exists()
        assert not Notification.objects.exists()

    def test_single_day_leave(self, intern_api):
        res = intern_api.post(
            '/api/users/leave-requests/',
            self.payload(start_date='2026-11-05', end_date='2026-11-05'),
            format='json',
        )
        assert res.status_code == 201


class TestComplaintSubmission:
    def test_empty_submission_is_rejected(self, intern_api):
        res = intern_api.post('/api/users/complaints/', {'subject': 'Only a subject'}, format='json')
        assert res.status_code == 400
        assert not ComplaintSuggestion.objects.exists()

    def test_suggestion(self, intern_api, make_admin):
        make_admin()
        res = intern_api.post(
            '/api/users/complaints/', {'subject': 'Canteen', 'message': 'More options please'}, format='json',
        )

        assert res.status_code == 201
        assert Notification.objects.get().message == 'Tobi Adewale submitted a new complaint: "Canteen"'

    def test_complaint_details_only(self, intern_api, make_admin):
        make_admin()
        res = intern_api.post(
            '/api/users/complaints/',
            {'complaint_details': 'Harassed at the gate', 'participants': ['Guard A']},
            format='json',
        )

        assert res.status_code == 201
        complaint = ComplaintSuggestion.objects.get()
        assert complaint.participants == ['Guard A']
        assert Notification.objects.get().message == (
            'Tobi Adewale submitted a new complaint: "Complaint Submitted"'
        )


class TestProjectUpload:
    def test_requires_file(self, intern_api):
        res = intern_api.post('/api/users/projects/', {'project_name': 'Payroll'}, format='multipart')
        assert res.status_code == 400
        assert res.json()['message'] == 'No file uploaded.'

    def test_upload(self, intern_api, make_admin):
        make_admin()
        upload = SimpleUploadedFile('payroll.zip', b'PK\x03\x04', content_type='application/zip')

        res = intern_api.post(
            '/api/users/projects/', {'project_name': 'Payroll', 'project_file': upload}, format='multipart',
        )

        assert res.status_code == 201
        project = ProjectUpload.objects.get()
        assert project.attachment_name == 'payroll.zip'
        assert Notification.objects.get().message == 'Tobi Adewale uploaded a new project: "Payroll"'

    def test_oversized_file(self, intern_api, settings):
        settings.PORTAL = {**settings.PORTAL, 'MAX_ATTACHMENT_SIZE': 4}
        upload = SimpleUploadedFile('big.bin', b'0123456789', content_type='application/octet-stream')

        res = intern_api.post(
            '/api/users/projects/', {'project_name': 'Big', 'project_file': upload}, format='multipart',
        )

        assert res.status_code == 400
        assert not ProjectUpload.objects.exists()


class TestInternDashboard:
    def test_summary(self, intern_api, approved_intern, clock):
        intern_api.post('/api/users/logbook/', logbook_payload(), format='json')
        intern_api.post(
            '/api/users/leave-requests/',
            {'leave_type': 'Annual', 'start_date': '2026-12-01', 'end_date': '2026-12-05', 'reason': 'Rest'},
            format='json',
        )

        body = intern_api.get('/api/users/dashboard/summary/').json()

        assert body['stats'] == {'total_reports': 1, 'pending_leave': 1, 'projects_uploaded': 0}
        assert [a['type'] for a in body['activities']] == ['leave', 'report']
