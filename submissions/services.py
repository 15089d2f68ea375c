"""
Submission and review workflows.

Submissions: guard, insert in a transaction, then tell every admin.
Reviews: lock the row, check it is still open, update, then tell the
submitter. Notifications always run after the commit and never fail the
request.
"""
import logging
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from internportal.exceptions import AlreadyProcessed, DuplicateSubmission, SubmissionWindowClosed
from notifications.dispatch import notify_admins, notify_intern
from users.models import Intern

from .models import ComplaintSuggestion, LeaveRequest, LogbookReport, ProjectUpload

logger = logging.getLogger(__name__)

LEAVE_DECISIONS = ('approved', 'rejected')
COMPLAINT_DECISIONS = ('resolved', 'dismissed')


def portal_zone():
    return ZoneInfo(settings.PORTAL['LOGBOOK_TIME_ZONE'])


def local_now():
    """Current time in the zone the logbook cutoff is defined in."""
    return timezone.now().astimezone(portal_zone())


def submission_window_open(moment):
    """Logbook reports are refused from 09:00 on Monday until the day ends."""
    return not (
        moment.weekday() == settings.PORTAL['LOGBOOK_CUTOFF_WEEKDAY']
        and moment.hour >= settings.PORTAL['LOGBOOK_CUTOFF_HOUR']
    )


def iso_week_of(day):
    iso = day.isocalendar()
    return iso[0], iso[1]


def _owner(principal):
    intern = Intern.objects.only('id', 'first_name', 'last_name', 'email').filter(pk=principal.id).first()
    if intern is None:
        raise NotFound('User not found.')
    return intern


def _owner_name(intern):
    return f"{intern.first_name} {intern.last_name}".strip()


# ---- Submission workflows ----

def submit_logbook_report(principal, *, week_date, week_range, reports, attachment=None):
    if not submission_window_open(local_now()):
        raise SubmissionWindowClosed()

    intern = _owner(principal)
    iso_year, iso_week = iso_week_of(week_date)
    duplicate = 'You have already submitted a report for this week.'

    if LogbookReport.objects.filter(owner=intern, iso_year=iso_year, iso_week=iso_week).exists():
        raise DuplicateSubmission(duplicate)

    report = LogbookReport(
        owner=intern,
        week_date=week_date,
        week_range=week_range,
        reports=reports,
        iso_year=iso_year,
        iso_week=iso_week,
    )
    report.set_attachment(attachment)
    try:
        with transaction.atomic():
            report.save()
    except IntegrityError as e:
        # A concurrent submission for the same week won the unique constraint
        raise DuplicateSubmission(duplicate) from e

    logger.info(f"Intern #{intern.pk} submitted logbook report #{report.pk} for {iso_year}-W{iso_week:02d}")
    notify_admins(
        'logbook_submitted',
        sender_id=intern.pk,
        entity_id=report.pk,
        name=_owner_name(intern),
        week_range=week_range,
    )
    return report


def submit_leave_request(principal, *, leave_type, start_date, end_date, reason, attachment=None):
    if start_date > end_date:
        raise ValidationError({'start_date': ['Start Date cannot be after End Date.']})

    intern = _owner(principal)
    leave = LeaveRequest(
        owner=intern,
        leave_type=leave_type,
        start_date=start_date,
        end_date=end_date,
        reason=reason,
    )
    leave.set_attachment(attachment)
    with transaction.atomic():
        leave.save()

    logger.info(f"Intern #{intern.pk} submitted leave request #{leave.pk} ({leave_type})")
    notify_admins(
        'leave_submitted',
        sender_id=intern.pk,
        entity_id=leave.pk,
        name=_owner_name(intern),
        leave_type=leave_type,
    )
    return leave


def _filled(value):
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def submit_complaint(principal, *, subject=None, message=None, incident_date_time=None,
                     incident_location=None, complaint_details=None, participants=None):
    """A submission counts when it carries a full suggestion or any complaint detail."""
    suggestion_given = _filled(subject) and _filled(message)
    complaint_given = any(
        _filled(v) for v in (incident_date_time, incident_location, complaint_details, participants)
    )
    if not (suggestion_given or complaint_given):
        raise ValidationError(
            'Missing required information. Please provide either a suggestion or fill out the complaint details.'
        )

    intern = _owner(principal)
    with transaction.atomic():
        complaint = ComplaintSuggestion.objects.create(
            owner=intern,
            subject=subject or None,
            message=message or None,
            incident_date_time=incident_date_time,
            incident_location=incident_location or None,
            complaint_details=complaint_details or None,
            participants=participants,
        )

    logger.info(f"Intern #{intern.pk} submitted complaint #{complaint.pk}")
    notify_admins(
        'complaint_submitted',
        sender_id=intern.pk,
        entity_id=complaint.pk,
        name=_owner_name(intern),
        subject=subject or 'Complaint Submitted',
    )
    return complaint


def submit_project(principal, *, project_name, attachment, description=''):
    if attachment is None:
        raise ValidationError({'project_file': ['No file uploaded.']})

    intern = _owner(principal)
    project = ProjectUpload(owner=intern, project_name=project_name, description=description or '')
    project.set_attachment(attachment)
    with transaction.atomic():
        project.save()

    logger.info(f"Intern #{intern.pk} uploaded project #{project.pk} '{project_name}'")
    notify_admins(
        'project_uploaded',
        sender_id=intern.pk,
        entity_id=project.pk,
        name=_owner_name(intern),
        project_name=project_name,
    )
    return project


# ---- Review workflows ----

def _lock(model, pk, missing):
    row = model.objects.select_for_update().select_related('owner').filter(pk=pk).first()
    if row is None:
        raise NotFound(missing)
    return row


def grade_logbook_report(actor, report_id, grade):
    grade = (grade or '').strip().upper()
    if grade not in settings.PORTAL['LOGBOOK_GRADES']:
        raise ValidationError({'grade': [f"Grade must be one of {', '.join(settings.PORTAL['LOGBOOK_GRADES'])}."]})

    with transaction.atomic():
        report = _lock(LogbookReport, report_id, 'Logbook report not found.')
        if report.status == 'graded':
            raise AlreadyProcessed('This logbook report has already been graded.')
        report.grade = grade
        report.status = 'graded'
        report.graded_by_id = actor.id
        report.graded_at = timezone.now()
        report.save(update_fields=['grade', 'status', 'graded_by', 'graded_at'])

    logger.info(f"Logbook report #{report.pk} graded {grade} by {actor.role}#{actor.id}")

    zone = portal_zone()
    submitted_on = report.submitted_at.astimezone(zone).strftime('%m/%d/%Y')
    graded_time = report.graded_at.astimezone(zone).strftime('%I:%M %p')
    notify_intern(
        report.owner,
        sender_id=actor.id,
        message=f"Your report from {submitted_on} received a Grade: {grade}. Time - {graded_time}.",
        section='logbook',
        entity_id=report.pk,
        subject='Logbook Report Graded',
    )
    return report


def review_leave_request(actor, leave_id, decision, rejection_reason=None):
    decision = (decision or '').strip().lower()
    if decision not in LEAVE_DECISIONS:
        raise ValidationError({'status': ["Status must be 'approved' or 'rejected'."]})
    rejection_reason = (rejection_reason or '').strip() or None

    with transaction.atomic():
        leave = _lock(LeaveRequest, leave_id, 'Leave request not found.')
        if leave.status != 'Pending':
            raise AlreadyProcessed(f'This leave request has already been {leave.status}.')
        leave.status = decision
        leave.rejection_reason = rejection_reason if decision == 'rejected' else None
        leave.reviewed_by_id = actor.id
        leave.reviewed_at = timezone.now()
        leave.save(update_fields=['status', 'rejection_reason', 'reviewed_by', 'reviewed_at'])

    logger.info(f"Leave request #{leave.pk} {decision} by {actor.role}#{actor.id}")

    summary = f"Your leave request ({leave.leave_type}) from {leave.start_date} to {leave.end_date}"
    if decision == 'approved':
        message = f"{summary} has been approved."
    else:
        message = f"{summary} was rejected. Reason: {rejection_reason or 'No reason provided'}"
    notify_intern(
        leave.owner,
        sender_id=actor.id,
        message=message,
        section='leave-requests',
        entity_id=leave.pk,
        subject='Leave Request Update',
    )
    return leave


def review_complaint(actor, complaint_id, decision, response=None):
    decision = (decision or '').strip().lower()
    if decision not in COMPLAINT_DECISIONS:
        raise ValidationError({'status': ["Status must be 'resolved' or 'dismissed'."]})

    with transaction.atomic():
        complaint = _lock(ComplaintSuggestion, complaint_id, 'Complaint not found.')
        if complaint.status != 'pending':
            raise AlreadyProcessed(f'This complaint has already been {complaint.status}.')
        complaint.status = decision
        complaint.response = (response or '').strip() or None
        complaint.reviewed_by_id = actor.id
        complaint.reviewed_at = timezone.now()
        complaint.save(update_fields=['status', 'response', 'reviewed_by', 'reviewed_at'])

    logger.info(f"Complaint #{complaint.pk} {decision} by {actor.role}#{actor.id}")

    if complaint.subject:
        message = f'Your complaint "{complaint.subject}" has been {decision}.'
    else:
        message = f'Your complaint has been {decision}.'
    notify_intern(
        complaint.owner,
        sender_id=actor.id,
        message=message,
        section='complaints',
        entity_id=complaint.pk,
        subject='Complaint Update',
    )
    return complaint


def delete_project(actor, project_id):
    with transaction.atomic():
        deleted, _ = ProjectUpload.objects.filter(pk=project_id).delete()
    if not deleted:
        raise NotFound('Project not found or already deleted.')
    logger.info(f"Project #{project_id} deleted by {actor.role}#{actor.id}")


# ---- Dashboards ----

def intern_summary(intern_id, recent=5):
    reports = LogbookReport.objects.filter(owner_id=intern_id)
    leaves = LeaveRequest.objects.filter(owner_id=intern_id)
    projects = ProjectUpload.objects.filter(owner_id=intern_id)

    activities = [
        {'type': 'report', 'timestamp': r.submitted_at,
         'description': f'Submitted weekly report for {r.week_range}'}
        for r in reports.only('week_range', 'submitted_at')[:recent]
    ] + [
        {'type': 'leave', 'timestamp': lr.requested_at,
         'description': f'Your {lr.leave_type} leave request for {lr.start_date} - {lr.end_date} is {lr.status}'}
        for lr in leaves.only('leave_type', 'start_date', 'end_date', 'status', 'requested_at')[:recent]
    ] + [
        {'type': 'project', 'timestamp': p.uploaded_at,
         'description': f'Uploaded "{p.project_name}"'}
        for p in projects.only('project_name', 'uploaded_at')[:recent]
    ]
    activities.sort(key=lambda a: a['timestamp'], reverse=True)

    return {
        'stats': {
            'total_reports': reports.count(),
            'pending_leave': leaves.filter(status='Pending').count(),
            'projects_uploaded': projects.count(),
        },
        'activities': activities[:recent],
    }


def admin_summary():
    return {
        'total_interns': Intern.objects.count(),
        'total_projects': ProjectUpload.objects.count(),
        'pending_reports': LogbookReport.objects.filter(status='pending').count(),
        'pending_permissions': LeaveRequest.objects.filter(status='Pending').count(),
        'total_complaints': ComplaintSuggestion.objects.count(),
    }
