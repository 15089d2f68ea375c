from django.urls import path

from .views import (
    AdminComplaintListView, AdminDashboardView, AdminInternLogbookListView, AdminLeaveListView,
    AdminLogbookListView, AdminProjectListView, ComplaintReviewView, ComplaintView, GradeLogbookView,
    InternDashboardView, LeaveAttachmentView, LeaveRequestView, LeaveReviewView, LogbookAttachmentView,
    LogbookReportView, ProjectDeleteView, ProjectDownloadView, ProjectView,
)

app_name = 'submissions'

# Mounted under /api/users/ (the logged-in intern)
intern_urlpatterns = [
    path('logbook/', LogbookReportView.as_view(), name='logbook'),
    path('leave-requests/', LeaveRequestView.as_view(), name='leave_requests'),
    path('complaints/', ComplaintView.as_view(), name='complaints'),
    path('projects/', ProjectView.as_view(), name='projects'),
    path('dashboard/summary/', InternDashboardView.as_view(), name='dashboard_summary'),
]

# Mounted under /api/admin/
admin_urlpatterns = [
    path('dashboard/summary/', AdminDashboardView.as_view(), name='admin_dashboard_summary'),
    path('logbook/', AdminLogbookListView.as_view(), name='admin_logbook'),
    path('logbook/<int:pk>/grade/', GradeLogbookView.as_view(), name='grade_logbook'),
    path('logbook/<int:pk>/attachment/', LogbookAttachmentView.as_view(), name='logbook_attachment'),
    path('interns/<int:pk>/logbook/', AdminInternLogbookListView.as_view(), name='intern_logbook'),
    path('leave-requests/', AdminLeaveListView.as_view(), name='admin_leave_requests'),
    path('leave-requests/<int:pk>/review/', LeaveReviewView.as_view(), name='review_leave_request'),
    path('leave-requests/<int:pk>/attachment/', LeaveAttachmentView.as_view(), name='leave_attachment'),
    path('complaints/', AdminComplaintListView.as_view(), name='admin_complaints'),
    path('complaints/<int:pk>/review/', ComplaintReviewView.as_view(), name='review_complaint'),
    path('projects/', AdminProjectListView.as_view(), name='admin_projects'),
    path('projects/<int:pk>/', ProjectDeleteView.as_view(), name='delete_project'),
    path('projects/<int:pk>/download/', ProjectDownloadView.as_view(), name='download_project'),
]
