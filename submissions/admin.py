from django.contrib import admin

from .models import ComplaintSuggestion, LeaveRequest, LogbookReport, ProjectUpload

BLOB_FIELDS = ('attachment_data',)


@admin.register(LogbookReport)
class LogbookReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'owner', 'week_range', 'iso_year', 'iso_week', 'status', 'grade', 'submitted_at')
    list_filter = ('status', 'grade')
    search_fields = ('owner__email', 'week_range')
    exclude = BLOB_FIELDS
    readonly_fields = ('iso_year', 'iso_week', 'graded_by', 'graded_at')


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'owner', 'leave_type', 'start_date', 'end_date', 'status', 'requested_at')
    list_filter = ('status', 'leave_type')
    search_fields = ('owner__email', 'reason')
    exclude = BLOB_FIELDS


@admin.register(ComplaintSuggestion)
class ComplaintSuggestionAdmin(admin.ModelAdmin):
    list_display = ('id', 'owner', 'subject', 'status', 'submitted_at')
    list_filter = ('status',)
    search_fields = ('owner__email', 'subject', 'message', 'complaint_details')


@admin.register(ProjectUpload)
class ProjectUploadAdmin(admin.ModelAdmin):
    list_display = ('id', 'owner', 'project_name', 'attachment_name', 'attachment_size', 'uploaded_at')
    search_fields = ('owner__email', 'project_name')
    exclude = BLOB_FIELDS
