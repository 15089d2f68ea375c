from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.generics import ListAPIView
from rest_framework.response import Response
from rest_framework.views import APIView

from internportal.attachments import Attachment, attachment_response
from internportal.pagination import SmallWindowPagination, WindowPagination
from internportal.permissions import IsAdminOrSuperadmin, IsIntern
from users.models import Intern

from . import services
from .models import ComplaintSuggestion, LeaveRequest, LogbookReport, ProjectUpload
from .serializers import (
    ComplaintReviewSerializer, ComplaintSerializer, ComplaintSubmitSerializer, GradeSerializer,
    LeaveRequestSerializer, LeaveReviewSerializer, LeaveSubmitSerializer, LogbookReportSerializer,
    LogbookSubmitSerializer, ProjectSerializer, ProjectSubmitSerializer,
)

OWNER_BLOBS = ('owner__user_image', 'owner__acceptance_letter', 'owner__password_hash')


def list_queryset(model):
    """Rows with their owner, leaving every blob column in the database."""
    deferred = OWNER_BLOBS
    if any(f.name == 'attachment_data' for f in model._meta.get_fields()):
        deferred += ('attachment_data',)
    return model.objects.select_related('owner').defer(*deferred)


class SubmissionListView(ListAPIView):
    """Paginated list of one submission kind, newest first."""

    model = None
    pagination_class = WindowPagination

    def get_queryset(self):
        return list_queryset(self.model).order_by(*self.model._meta.ordering)


# ---- Intern: submit and list own ----

class OwnSubmissionListView(SubmissionListView):
    permission_classes = [IsIntern]

    def get_queryset(self):
        return super().get_queryset().filter(owner_id=self.request.user.id)


class LogbookReportView(OwnSubmissionListView):
    model = LogbookReport
    serializer_class = LogbookReportSerializer

    def post(self, request):
        serializer = LogbookSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = services.submit_logbook_report(
            request.user,
            attachment=Attachment.from_upload(request.FILES.get('file_attachment')),
            **serializer.validated_data,
        )
        return Response({
            'success': True,
            'message': 'Logbook report submitted successfully',
            'report_id': report.pk,
        }, status=status.HTTP_201_CREATED)


class LeaveRequestView(OwnSubmissionListView):
    model = LeaveRequest
    serializer_class = LeaveRequestSerializer
    pagination_class = SmallWindowPagination

    def post(self, request):
        serializer = LeaveSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leave = services.submit_leave_request(
            request.user,
            attachment=Attachment.from_upload(request.FILES.get('attachment')),
            **serializer.validated_data,
        )
        return Response({
            'success': True,
            'message': 'Leave request submitted successfully!',
            'leave_request': LeaveRequestSerializer(leave).data,
        }, status=status.HTTP_201_CREATED)


class ComplaintView(OwnSubmissionListView):
    model = ComplaintSuggestion
    serializer_class = ComplaintSerializer
    pagination_class = SmallWindowPagination

    def post(self, request):
        serializer = ComplaintSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = services.submit_complaint(request.user, **serializer.validated_data)
        return Response({
            'success': True,
            'message': 'Complaint/Suggestion submitted successfully!',
            'complaint': ComplaintSerializer(complaint).data,
        }, status=status.HTTP_201_CREATED)


class ProjectView(OwnSubmissionListView):
    model = ProjectUpload
    serializer_class = ProjectSerializer

    def post(self, request):
        serializer = ProjectSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = services.submit_project(
            request.user,
            attachment=Attachment.from_upload(request.FILES.get('project_file')),
            **serializer.validated_data,
        )
        return Response({
            'success': True,
            'message': 'Project file uploaded successfully!',
            'project': ProjectSerializer(project).data,
        }, status=status.HTTP_201_CREATED)


class InternDashboardView(APIView):
    permission_classes = [IsIntern]

    def get(self, request):
        return Response({'success': True, **services.intern_summary(request.user.id)})


# ---- Admin: list, review, download ----

class AdminSubmissionListView(SubmissionListView):
    permission_classes = [IsAdminOrSuperadmin]
    status_choices = ()

    def get_queryset(self):
        queryset = super().get_queryset()
        wanted = self.request.query_params.get('status')
        if wanted in self.status_choices:
            queryset = queryset.filter(status=wanted)
        return queryset


class AdminLogbookListView(AdminSubmissionListView):
    model = LogbookReport
    serializer_class = LogbookReportSerializer
    status_choices = ('pending', 'graded')


class AdminInternLogbookListView(AdminLogbookListView):
    """Logbook reports of a single intern."""

    def get_queryset(self):
        intern = get_object_or_404(Intern.objects.only('id'), pk=self.kwargs['pk'])
        return super().get_queryset().filter(owner=intern)


class AdminLeaveListView(AdminSubmissionListView):
    model = LeaveRequest
    serializer_class = LeaveRequestSerializer
    pagination_class = SmallWindowPagination
    status_choices = ('Pending', 'approved', 'rejected')


class AdminComplaintListView(AdminSubmissionListView):
    model = ComplaintSuggestion
    serializer_class = ComplaintSerializer
    pagination_class = SmallWindowPagination
    status_choices = ('pending', 'resolved', 'dismissed')


class AdminProjectListView(AdminSubmissionListView):
    model = ProjectUpload
    serializer_class = ProjectSerializer


class GradeLogbookView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def put(self, request, pk):
        serializer = GradeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = services.grade_logbook_report(request.user, pk, serializer.validated_data['grade'])
        return Response({
            'success': True,
            'message': 'Logbook grade updated and student notified successfully.',
            'report': {
                'id': report.pk,
                'grade': report.grade,
                'status': report.status,
                'graded_at': report.graded_at,
            },
        })


class LeaveReviewView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def post(self, request, pk):
        serializer = LeaveReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        leave = services.review_leave_request(
            request.user,
            pk,
            serializer.validated_data['status'],
            serializer.validated_data.get('rejection_reason'),
        )
        return Response({
            'success': True,
            'message': f'Leave request {leave.pk} updated to {leave.status}.',
        })


class ComplaintReviewView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def patch(self, request, pk):
        serializer = ComplaintReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = services.review_complaint(
            request.user,
            pk,
            serializer.validated_data['status'],
            serializer.validated_data.get('response'),
        )
        return Response({
            'success': True,
            'message': f'Complaint {complaint.pk} reviewed and marked as {complaint.status}.',
            'complaint': ComplaintSerializer(complaint).data,
        })


class ProjectDeleteView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def delete(self, request, pk):
        services.delete_project(request.user, pk)
        return Response({'success': True, 'message': 'Project deleted successfully!'})


class AttachmentDownloadView(APIView):
    permission_classes = [IsAdminOrSuperadmin]
    model = None

    def get(self, request, pk):
        row = get_object_or_404(self.model.objects.only(
            'id', 'attachment_data', 'attachment_name', 'attachment_mime_type', 'attachment_size',
        ), pk=pk)
        return attachment_response(row.attachment, fallback_name=f'{self.model._meta.model_name}-{pk}')


class LogbookAttachmentView(AttachmentDownloadView):
    model = LogbookReport


class LeaveAttachmentView(AttachmentDownloadView):
    model = LeaveRequest


class ProjectDownloadView(AttachmentDownloadView):
    model = ProjectUpload


class AdminDashboardView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def get(self, request):
        return Response({'success': True, 'stats': services.admin_summary()})
