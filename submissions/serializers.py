import json

from rest_framework import serializers

from .models import ComplaintSuggestion, LeaveRequest, LogbookReport, ProjectUpload


def _parse_json(value, message):
    # JSON bodies may still carry the value as an encoded string
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            raise serializers.ValidationError(message)
    return value


# ---- Input ----

class LogbookSubmitSerializer(serializers.Serializer):
    week_date = serializers.DateField()
    week_range = serializers.CharField(max_length=100)
    reports = serializers.JSONField(error_messages={'invalid': 'Invalid reports JSON format'})

    def validate_reports(self, value):
        value = _parse_json(value, 'Invalid reports JSON format')
        if value in (None, '', [], {}):
            raise serializers.ValidationError('Reports are required.')
        return value


class LeaveSubmitSerializer(serializers.Serializer):
    leave_type = serializers.CharField(max_length=100)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    reason = serializers.CharField()


class ComplaintSubmitSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    incident_date_time = serializers.DateTimeField(required=False, allow_null=True)
    incident_location = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    complaint_details = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    participants = serializers.JSONField(
        required=False, allow_null=True, error_messages={'invalid': 'Invalid participants JSON format'},
    )

    def validate_participants(self, value):
        if value == '':
            return None
        return _parse_json(value, 'Invalid participants JSON format')


class ProjectSubmitSerializer(serializers.Serializer):
    project_name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)


class GradeSerializer(serializers.Serializer):
    grade = serializers.CharField(max_length=5)


class LeaveReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['approved', 'rejected'])
    rejection_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ComplaintReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['resolved', 'dismissed'])
    response = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# ---- Output (list rows never carry attachment bytes) ----

class OwnerMixin(serializers.Serializer):
    owner = serializers.SerializerMethodField()

    def get_owner(self, obj):
        owner = obj.owner
        return {
            'id': owner.pk,
            'first_name': owner.first_name,
            'last_name': owner.last_name,
            'email': owner.email,
        }


ATTACHMENT_FIELDS = ['has_attachment', 'attachment_name', 'attachment_mime_type', 'attachment_size']


class LogbookReportSerializer(OwnerMixin, serializers.ModelSerializer):
    has_attachment = serializers.BooleanField(read_only=True)

    class Meta:
        model = LogbookReport
        fields = [
            'id', 'owner', 'week_date', 'week_range', 'reports', 'iso_year', 'iso_week',
            'status', 'grade', 'graded_by', 'graded_at', 'submitted_at',
        ] + ATTACHMENT_FIELDS


class LeaveRequestSerializer(OwnerMixin, serializers.ModelSerializer):
    has_attachment = serializers.BooleanField(read_only=True)

    class Meta:
        model = LeaveRequest
        fields = [
            'id', 'owner', 'leave_type', 'start_date', 'end_date', 'reason', 'status',
            'rejection_reason', 'reviewed_by', 'reviewed_at', 'requested_at',
        ] + ATTACHMENT_FIELDS


class ComplaintSerializer(OwnerMixin, serializers.ModelSerializer):
    class Meta:
        model = ComplaintSuggestion
        fields = [
            'id', 'owner', 'subject', 'message', 'incident_date_time', 'incident_location',
            'complaint_details', 'participants', 'status', 'response', 'reviewed_by',
            'reviewed_at', 'submitted_at',
        ]


class ProjectSerializer(OwnerMixin, serializers.ModelSerializer):
    has_attachment = serializers.BooleanField(read_only=True)

    class Meta:
        model = ProjectUpload
        fields = ['id', 'owner', 'project_name', 'description', 'uploaded_at'] + ATTACHMENT_FIELDS
