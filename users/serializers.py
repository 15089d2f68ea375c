from django.conf import settings
from rest_framework import serializers

from .models import AdminPrincipal, Intern


class RegisterSerializer(serializers.Serializer):
    """Intern self-registration. Files are read separately from request.FILES."""

    first_name = serializers.CharField(max_length=100)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=100)
    matric_number = serializers.CharField(max_length=50)
    institution = serializers.CharField(max_length=255)
    phone_number = serializers.CharField(max_length=30)
    email_address = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, data):
        if data['password'] != data['confirm_password']:
            raise serializers.ValidationError({'confirm_password': 'Passwords do not match!'})
        min_length = settings.PORTAL['PASSWORD_MIN_LENGTH']
        if len(data['password']) < min_length:
            raise serializers.ValidationError({'password': f'Password should be at least {min_length} characters.'})
        return data


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class AdminRegisterSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=['admin', 'superadmin'], default='admin')

    def validate_password(self, value):
        min_length = settings.PORTAL['PASSWORD_MIN_LENGTH']
        if len(value) < min_length:
            raise serializers.ValidationError(f'Password should be at least {min_length} characters.')
        return value


class AdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = AdminPrincipal
        fields = ['id', 'email', 'role', 'first_name', 'last_name', 'created_at']


class RejectUserSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    delete_user = serializers.BooleanField(required=False, default=False)


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True)

    def validate_new_password(self, value):
        min_length = settings.PORTAL['RESET_PASSWORD_MIN_LENGTH']
        if len(value) < min_length:
            raise serializers.ValidationError(f'Password must be at least {min_length} characters long.')
        return value


class InternSerializer(serializers.ModelSerializer):
    """Profile fields only; the stored documents have their own download endpoints."""

    has_user_image = serializers.SerializerMethodField()
    has_acceptance_letter = serializers.SerializerMethodField()
    approved_by = serializers.SerializerMethodField()

    class Meta:
        model = Intern
        fields = [
            'id', 'email', 'matric_number', 'first_name', 'middle_name', 'last_name',
            'institution', 'phone_number', 'is_approved', 'approval_status',
            'approved_by', 'approved_at', 'rejection_reason', 'is_disabled', 'disabled_at', 'created_at',
            'has_user_image', 'has_acceptance_letter',
        ]

    def get_has_user_image(self, obj):
        return bool(obj.user_image_mime_type)

    def get_has_acceptance_letter(self, obj):
        return bool(obj.acceptance_letter_mime_type)

    def get_approved_by(self, obj):
        if obj.approved_by is None:
            return None
        return obj.approved_by.full_name


class PendingInternSerializer(serializers.ModelSerializer):
    class Meta:
        model = Intern
        fields = ['id', 'first_name', 'last_name', 'email', 'matric_number', 'institution', 'created_at', 'approval_status']


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, data):
        min_length = settings.PORTAL['PASSWORD_MIN_LENGTH']
        if len(data['new_password']) < min_length:
            raise serializers.ValidationError({'new_password': f'New password must be at least {min_length} characters long.'})
        if data['new_password'] != data['confirm_password']:
            raise serializers.ValidationError({'confirm_password': 'New password and confirmation do not match.'})
        return data


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    middle_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=100)
    institution = serializers.CharField(max_length=255, required=False)
    phone_number = serializers.CharField(max_length=30, required=False)


class UpdateEmailSerializer(serializers.Serializer):
    new_email = serializers.EmailField()
    current_password = serializers.CharField(write_only=True)


class AccountSerializer(serializers.ModelSerializer):
    """Row of the superadmin account list."""

    class Meta:
        model = Intern
        fields = [
            'id', 'first_name', 'last_name', 'email', 'approval_status',
            'is_disabled', 'disabled_at', 'created_at',
        ]
