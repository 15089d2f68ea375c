import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.generics import ListAPIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from internportal.attachments import Attachment, attachment_response
from internportal.authentication import current_principal
from internportal.pagination import WindowPagination
from internportal.permissions import IsAdminOrSuperadmin, IsIntern, IsSuperadmin

from . import approval, credentials, services
from .models import AdminPrincipal, Intern
from .serializers import (
    AccountSerializer, AdminRegisterSerializer, AdminSerializer, ChangePasswordSerializer,
    ForgotPasswordSerializer, InternSerializer, LoginSerializer, PendingInternSerializer, ProfileUpdateSerializer,
    RegisterSerializer, RejectUserSerializer, ResetPasswordSerializer, UpdateEmailSerializer,
)

logger = logging.getLogger(__name__)

INTERN_BLOB_FIELDS = ('user_image', 'acceptance_letter')


# ✅ Intern registration (multipart, optional profile image and acceptance letter)
class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_image = Attachment.from_upload(request.FILES.get('user_image'))
        acceptance_letter = Attachment.from_upload(request.FILES.get('acceptance_letter'))

        intern = services.register_intern(serializer.validated_data, user_image, acceptance_letter)
        return Response({
            'success': True,
            'message': 'Registration successful! Your account is pending admin approval. '
                       'You will be notified via email once approved.',
            'user_id': intern.pk,
        }, status=status.HTTP_201_CREATED)


# ✅ Login against admins first, then interns
class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = credentials.authenticate(
            serializer.validated_data['email'],
            serializer.validated_data['password'],
        )
        principal = credentials.establish_session(request, result)
        return Response({
            'success': True,
            'message': 'Login successful!',
            'user_id': principal.id,
            'email': principal.email,
            'role': principal.role,
            'first_name': principal.first_name,
            'middle_name': principal.middle_name,
            'last_name': principal.last_name,
        })


class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        credentials.end_session(request)
        return Response({'success': True, 'message': 'Logged out successfully.'})


class RoleView(APIView):
    """Who is logged in on this session."""

    permission_classes = [AllowAny]

    def get(self, request):
        principal = current_principal(request)
        if principal is None:
            return Response(
                {'success': False, 'message': 'Not authenticated.', 'role': None},
                status=status.HTTP_401_UNAUTHORIZED,
            )
        return Response({
            'success': True,
            'user_id': principal.id,
            'email': principal.email,
            'role': principal.role,
            'first_name': principal.first_name,
            'middle_name': principal.middle_name,
            'last_name': principal.last_name,
        })


class ForgotPasswordView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.request_password_reset(serializer.validated_data['email'])
        # Same answer whether or not the account exists
        return Response({
            'success': True,
            'message': 'If an account with that email exists, a password reset link has been sent.',
        })


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.reset_password(
            serializer.validated_data['token'],
            serializer.validated_data['new_password'],
        )
        return Response({'success': True, 'message': 'Password has been reset successfully!'})


# ---- Intern self-service ----

class ProfileView(APIView):
    permission_classes = [IsIntern]

    def get(self, request):
        intern = get_object_or_404(
            Intern.objects.defer(*INTERN_BLOB_FIELDS).select_related('approved_by'),
            pk=request.user.id,
        )
        return Response({'success': True, 'user': InternSerializer(intern).data})


class ProfileUpdateView(APIView):
    permission_classes = [IsIntern]

    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        intern = services.update_profile(request.user, serializer.validated_data)
        credentials.refresh_session(
            request,
            first_name=intern.first_name,
            middle_name=intern.middle_name,
            last_name=intern.last_name,
        )
        return Response({
            'success': True,
            'message': 'Profile updated successfully!',
            'user': InternSerializer(intern).data,
        })


class ChangePasswordView(APIView):
    permission_classes = [IsIntern]

    def put(self, request):
        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.change_password(
            request.user,
            serializer.validated_data['current_password'],
            serializer.validated_data['new_password'],
        )
        return Response({'success': True, 'message': 'Password updated successfully!'})


class UpdateEmailView(APIView):
    permission_classes = [IsIntern]

    def put(self, request):
        serializer = UpdateEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        intern = services.update_email(
            request.user,
            serializer.validated_data['new_email'],
            serializer.validated_data['current_password'],
        )
        credentials.refresh_session(request, email=intern.email)
        return Response({'success': True, 'message': 'Email updated successfully!', 'email': intern.email})


class ProfilePictureView(APIView):
    permission_classes = [IsIntern]

    def get(self, request):
        intern = get_object_or_404(Intern, pk=request.user.id)
        return attachment_response(intern.user_image_attachment, download=False)

    def post(self, request):
        services.set_profile_picture(request.user, Attachment.from_upload(request.FILES.get('profile_image')))
        return Response({'success': True, 'message': 'Profile picture updated.', 'user_id': request.user.id})

    def delete(self, request):
        services.remove_profile_picture(request.user)
        return Response({'success': True, 'message': 'Profile picture removed.', 'user_id': request.user.id})


# ---- Admin: approval and intern directory ----

class PendingUsersView(ListAPIView):
    permission_classes = [IsAdminOrSuperadmin]
    serializer_class = PendingInternSerializer
    pagination_class = WindowPagination

    def get_queryset(self):
        return (
            Intern.objects.defer(*INTERN_BLOB_FIELDS)
            .filter(approval_status=Intern.STATUS_PENDING)
            .order_by('-created_at', '-id')
        )


class ApproveUserView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def put(self, request, pk):
        intern, mail_result = approval.approve_intern(request.user, pk)
        return Response({
            'success': True,
            'message': f'User {intern.full_name} has been approved successfully.',
            'email_sent': mail_result.ok,
        })


class RejectUserView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def post(self, request, pk):
        serializer = RejectUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        delete = serializer.validated_data['delete_user']

        _, mail_result = approval.reject_intern(
            request.user,
            pk,
            reason=serializer.validated_data.get('reason'),
            delete=delete,
        )
        message = 'User has been rejected and removed.' if delete else 'User has been rejected.'
        return Response({'success': True, 'message': message, 'email_sent': mail_result.ok})


class InternListView(ListAPIView):
    permission_classes = [IsAdminOrSuperadmin]
    serializer_class = InternSerializer
    pagination_class = WindowPagination

    def get_queryset(self):
        queryset = Intern.objects.defer(*INTERN_BLOB_FIELDS).select_related('approved_by')
        approval_status = self.request.query_params.get('status')
        if approval_status in dict(Intern.APPROVAL_STATUS_CHOICES):
            queryset = queryset.filter(approval_status=approval_status)
        return queryset.order_by('-created_at', '-id')


class InternDetailView(APIView):
    permission_classes = [IsAdminOrSuperadmin]

    def get(self, request, pk):
        intern = get_object_or_404(
            Intern.objects.defer(*INTERN_BLOB_FIELDS).select_related('approved_by'),
            pk=pk,
        )
        return Response({'success': True, 'user': InternSerializer(intern).data})


class InternDocumentView(APIView):
    """Download the profile image or acceptance letter an intern uploaded."""

    permission_classes = [IsAdminOrSuperadmin]

    def get(self, request, pk, document):
        intern = get_object_or_404(Intern, pk=pk)
        if document == 'user_image':
            return attachment_response(intern.user_image_attachment)
        if document == 'acceptance_letter':
            return attachment_response(intern.acceptance_letter_attachment)
        raise NotFound('Unknown document.')


# ---- Superadmin: admin accounts ----

class AdminAccountsView(APIView):
    permission_classes = [IsSuperadmin]

    def get(self, request):
        admins = AdminPrincipal.objects.order_by('-created_at', '-id')
        return Response({'success': True, 'admins': AdminSerializer(admins, many=True).data})

    def post(self, request):
        serializer = AdminRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin = services.register_admin(request.user, serializer.validated_data)
        return Response({
            'success': True,
            'message': f'{admin.role.capitalize()} registered successfully.',
            'admin': AdminSerializer(admin).data,
        }, status=status.HTTP_201_CREATED)


# ---- Superadmin: intern accounts ----

class AccountListView(ListAPIView):
    permission_classes = [IsSuperadmin]
    serializer_class = AccountSerializer
    pagination_class = WindowPagination

    def get_queryset(self):
        return Intern.objects.defer(*INTERN_BLOB_FIELDS).order_by('-created_at', '-id')


class AccountStatusView(APIView):
    """PUT .../accounts/<pk>/disable/ or .../enable/"""

    permission_classes = [IsSuperadmin]
    actions = {'disable': True, 'enable': False}

    def put(self, request, pk, action):
        if action not in self.actions:
            raise ValidationError({'action': ['Invalid action.']})
        intern = services.set_account_disabled(request.user, pk, self.actions[action])
        return Response({
            'success': True,
            'message': f'Account {action}d successfully',
            'user': AccountSerializer(intern).data,
        })
