from django.urls import path

from .views import (
    AccountListView, AccountStatusView, AdminAccountsView, ApproveUserView, ChangePasswordView,
    ForgotPasswordView, InternDetailView, InternDocumentView, InternListView, LoginView, LogoutView,
    PendingUsersView, ProfilePictureView, ProfileUpdateView, ProfileView, RegisterView, RejectUserView,
    ResetPasswordView, RoleView, UpdateEmailView,
)

app_name = 'users'

# Mounted under /api/auth/
auth_urlpatterns = [
    path('register/', RegisterView.as_view(), name='register'),
    path('login/', LoginView.as_view(), name='login'),
    path('logout/', LogoutView.as_view(), name='logout'),
    path('role/', RoleView.as_view(), name='role'),
    path('forgot-password/', ForgotPasswordView.as_view(), name='forgot_password'),
    path('reset-password/', ResetPasswordView.as_view(), name='reset_password'),
]

# Mounted under /api/users/ (the logged-in intern)
intern_urlpatterns = [
    path('profile/', ProfileView.as_view(), name='profile'),
    path('profile/picture/', ProfilePictureView.as_view(), name='profile_picture'),
    path('profile/update/', ProfileUpdateView.as_view(), name='profile_update'),
    path('password/', ChangePasswordView.as_view(), name='change_password'),
    path('email/', UpdateEmailView.as_view(), name='update_email'),
]

# Mounted under /api/admin/
admin_urlpatterns = [
    path('pending-users/', PendingUsersView.as_view(), name='pending_users'),
    path('users/<int:pk>/approve/', ApproveUserView.as_view(), name='approve_user'),
    path('users/<int:pk>/reject/', RejectUserView.as_view(), name='reject_user'),
    path('interns/', InternListView.as_view(), name='intern_list'),
    path('interns/<int:pk>/', InternDetailView.as_view(), name='intern_detail'),
    path(
        'interns/<int:pk>/documents/<str:document>/',
        InternDocumentView.as_view(),
        name='intern_document',
    ),
]

# Mounted under /api/superadmin/
superadmin_urlpatterns = [
    path('admins/', AdminAccountsView.as_view(), name='admins'),
    path('accounts/', AccountListView.as_view(), name='accounts'),
    path('accounts/<int:pk>/<str:action>/', AccountStatusView.as_view(), name='account_status'),
]
