from rest_framework.permissions import BasePermission

from .authentication import SessionPrincipal


def _principal(request):
    user = getattr(request, 'user', None)
    return user if isinstance(user, SessionPrincipal) else None


class IsPortalUser(BasePermission):
    """Any logged-in principal, admin or intern."""

    def has_permission(self, request, view):
        return _principal(request) is not None


class IsAdminOrSuperadmin(BasePermission):
    message = 'Access denied: Admin privileges required.'

    def has_permission(self, request, view):
        principal = _principal(request)
        return principal is not None and principal.is_admin


class IsSuperadmin(BasePermission):
    message = 'Access denied: Superadmin privileges required.'

    def has_permission(self, request, view):
        principal = _principal(request)
        return principal is not None and principal.is_superadmin


class IsIntern(BasePermission):
    message = 'Access denied: Intern account required.'

    def has_permission(self, request, view):
        principal = _principal(request)
        return principal is not None and principal.is_intern
