from dataclasses import asdict, dataclass

from rest_framework.authentication import SessionAuthentication

SESSION_PRINCIPAL_KEY = 'principal'

ADMIN_ROLES = ('admin', 'superadmin')
INTERN_ROLE = 'intern'


@dataclass(frozen=True)
class SessionPrincipal:
    """The identity stored in the server-side session after a successful login."""

    id: int
    role: str
    email: str
    first_name: str
    last_name: str
    middle_name: str = ''

    is_authenticated = True
    is_anonymous = False

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES

    @property
    def is_superadmin(self):
        return self.role == 'superadmin'

    @property
    def is_intern(self):
        return self.role == INTERN_ROLE

    @property
    def recipient_role(self):
        # Notification rows tag interns as 'user'
        return 'admin' if self.is_admin else 'user'

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def to_session(self):
        return asdict(self)

    @classmethod
    def from_session(cls, data):
        if not isinstance(data, dict):
            return None
        try:
            return cls(**data)
        except TypeError:
            return None


def current_principal(request):
    """Return the SessionPrincipal bound to ``request.session`` or None."""
    session = getattr(request, 'session', None)
    if session is None:
        return None
    return SessionPrincipal.from_session(session.get(SESSION_PRINCIPAL_KEY))


class PortalSessionAuthentication(SessionAuthentication):
    """
    Authenticates API requests from the portal's own session record instead of
    django.contrib.auth users. CSRF is enforced the same way DRF does for
    regular session authentication.
    """

    def authenticate(self, request):
        principal = current_principal(request._request)
        if principal is None:
            return None

        self.enforce_csrf(request)
        return (principal, None)

    def authenticate_header(self, request):
        # A non-empty value makes DRF answer 401 instead of 403 when no session exists
        return 'Session'
