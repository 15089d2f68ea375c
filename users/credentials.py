"""
Email + password authentication across both principal tables.

Admins are looked up first. A stored admin hash that no configured hasher
recognises is treated as a server misconfiguration rather than a wrong
password.
"""
import logging
from dataclasses import dataclass, replace

from django.contrib.auth.hashers import check_password, identify_hasher, make_password

from internportal.authentication import INTERN_ROLE, SESSION_PRINCIPAL_KEY, SessionPrincipal
from internportal.exceptions import (
    AccountDisabled, CredentialStoreMisconfigured, InvalidCredentials, PendingApproval,
)

from .models import AdminPrincipal, Intern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    kind: str
    principal: object

    def to_session_principal(self):
        p = self.principal
        return SessionPrincipal(
            id=p.pk,
            role=self.kind,
            email=p.email,
            first_name=p.first_name,
            last_name=p.last_name,
            middle_name=getattr(p, 'middle_name', '') or '',
        )


def hash_password(raw_password):
    return make_password(raw_password)


def verify_password(raw_password, stored_hash, strict=False):
    """
    Check ``raw_password`` against ``stored_hash``.

    With ``strict`` an unrecognised hash format raises
    CredentialStoreMisconfigured instead of simply failing.
    """
    if strict:
        try:
            identify_hasher(stored_hash)
        except ValueError:
            logger.critical("Stored admin password hash has an unknown format; check PASSWORD_HASHERS")
            raise CredentialStoreMisconfigured()
    return check_password(raw_password, stored_hash)


def authenticate(email, password):
    """Return an AuthResult or raise InvalidCredentials, PendingApproval or AccountDisabled."""
    email = (email or '').strip()

    admin = AdminPrincipal.objects.filter(email__iexact=email).first()
    if admin is not None and verify_password(password, admin.password_hash, strict=True):
        logger.info(f"{admin.role} {admin.email} authenticated")
        return AuthResult(kind=admin.role, principal=admin)

    intern = Intern.objects.filter(email__iexact=email).first()
    if intern is not None and verify_password(password, intern.password_hash):
        if intern.approval_status != Intern.STATUS_APPROVED:
            logger.info(f"Login refused for unapproved intern {intern.email} ({intern.approval_status})")
            raise PendingApproval()
        if intern.is_disabled:
            logger.info(f"Login refused for disabled intern {intern.email}")
            raise AccountDisabled()
        logger.info(f"Intern {intern.email} authenticated")
        return AuthResult(kind=INTERN_ROLE, principal=intern)

    logger.info(f"Failed login attempt for {email}")
    raise InvalidCredentials()


def establish_session(request, result):
    """Bind the authenticated principal to a fresh session id."""
    principal = result.to_session_principal()
    request.session.cycle_key()
    request.session[SESSION_PRINCIPAL_KEY] = principal.to_session()
    return principal


def refresh_session(request, **changes):
    """Rewrite the stored principal after the intern edits their own account."""
    principal = replace(request.user, **changes)
    request.session[SESSION_PRINCIPAL_KEY] = principal.to_session()
    return principal


def end_session(request):
    request.session.flush()
