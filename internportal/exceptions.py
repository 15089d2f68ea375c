import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class InvalidCredentials(APIException):
    # Not an AuthenticationFailed subclass: DRF downgrades those to 403 when
    # the authenticator offers no WWW-Authenticate header.
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials.'
    default_code = 'invalid_credentials'


class PendingApproval(APIException):
    """Credentials are correct but the intern has not been approved yet."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Your account is pending admin approval. Please wait for approval before logging in.'
    default_code = 'pending_approval'


class AccountDisabled(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Your account has been disabled. Please contact an administrator.'
    default_code = 'account_disabled'


class SubmissionWindowClosed(PermissionDenied):
    default_detail = 'Reports can only be submitted before 9:00 AM on Monday.'
    default_code = 'submission_window_closed'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with the current state of the resource.'
    default_code = 'conflict'


class AlreadyProcessed(Conflict):
    default_detail = 'This record has already been processed.'
    default_code = 'already_processed'


class DuplicateSubmission(Conflict):
    default_detail = 'A matching submission already exists.'
    default_code = 'duplicate_submission'


class InternalError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An internal error occurred. Please try again later.'
    default_code = 'internal_error'


class CredentialStoreMisconfigured(InternalError):
    default_detail = 'Server configuration error.'
    default_code = 'credential_store_misconfigured'


def _message_from_detail(detail):
    """Pick a single human readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        if 'detail' in detail:
            return _message_from_detail(detail['detail'])
        for value in detail.values():
            return _message_from_detail(value)
        return 'Invalid input.'
    if isinstance(detail, (list, tuple)):
        return _message_from_detail(detail[0]) if detail else 'Invalid input.'
    return str(detail)


def portal_exception_handler(exc, context):
    """
    Renders every error as ``{"success": false, "message": ...}``.

    Validation errors also carry the per-field ``errors`` mapping and a
    pending approval carries ``status: "pending_approval"``. Anything DRF does
    not know how to handle is logged and turned into a generic 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        set_rollback()
        message = InternalError.default_detail
        if settings.DEBUG:
            message = f"{message} ({exc})"
        return Response(
            {'success': False, 'message': message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    data = {'success': False, 'message': _message_from_detail(response.data)}
    if isinstance(exc, ValidationError):
        data['errors'] = response.data
    if isinstance(exc, PendingApproval):
        data['status'] = 'pending_approval'
    response.data = data
    return response
