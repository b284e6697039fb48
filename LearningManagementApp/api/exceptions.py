"""Project-wide DRF exception handler producing the failure envelope."""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from LearningManagementApp.core.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)


def error_body(code: str, message: str, details=None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"ok": False, "error": error}


def _describe(exc: exceptions.APIException) -> tuple[str, str, object]:
    if isinstance(exc, DomainError):
        return exc.code, exc.message, exc.details
    if isinstance(exc, exceptions.ValidationError):
        return ErrorCode.VALIDATION_ERROR, "Invalid input.", exc.detail
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return ErrorCode.UNAUTHENTICATED, _message(exc), None
    if isinstance(exc, exceptions.NotFound):
        return ErrorCode.NOT_FOUND, _message(exc), None
    if isinstance(exc, exceptions.PermissionDenied):
        code = exc.get_codes()
        if not isinstance(code, str) or code == exc.default_code:
            code = ErrorCode.FORBIDDEN
        return code, _message(exc), None
    return exc.default_code, _message(exc), None


def _message(exc: exceptions.APIException) -> str:
    detail = exc.detail
    if isinstance(detail, dict):
        # simplejwt puts the human text under "detail"
        detail = detail.get("detail", exc.default_detail)
    return str(detail)


def envelope_exception_handler(exc, context):
    """Render every error as ``{"ok": false, "error": {code, message, details?}}``.

    Unexpected exceptions are logged with traceback and reported as
    ``internal_error`` without leaking their text.
    """
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "request")
        set_rollback()
        return Response(
            error_body(ErrorCode.INTERNAL_ERROR, "Internal server error"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if not isinstance(exc, exceptions.APIException):
        # Http404 / django PermissionDenied, already translated by DRF
        exc = exceptions.NotFound() if response.status_code == 404 else exceptions.PermissionDenied()
    code, message, details = _describe(exc)
    if code == ErrorCode.UNAUTHENTICATED:
        response.status_code = status.HTTP_401_UNAUTHORIZED
    response.data = error_body(code, message, details)
    return response
