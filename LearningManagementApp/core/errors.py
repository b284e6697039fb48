"""Error codes and the API exception hierarchy raised by domain services.

Rule functions never raise: they return a ``RuleResult``. Services translate a
failed result into one of the exceptions below, and the project exception
handler renders it as ``{"ok": false, "error": {...}}``.
"""

from typing import Any

from rest_framework import status
from rest_framework.exceptions import APIException


class ErrorCode:
    """String codes grouped by origin."""

    # validation
    VALIDATION_ERROR = "validation_error"
    INVALID_SCORE = "invalid_score"
    # authentication
    UNAUTHENTICATED = "unauthenticated"
    # not found
    NOT_FOUND = "not_found"
    COURSE_NOT_FOUND = "course_not_found"
    ASSIGNMENT_NOT_FOUND = "assignment_not_found"
    SUBMISSION_NOT_FOUND = "submission_not_found"
    REPORT_NOT_FOUND = "report_not_found"
    TARGET_NOT_FOUND = "target_not_found"
    METADATA_NOT_FOUND = "metadata_not_found"
    # forbidden: role / ownership
    FORBIDDEN = "forbidden"
    INVALID_ROLE = "invalid_role"
    NOT_OWNER = "not_owner"
    # forbidden: rule violations
    INVALID_STATUS_TRANSITION = "invalid_status_transition"
    ASSIGNMENT_INCOMPLETE = "assignment_incomplete"
    NOT_ENROLLED = "not_enrolled"
    NOT_PUBLISHED = "not_published"
    ASSIGNMENT_CLOSED = "assignment_closed"
    PAST_DUE_NOT_ALLOWED = "past_due_not_allowed"
    RESUBMISSION_NOT_ALLOWED = "resubmission_not_allowed"
    COURSE_NOT_PUBLISHED = "course_not_published"
    HAS_SUBMISSIONS = "has_submissions"
    NOT_DRAFT = "not_draft"
    ALREADY_RESOLVED = "already_resolved"
    ACTION_ERROR = "action_error"
    # conflict
    ALREADY_ENROLLED = "already_enrolled"
    DUPLICATE_NAME = "duplicate_name"
    # internal
    INTERNAL_ERROR = "internal_error"


class DomainError(APIException):
    """Base class for errors raised by the service layer.

    Carries a stable ``code`` string plus optional structured ``details``.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str | None = None, code: str | None = None, details: Any = None):
        super().__init__(detail=message or self.default_detail, code=code or self.default_code)
        self.code = code or self.default_code
        self.message = str(self.detail)
        self.details = details


class ValidationFailed(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = ErrorCode.VALIDATION_ERROR


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = ErrorCode.NOT_FOUND


class Forbidden(DomainError):
    """Ownership, role or business-rule violation."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = ErrorCode.FORBIDDEN


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code = ErrorCode.ALREADY_ENROLLED


def raise_for_rule(result, error_cls: type[DomainError] = Forbidden) -> None:
    """Translate a failed ``RuleResult`` into ``error_cls``; no-op when allowed."""
    if not result.allowed:
        raise error_cls(result.reason, code=result.code)
