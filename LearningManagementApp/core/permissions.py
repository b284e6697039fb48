"""Custom DRF permission classes for role and course-ownership access control."""

from rest_framework.request import Request
from typing import Any

from rest_framework.permissions import BasePermission, SAFE_METHODS

from LearningManagementApp.core.choices import UserRole
from LearningManagementApp.core.errors import ErrorCode
from LearningManagementApp.core.access import course_from, has_role, is_owner, is_submission_participant


class IsLearner(BasePermission):
    """Allow access only to learner accounts."""
    message = "Learner role required"
    code = ErrorCode.INVALID_ROLE

    def has_permission(self, request: Request, view: Any) -> bool:
        return has_role(request.user, UserRole.LEARNER)


class IsInstructor(BasePermission):
    """Allow access only to instructor accounts."""
    message = "Instructor role required"
    code = ErrorCode.INVALID_ROLE

    def has_permission(self, request: Request, view: Any) -> bool:
        return has_role(request.user, UserRole.INSTRUCTOR)


class IsOperator(BasePermission):
    """Allow access only to operator accounts."""
    message = "Operator role required"
    code = ErrorCode.INVALID_ROLE

    def has_permission(self, request: Request, view: Any) -> bool:
        return has_role(request.user, UserRole.OPERATOR)


class IsOperatorOrReadOnly(BasePermission):
    """GET for everyone; writes require the operator role."""
    message = "Operator role required"
    code = ErrorCode.INVALID_ROLE

    def has_permission(self, request: Request, view: Any) -> bool:
        if request.method in SAFE_METHODS:
            return True
        return has_role(request.user, UserRole.OPERATOR)


class IsCourseOwner(BasePermission):
    """Object-level check: the requesting instructor owns the related course."""
    message = "You are not the owner of this course"
    code = ErrorCode.NOT_OWNER

    def has_object_permission(self, request: Request, view: Any, obj: Any) -> bool:
        return is_owner(request.user, course_from(obj))


class IsSubmissionParticipant(BasePermission):
    """Submitting learner or owning instructor."""
    message = "You do not have access to this submission"

    def has_object_permission(self, request: Request, view: Any, obj: Any) -> bool:
        return is_submission_participant(request.user, obj)
