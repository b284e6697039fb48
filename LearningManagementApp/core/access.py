"""Role & object access helpers."""

from typing import Any
from LearningManagementApp.courses.models import Course, Enrollment
from LearningManagementApp.learning.models import Assignment, Submission, Grade
from LearningManagementApp.core.choices import UserRole
from LearningManagementApp.core.errors import ErrorCode, Forbidden


def course_from(obj: Any) -> Course | None:
    if obj is None:
        return None
    if isinstance(obj, Course):
        return obj
    if isinstance(obj, Assignment):
        return obj.course
    if isinstance(obj, Submission):
        return obj.assignment.course
    if isinstance(obj, Grade):
        return obj.submission.assignment.course
    return getattr(obj, "course", None)


def has_role(user, role: str) -> bool:
    return bool(user and user.is_authenticated and user.role == role)


def is_owner(user, course: Course | None) -> bool:
    return bool(user and course and course.instructor_id == user.id)


def is_enrolled(user, course: Course | None) -> bool:
    if not (user and course):
        return False
    return Enrollment.objects.filter(course=course, learner=user).exists()


def is_submission_participant(user, obj: Any) -> bool:
    """User submitted the work, or owns the course it belongs to."""
    course = course_from(obj)
    if not course:
        return False
    if isinstance(obj, Submission) and obj.learner_id == user.id:
        return True
    if isinstance(obj, Grade) and obj.submission.learner_id == user.id:
        return True
    return is_owner(user, course)


def ensure_role(user, role: str, message: str | None = None) -> None:
    """Raise Forbidden(invalid_role) unless user has ``role``."""
    if not has_role(user, role):
        label = UserRole(role).label.lower()
        raise Forbidden(message or f"Only {label}s can perform this action", code=ErrorCode.INVALID_ROLE)


def ensure_owner(user, course: Course, message: str | None = None) -> None:
    """Raise Forbidden(not_owner) unless user is the course instructor."""
    if not is_owner(user, course):
        raise Forbidden(message or "You are not the owner of this course", code=ErrorCode.NOT_OWNER)
