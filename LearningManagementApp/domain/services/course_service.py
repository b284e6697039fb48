"""Domain service functions for the course lifecycle.

These helpers encapsulate business rules (only instructors create courses, only
the owner edits them, status changes follow the transition table) and keep the
view/serializer layers thin. All mutating operations run inside atomic
transactions to ensure consistency of course state.
"""
import logging
from typing import Any

from django.db import transaction

from LearningManagementApp.core.access import ensure_owner, ensure_role, is_owner
from LearningManagementApp.core.choices import CourseStatus, UserRole
from LearningManagementApp.core.errors import ErrorCode, NotFoundError, ValidationFailed, raise_for_rule
from LearningManagementApp.courses.models import Category, Course, Difficulty
from LearningManagementApp.domain.rules.transitions import can_transition_course

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "category", "difficulty", "curriculum")


def _ensure_active_metadata(data: dict[str, Any]) -> None:
    """Reject inactive categories/difficulties on create or update."""
    for field, model in (("category", Category), ("difficulty", Difficulty)):
        value = data.get(field)
        if value is not None and not value.active:
            raise ValidationFailed(
                f"{model._meta.verbose_name.capitalize()} '{value.name}' is inactive",
                details={field: ["Inactive entries cannot be assigned to courses."]},
            )


def get_course_for(user, course_id: int) -> Course:
    """Fetch a course the user is allowed to see.

    Published courses are public; drafts and archived courses are visible only
    to their owner. Anything else is reported as missing.
    """
    course = Course.objects.select_related("instructor", "category", "difficulty").filter(pk=course_id).first()
    if course is None:
        raise NotFoundError("Course not found", code=ErrorCode.COURSE_NOT_FOUND)
    if course.status != CourseStatus.PUBLISHED and not is_owner(user, course):
        raise NotFoundError("Course not found", code=ErrorCode.COURSE_NOT_FOUND)
    return course


def enrolled_count(course: Course) -> int:
    return course.enrollments.count()


@transaction.atomic
def create_course(instructor, data: dict[str, Any]) -> Course:
    """Create a draft course owned by ``instructor``.

    Args:
        instructor: User creating (and owning) the course.
        data: Validated payload (title, description, category, difficulty, curriculum).

    Returns:
        The newly created Course instance.
    """
    ensure_role(instructor, UserRole.INSTRUCTOR)
    _ensure_active_metadata(data)
    fields = {key: data[key] for key in EDITABLE_FIELDS if key in data}
    course = Course.objects.create(instructor=instructor, status=CourseStatus.DRAFT, **fields)
    logger.info("Course %s created by user %s", course.pk, instructor.pk)
    return course


@transaction.atomic
def update_course(actor, course: Course, data: dict[str, Any]) -> Course:
    """Apply a partial update to the course's descriptive fields. Status is not editable here."""
    ensure_owner(actor, course)
    _ensure_active_metadata(data)
    changed = [key for key in EDITABLE_FIELDS if key in data]
    for key in changed:
        setattr(course, key, data[key])
    if changed:
        course.save(update_fields=[*changed, "updated_at"])
    return course


@transaction.atomic
def change_status(actor, course: Course, target: str) -> Course:
    """Move a course to ``target`` if the transition table allows it.

    The course row is locked so the enrolled count seen by the rule cannot
    race a concurrent enrollment.

    Raises:
        Forbidden: not the owner, or the transition is not allowed.
    """
    ensure_owner(actor, course)
    locked = Course.objects.select_for_update().get(pk=course.pk)
    result = can_transition_course(locked.status, target, enrolled_count(locked))
    if not result:
        logger.info("Course %s: %s -> %s rejected (%s)", locked.pk, locked.status, target, result.code)
    raise_for_rule(result)
    if locked.status != target:
        previous = locked.status
        locked.status = target
        locked.save(update_fields=["status", "updated_at"])
        logger.info("Course %s status %s -> %s by user %s", locked.pk, previous, target, actor.pk)
    return locked
