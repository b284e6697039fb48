"""Learner enrollment: join, leave and status lookups."""
import logging

from django.db import IntegrityError, transaction

from LearningManagementApp.core.access import ensure_role
from LearningManagementApp.core.choices import CourseStatus, UserRole
from LearningManagementApp.core.errors import Conflict, ErrorCode, Forbidden, NotFoundError
from LearningManagementApp.courses.models import Course, Enrollment

logger = logging.getLogger(__name__)


def _get_course(course_id: int, lock: bool = False) -> Course:
    qs = Course.objects.select_for_update() if lock else Course.objects.all()
    course = qs.filter(pk=course_id).first()
    if course is None:
        raise NotFoundError("Course not found", code=ErrorCode.COURSE_NOT_FOUND)
    return course


@transaction.atomic
def enroll(learner, course_id: int) -> Enrollment:
    """Enroll a learner in a published course.

    The course row is locked, so a concurrent status change back to draft
    either sees this enrollment or is seen by it.

    Raises:
        Forbidden: the user is not a learner, or the course is not published.
        Conflict: the learner is already enrolled.
    """
    ensure_role(learner, UserRole.LEARNER, "Only learners can enroll in courses")
    course = _get_course(course_id, lock=True)
    if course.status != CourseStatus.PUBLISHED:
        raise Forbidden("Only published courses accept enrollments", code=ErrorCode.COURSE_NOT_PUBLISHED)
    if Enrollment.objects.is_enrolled(learner, course):
        raise Conflict("Already enrolled in this course", code=ErrorCode.ALREADY_ENROLLED)
    try:
        with transaction.atomic():
            enrollment = Enrollment.objects.create(course=course, learner=learner)
    except IntegrityError:
        raise Conflict("Already enrolled in this course", code=ErrorCode.ALREADY_ENROLLED)
    logger.info("Learner %s enrolled in course %s", learner.pk, course.pk)
    return enrollment


@transaction.atomic
def unenroll(learner, course_id: int) -> None:
    """Remove the learner's enrollment. Existing submissions are kept."""
    ensure_role(learner, UserRole.LEARNER, "Only learners can cancel enrollments")
    course = _get_course(course_id)
    deleted, _ = Enrollment.objects.filter(course=course, learner=learner).delete()
    if not deleted:
        raise Forbidden("You are not enrolled in this course", code=ErrorCode.NOT_ENROLLED)
    logger.info("Learner %s left course %s", learner.pk, course.pk)


def enrollment_status(learner, course_id: int) -> dict:
    """``{"is_enrolled": bool, "enrolled_at": datetime | None}`` for the learner and course."""
    ensure_role(learner, UserRole.LEARNER)
    course = _get_course(course_id)
    enrollment = Enrollment.objects.filter(course=course, learner=learner).first()
    return {
        "course_id": course.pk,
        "is_enrolled": enrollment is not None,
        "enrolled_at": enrollment.enrolled_at if enrollment else None,
    }
