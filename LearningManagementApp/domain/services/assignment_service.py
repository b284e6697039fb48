"""Assignment authoring and enrollment-gated visibility.

Instructors manage the assignments of the courses they own. Learners see the
published assignments of courses they are enrolled in, each paired with their
own submission status.
"""
import logging
from dataclasses import dataclass
from typing import Any

from django.db import transaction

from LearningManagementApp.core.access import ensure_owner, has_role, is_enrolled, is_owner
from LearningManagementApp.core.choices import AssignmentStatus, ProgressStatus, UserRole
from LearningManagementApp.core.errors import ErrorCode, Forbidden, NotFoundError, raise_for_rule
from LearningManagementApp.courses.models import Course
from LearningManagementApp.learning.models import Assignment, Submission
from LearningManagementApp.domain.rules.transitions import PublishFields, can_transition_assignment, missing_publish_fields

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "due_date", "weight", "allow_late", "allow_resubmission")


@dataclass(frozen=True)
class LearnerAssignment:
    """An assignment as a learner sees it, with their own submission (if any)."""
    assignment: Assignment
    submission: Submission | None

    @property
    def submission_status(self) -> str:
        if self.submission is None:
            return ProgressStatus.NOT_SUBMITTED.value
        return self.submission.status


@dataclass(frozen=True)
class LearnerSubmissionRow:
    """One enrolled learner and their submission for an assignment (instructor view)."""
    learner: Any
    submission: Submission | None

    @property
    def submission_status(self) -> str:
        if self.submission is None:
            return ProgressStatus.NOT_SUBMITTED.value
        return self.submission.status


def publish_fields(assignment: Assignment) -> PublishFields:
    return PublishFields(
        title=assignment.title,
        description=assignment.description,
        due_date=assignment.due_date,
        weight=assignment.weight,
    )


def get_course(course_id: int) -> Course:
    course = Course.objects.select_related("instructor").filter(pk=course_id).first()
    if course is None:
        raise NotFoundError("Course not found", code=ErrorCode.COURSE_NOT_FOUND)
    return course


def get_assignment(assignment_id: int) -> Assignment:
    assignment = Assignment.objects.select_related("course").filter(pk=assignment_id).first()
    if assignment is None:
        raise NotFoundError("Assignment not found", code=ErrorCode.ASSIGNMENT_NOT_FOUND)
    return assignment


def _learner_submissions(learner, assignments) -> dict[int, Submission]:
    rows = Submission.objects.filter(learner=learner, assignment__in=assignments)
    return {row.assignment_id: row for row in rows}


def list_for_course(user, course: Course) -> list[Assignment] | list[LearnerAssignment]:
    """Assignments of ``course`` visible to ``user``.

    Returns every assignment for the owning instructor, or the published ones
    wrapped in ``LearnerAssignment`` for an enrolled learner.

    Raises:
        Forbidden(not_enrolled): any other user.
    """
    if is_owner(user, course):
        return list(Assignment.objects.for_course(course))
    if not (has_role(user, UserRole.LEARNER) and is_enrolled(user, course)):
        raise Forbidden("You are not enrolled in this course", code=ErrorCode.NOT_ENROLLED)
    assignments = list(Assignment.objects.for_course(course).published())
    submissions = _learner_submissions(user, assignments)
    return [LearnerAssignment(a, submissions.get(a.pk)) for a in assignments]


def detail_for(user, assignment: Assignment) -> Assignment | LearnerAssignment:
    """Single assignment for its owner, or for an enrolled learner when published."""
    course = assignment.course
    if is_owner(user, course):
        return assignment
    if not (has_role(user, UserRole.LEARNER) and is_enrolled(user, course)):
        raise Forbidden("You are not enrolled in this course", code=ErrorCode.NOT_ENROLLED)
    if assignment.status != AssignmentStatus.PUBLISHED:
        raise Forbidden("This assignment is not published", code=ErrorCode.NOT_PUBLISHED)
    submission = Submission.objects.filter(learner=user, assignment=assignment).first()
    return LearnerAssignment(assignment, submission)


@transaction.atomic
def create_assignment(instructor, course: Course, data: dict[str, Any]) -> Assignment:
    """Create a draft assignment. Only the title is required; description, due_date and weight can wait until publishing."""
    ensure_owner(instructor, course)
    fields = {key: data[key] for key in EDITABLE_FIELDS if key in data}
    assignment = Assignment.objects.create(course=course, status=AssignmentStatus.DRAFT, **fields)
    logger.info("Assignment %s created in course %s", assignment.pk, course.pk)
    return assignment


@transaction.atomic
def update_assignment(instructor, assignment: Assignment, data: dict[str, Any]) -> Assignment:
    """Partial update. A published assignment must stay complete after the edit."""
    ensure_owner(instructor, assignment.course)
    locked = Assignment.objects.select_for_update().get(pk=assignment.pk)
    if locked.status == AssignmentStatus.CLOSED:
        raise Forbidden("Closed assignments cannot be edited", code=ErrorCode.ASSIGNMENT_CLOSED)
    changed = [key for key in EDITABLE_FIELDS if key in data]
    for key in changed:
        setattr(locked, key, data[key])
    if locked.status == AssignmentStatus.PUBLISHED:
        missing = missing_publish_fields(publish_fields(locked))
        if missing:
            raise Forbidden(
                "Published assignments must keep: " + ", ".join(missing),
                code=ErrorCode.ASSIGNMENT_INCOMPLETE,
            )
    if changed:
        locked.save(update_fields=[*changed, "updated_at"])
    return locked


@transaction.atomic
def delete_assignment(instructor, assignment: Assignment) -> None:
    """Delete a draft assignment nobody has submitted to."""
    ensure_owner(instructor, assignment.course)
    locked = Assignment.objects.select_for_update().get(pk=assignment.pk)
    if locked.submissions.exists():
        raise Forbidden("Assignments with submissions cannot be deleted", code=ErrorCode.HAS_SUBMISSIONS)
    if locked.status != AssignmentStatus.DRAFT:
        raise Forbidden("Only draft assignments can be deleted", code=ErrorCode.NOT_DRAFT)
    logger.info("Assignment %s deleted by user %s", locked.pk, instructor.pk)
    locked.delete()


@transaction.atomic
def change_status(instructor, assignment: Assignment, target: str) -> Assignment:
    """Advance an assignment along draft -> published -> closed."""
    ensure_owner(instructor, assignment.course)
    locked = Assignment.objects.select_for_update().get(pk=assignment.pk)
    result = can_transition_assignment(locked.status, target, publish_fields(locked))
    if not result:
        logger.info("Assignment %s: %s -> %s rejected (%s)", locked.pk, locked.status, target, result.code)
    raise_for_rule(result)
    if locked.status != target:
        previous = locked.status
        locked.status = target
        locked.save(update_fields=["status", "updated_at"])
        logger.info("Assignment %s status %s -> %s", locked.pk, previous, target)
    return locked


def submissions_for(instructor, assignment: Assignment) -> list[LearnerSubmissionRow]:
    """Every enrolled learner with their submission (or none) for the instructor's review list."""
    course = assignment.course
    ensure_owner(instructor, course)
    learners = [e.learner for e in course.enrollments.select_related("learner").order_by("enrolled_at", "id")]
    submissions = {
        s.learner_id: s
        for s in Submission.objects.filter(assignment=assignment).select_related("grade")
    }
    rows = [LearnerSubmissionRow(learner, submissions.pop(learner.pk, None)) for learner in learners]
    # learners who submitted and later left the course
    rows.extend(LearnerSubmissionRow(s.learner, s) for s in submissions.values())
    return rows
