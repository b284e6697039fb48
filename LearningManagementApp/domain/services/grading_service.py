"""Grading, resubmission requests and the learner's grade book."""
import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from LearningManagementApp.core.access import ensure_owner, ensure_role
from LearningManagementApp.core.choices import SubmissionStatus, UserRole
from LearningManagementApp.core.errors import ErrorCode, ValidationFailed
from LearningManagementApp.courses.models import Course, Enrollment
from LearningManagementApp.learning.models import Assignment, Grade, Submission
from LearningManagementApp.domain.rules.grading import MAX_SCORE, CourseGrade, GradedItem, aggregate_course_grade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseGradeBook:
    """A course together with the learner's aggregated grade for it."""
    course: Course
    grade: CourseGrade


def _validate_score(score: int | None, required: bool) -> None:
    if score is None:
        if required:
            raise ValidationFailed("Score is required", code=ErrorCode.INVALID_SCORE)
        return
    if not 0 <= score <= MAX_SCORE:
        raise ValidationFailed(f"Score must be between 0 and {MAX_SCORE}", code=ErrorCode.INVALID_SCORE)


def _validate_feedback(feedback: str | None) -> str:
    feedback = (feedback or "").strip()
    if not feedback:
        raise ValidationFailed("Feedback is required", details={"feedback": ["This field may not be blank."]})
    return feedback


def _lock(submission: Submission) -> Submission:
    return Submission.objects.select_for_update().select_related("assignment__course").get(pk=submission.pk)


@transaction.atomic
def grade_submission(instructor, submission: Submission, score: int, feedback: str) -> Grade:
    """Record a score (0-100) and feedback; the submission becomes ``graded``.

    Grading an already graded submission replaces the previous grade.
    """
    ensure_owner(instructor, submission.assignment.course)
    _validate_score(score, required=True)
    feedback = _validate_feedback(feedback)
    locked = _lock(submission)
    grade, _ = Grade.objects.update_or_create(
        submission=locked,
        defaults={"score": score, "feedback": feedback, "graded_by": instructor, "graded_at": timezone.now()},
    )
    locked.status = SubmissionStatus.GRADED
    locked.save(update_fields=["status", "updated_at"])
    logger.info("Submission %s graded %s by user %s", locked.pk, score, instructor.pk)
    return grade


@transaction.atomic
def request_resubmission(instructor, submission: Submission, feedback: str, score: int | None = None) -> Grade:
    """Ask the learner to resubmit; the submission becomes ``resubmission_required``.

    ``score`` is optional. When omitted an existing score is kept, so a
    previously graded submission still counts toward the course total.
    """
    ensure_owner(instructor, submission.assignment.course)
    _validate_score(score, required=False)
    feedback = _validate_feedback(feedback)
    locked = _lock(submission)
    grade = locked.current_grade()
    if grade is None:
        grade = Grade(submission=locked)
    grade.feedback = feedback
    grade.graded_by = instructor
    grade.graded_at = timezone.now()
    if score is not None:
        grade.score = score
    grade.save()
    locked.status = SubmissionStatus.RESUBMISSION_REQUIRED
    locked.save(update_fields=["status", "updated_at"])
    logger.info("Resubmission requested for submission %s by user %s", locked.pk, instructor.pk)
    return grade


def graded_item(assignment: Assignment, submission: Submission | None) -> GradedItem:
    """Map an assignment and the learner's submission (if any) into a ``GradedItem``."""
    if submission is None:
        return GradedItem(assignment_id=assignment.pk, title=assignment.title, weight=assignment.weight or 0)
    grade = submission.current_grade()
    return GradedItem(
        assignment_id=assignment.pk,
        title=assignment.title,
        weight=assignment.weight or 0,
        submission_status=submission.status,
        score=grade.score if grade else None,
        feedback=grade.feedback if grade else None,
        late=submission.late,
        submitted_at=submission.submitted_at,
        graded_at=grade.graded_at if grade else None,
    )


def course_grade_for(learner, course: Course) -> CourseGrade:
    assignments = list(Assignment.objects.for_course(course).published().order_by("created_at", "id"))
    submissions = {
        s.assignment_id: s
        for s in Submission.objects.filter(learner=learner, assignment__in=assignments).select_related("grade")
    }
    return aggregate_course_grade([graded_item(a, submissions.get(a.pk)) for a in assignments])


def my_grades(learner) -> list[CourseGradeBook]:
    """One grade book per enrolled course, most recent enrollment first."""
    ensure_role(learner, UserRole.LEARNER)
    enrollments = Enrollment.objects.for_learner(learner).select_related("course").order_by("-enrolled_at", "-id")
    return [CourseGradeBook(e.course, course_grade_for(learner, e.course)) for e in enrollments]
