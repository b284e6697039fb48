"""Read-only dashboard aggregates for learners and instructors."""
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.conf import settings
from django.utils import timezone

from LearningManagementApp.core.access import ensure_role
from LearningManagementApp.core.choices import ProgressStatus, SubmissionStatus, UserRole
from LearningManagementApp.courses.models import Course, Enrollment
from LearningManagementApp.learning.models import Assignment, Grade, Submission
from LearningManagementApp.domain.rules.grading import calculate_progress, count_completed

RECENT_LIMIT = 5


@dataclass(frozen=True)
class CourseProgress:
    course: Course
    total_assignments: int
    completed_assignments: int
    progress: int


@dataclass(frozen=True)
class UpcomingAssignment:
    assignment: Assignment
    submission_status: str
    due_in_hours: int


@dataclass(frozen=True)
class LearnerDashboard:
    courses: list[CourseProgress]
    upcoming: list[UpcomingAssignment]
    recent_feedback: list[Grade]


@dataclass(frozen=True)
class InstructorDashboard:
    courses: list[Course]
    pending_count: int
    recent_submissions: list[Submission]


def _window() -> timedelta:
    return timedelta(days=getattr(settings, "UPCOMING_WINDOW_DAYS", 7))


def _course_progress(learner, course: Course) -> CourseProgress:
    assignment_ids = list(Assignment.objects.for_course(course).published().values_list("id", flat=True))
    statuses = list(
        Submission.objects.filter(learner=learner, assignment_id__in=assignment_ids).values_list("status", flat=True)
    )
    completed = count_completed(statuses)
    return CourseProgress(
        course=course,
        total_assignments=len(assignment_ids),
        completed_assignments=completed,
        progress=calculate_progress(completed, len(assignment_ids)),
    )


def _upcoming(learner, course_ids: list[int], now: datetime) -> list[UpcomingAssignment]:
    """Published assignments due within the window that still need work from the learner."""
    assignments = (
        Assignment.objects.published()
        .filter(course_id__in=course_ids, due_date__gte=now, due_date__lte=now + _window())
        .select_related("course")
        .order_by("due_date", "id")
    )
    statuses = dict(
        Submission.objects.filter(learner=learner, assignment__in=assignments).values_list("assignment_id", "status")
    )
    upcoming = []
    for assignment in assignments:
        status = statuses.get(assignment.pk, ProgressStatus.NOT_SUBMITTED.value)
        if status not in (ProgressStatus.NOT_SUBMITTED, SubmissionStatus.RESUBMISSION_REQUIRED):
            continue
        hours = int((assignment.due_date - now).total_seconds() // 3600)
        upcoming.append(UpcomingAssignment(assignment, status, hours))
    return upcoming


def learner_dashboard(learner, now: datetime | None = None) -> LearnerDashboard:
    """Enrolled courses with progress, upcoming deadlines and the latest feedback."""
    ensure_role(learner, UserRole.LEARNER)
    now = now or timezone.now()
    enrollments = Enrollment.objects.for_learner(learner).select_related("course").order_by("-enrolled_at", "-id")
    courses = [e.course for e in enrollments]
    recent_feedback = list(
        Grade.objects.filter(submission__learner=learner)
        .exclude(feedback="")
        .select_related("submission__assignment__course")
        .order_by("-graded_at", "-id")[:RECENT_LIMIT]
    )
    return LearnerDashboard(
        courses=[_course_progress(learner, course) for course in courses],
        upcoming=_upcoming(learner, [c.pk for c in courses], now),
        recent_feedback=recent_feedback,
    )


def instructor_dashboard(instructor) -> InstructorDashboard:
    """Owned courses with counts, pending review count and the latest submissions."""
    ensure_role(instructor, UserRole.INSTRUCTOR)
    courses = list(Course.objects.for_instructor(instructor).with_counts().order_by("-updated_at", "-id"))
    submissions = Submission.objects.for_instructor(instructor)
    return InstructorDashboard(
        courses=courses,
        pending_count=submissions.pending().count(),
        recent_submissions=list(
            submissions.select_related("learner", "assignment__course").order_by("-submitted_at", "-id")[:RECENT_LIMIT]
        ),
    )
