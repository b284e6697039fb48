"""Custom querysets for catalog, ownership and role-based filtering of courses and learning objects."""

from django.db.models import Count, QuerySet, Q
from typing import Self

from LearningManagementApp.core.choices import AssignmentStatus, CourseStatus, SubmissionStatus


class MetadataQuerySet(QuerySet):
    """Shared helpers for Category and Difficulty."""

    def active(self) -> Self:
        return self.filter(active=True)


class CourseQuerySet(QuerySet):
    """QuerySet with helpers for the catalog and course ownership."""

    def published(self) -> Self:
        """Courses open to the catalog."""
        return self.filter(status=CourseStatus.PUBLISHED)

    def for_instructor(self, user) -> Self:
        """Courses owned by the given instructor."""
        return self.filter(instructor=user)

    def search(self, term: str | None) -> Self:
        """Case-insensitive match on title or description."""
        if not term:
            return self
        return self.filter(Q(title__icontains=term) | Q(description__icontains=term))

    def with_counts(self) -> Self:
        """Annotate ``enrolled_count`` and ``assignment_count``."""
        return self.annotate(
            enrolled_count=Count("enrollments", distinct=True),
            assignment_count=Count("assignments", distinct=True),
        )


class EnrollmentQuerySet(QuerySet):

    def for_learner(self, user) -> Self:
        return self.filter(learner=user)

    def is_enrolled(self, user, course) -> bool:
        return self.filter(learner=user, course=course).exists()


class AssignmentQuerySet(QuerySet):
    """QuerySet helpers for assignment status and course filtering."""

    def published(self) -> Self:
        return self.filter(status=AssignmentStatus.PUBLISHED)

    def for_course(self, course) -> Self:
        return self.filter(course=course)


class SubmissionQuerySet(QuerySet):
    """QuerySet helpers for filtering submissions by role."""

    def for_instructor(self, user):
        """Submissions in courses owned by the instructor."""
        return self.filter(assignment__course__instructor=user)

    def pending(self):
        """Submissions waiting for the instructor (not yet graded)."""
        return self.filter(status=SubmissionStatus.SUBMITTED)
