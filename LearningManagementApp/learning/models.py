"""Learning domain models: Assignment, Submission, Grade."""

from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone

from LearningManagementApp.courses.models import Course
from LearningManagementApp.core.choices import AssignmentStatus, SubmissionStatus
from LearningManagementApp.courses.querysets import AssignmentQuerySet, SubmissionQuerySet

from simple_history.models import HistoricalRecords

User = settings.AUTH_USER_MODEL

class Assignment(models.Model):
    """An assignment in a course. Drafts may be incomplete; publishing requires every field."""
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="assignments")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    weight = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    allow_late = models.BooleanField(default=False)
    allow_resubmission = models.BooleanField(default=False)
    status = models.CharField(max_length=16, choices=AssignmentStatus.choices, default=AssignmentStatus.DRAFT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    objects = AssignmentQuerySet.as_manager()

    class Meta:
        ordering = ["due_date", "id"]

    def __str__(self) -> str:
        return f"{self.title} (#{self.pk})"


class Submission(models.Model):
    """A learner's current submission for an assignment (unique per assignment+learner).

    Resubmission overwrites this row; ``late`` is fixed at submit time.
    """
    assignment = models.ForeignKey(Assignment, on_delete=models.PROTECT, related_name="submissions")
    learner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="submissions")
    text = models.TextField()
    link = models.URLField(blank=True)
    status = models.CharField(max_length=32, choices=SubmissionStatus.choices, default=SubmissionStatus.SUBMITTED)
    late = models.BooleanField(default=False)
    submitted_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    objects = SubmissionQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["assignment", "learner"], name="uq_assignment_learner"),
        ]
        ordering = ["-submitted_at"]

    def current_grade(self) -> "Grade | None":
        """The grade row, or None when the submission was never graded."""
        try:
            return self.grade
        except Grade.DoesNotExist:
            return None


class Grade(models.Model):
    """An instructor's evaluation of a submission: score 0–100 (nullable) plus feedback."""
    submission = models.OneToOneField(Submission, on_delete=models.CASCADE, related_name="grade")
    graded_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name="assigned_grades")
    score = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    feedback = models.TextField()
    graded_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()
