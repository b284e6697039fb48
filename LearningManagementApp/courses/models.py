"""Course domain models: Category, Difficulty, Course, Enrollment."""

from django.db import models
from django.conf import settings

from simple_history.models import HistoricalRecords

from LearningManagementApp.core.choices import CourseStatus
from LearningManagementApp.courses.querysets import CourseQuerySet, EnrollmentQuerySet, MetadataQuerySet


User = settings.AUTH_USER_MODEL

class Category(models.Model):
    """Operator-managed course category; inactive entries are hidden from new courses."""
    name = models.CharField(max_length=50, unique=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = MetadataQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Difficulty(models.Model):
    """Operator-managed difficulty level (e.g. beginner, intermediate, advanced)."""
    name = models.CharField(max_length=50, unique=True)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = MetadataQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "difficulties"

    def __str__(self) -> str:
        return self.name


class Course(models.Model):
    """A course owned by one instructor, moving through draft/published/archived.

    Fields:
        title: Human readable course title.
        description: Optional longer text.
        category / difficulty: Catalog metadata (protected from deletion while used).
        curriculum: Optional free-form syllabus.
        status: CourseStatus value; changed only through course_service.change_status.
        instructor: FK to the owning instructor.
        created_at / updated_at: Timestamps.
        history: Audit history (django-simple-history).
    """
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, null=True, blank=True, related_name="courses")
    difficulty = models.ForeignKey(Difficulty, on_delete=models.PROTECT, null=True, blank=True, related_name="courses")
    curriculum = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=CourseStatus.choices, default=CourseStatus.DRAFT)
    instructor = models.ForeignKey(User, on_delete=models.PROTECT, related_name="owned_courses")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    history = HistoricalRecords()

    objects = CourseQuerySet.as_manager()

    def __str__(self) -> str:
        return f"{self.title} (#{self.pk})"


class Enrollment(models.Model):
    """A learner's enrollment in a course.

    Constraints:
        uq_enrollment_learner_course: one row per (learner, course).
    """
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrollments")
    learner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="enrollments")
    enrolled_at = models.DateTimeField(auto_now_add=True)
    history = HistoricalRecords()

    objects = EnrollmentQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["learner", "course"], name="uq_enrollment_learner_course"),
        ]

    def __str__(self) -> str:
        return f"{self.learner} -> {self.course}"
