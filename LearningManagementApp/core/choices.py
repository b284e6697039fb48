"""Typed enumerations (TextChoices) for roles and the lifecycle states of courses, assignments, submissions and reports."""
from django.db import models

class UserRole(models.TextChoices):
    """System-level role assigned to a user account."""
    LEARNER = "learner", "Learner"
    INSTRUCTOR = "instructor", "Instructor"
    OPERATOR = "operator", "Operator"

class CourseStatus(models.TextChoices):
    """Lifecycle states for a course."""
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"
    ARCHIVED = "archived", "Archived"

class AssignmentStatus(models.TextChoices):
    """Lifecycle states for an assignment (no regression)."""
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"
    CLOSED = "closed", "Closed"

class SubmissionStatus(models.TextChoices):
    """Lifecycle states for a learner submission."""
    SUBMITTED = "submitted", "Submitted"
    GRADED = "graded", "Graded"
    RESUBMISSION_REQUIRED = "resubmission_required", "Resubmission required"

class ProgressStatus(models.TextChoices):
    """Per-assignment status as seen by a learner (adds `not_submitted`)."""
    NOT_SUBMITTED = "not_submitted", "Not submitted"
    SUBMITTED = "submitted", "Submitted"
    GRADED = "graded", "Graded"
    RESUBMISSION_REQUIRED = "resubmission_required", "Resubmission required"

class ReportStatus(models.TextChoices):
    RECEIVED = "received", "Received"
    INVESTIGATING = "investigating", "Investigating"
    RESOLVED = "resolved", "Resolved"

class ReportTargetType(models.TextChoices):
    COURSE = "course", "Course"
    ASSIGNMENT = "assignment", "Assignment"
    SUBMISSION = "submission", "Submission"
    USER = "user", "User"

class ReportReason(models.TextChoices):
    INAPPROPRIATE = "inappropriate", "Inappropriate"
    PLAGIARISM = "plagiarism", "Plagiarism"
    SPAM = "spam", "Spam"
    OTHER = "other", "Other"

class ModerationAction(models.TextChoices):
    """Actions an operator may execute against a report target."""
    WARN = "warn", "Warn"
    INVALIDATE_SUBMISSION = "invalidate_submission", "Invalidate submission"
    SUSPEND_USER = "suspend_user", "Suspend user"
    ARCHIVE_COURSE = "archive_course", "Archive course"
