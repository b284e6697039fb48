"""Moderation models: user reports against content and the operator audit log."""

from django.db import models
from django.conf import settings

from LearningManagementApp.core.choices import ModerationAction, ReportReason, ReportStatus, ReportTargetType

User = settings.AUTH_USER_MODEL

class Report(models.Model):
    """A user's report about a course, assignment, submission or user.

    Fields:
        target_type / target_id: What is being reported (generic reference).
        reporter: User who filed the report.
        reason / content: Category and optional free text.
        status: ReportStatus value (received -> investigating -> resolved).
        action_taken / action_reason: Set when an operator executes an action.
        created_at / resolved_at: Timestamps.
    """
    target_type = models.CharField(max_length=16, choices=ReportTargetType.choices)
    target_id = models.PositiveBigIntegerField()
    reporter = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reports_filed")
    reason = models.CharField(max_length=16, choices=ReportReason.choices)
    content = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=ReportStatus.choices, default=ReportStatus.RECEIVED)
    action_taken = models.CharField(max_length=32, choices=ModerationAction.choices, blank=True)
    action_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"Report#{self.pk}({self.target_type}:{self.target_id}, {self.status})"


class AuditLog(models.Model):
    """Append-only record of operator actions."""
    operator = models.ForeignKey(User, on_delete=models.PROTECT, related_name="audit_entries")
    action = models.CharField(max_length=64)
    target_type = models.CharField(max_length=16)
    target_id = models.PositiveBigIntegerField()
    reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.operator} {self.action} {self.target_type}:{self.target_id}"
