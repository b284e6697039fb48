"""Moderation: filing reports, operator triage and enforcement actions.

Every operator mutation is recorded in ``AuditLog`` inside the same
transaction as the change it describes.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from LearningManagementApp.core.access import ensure_role
from LearningManagementApp.core.choices import (
    CourseStatus,
    ModerationAction,
    ReportStatus,
    ReportTargetType,
    SubmissionStatus,
    UserRole,
)
from LearningManagementApp.core.errors import ErrorCode, Forbidden, NotFoundError, ValidationFailed, raise_for_rule
from LearningManagementApp.core.validators import MIN_ACTION_REASON_LENGTH
from LearningManagementApp.courses.models import Course
from LearningManagementApp.learning.models import Assignment, Grade, Submission
from LearningManagementApp.moderation.models import AuditLog, Report
from LearningManagementApp.domain.rules.transitions import can_transition_report

logger = logging.getLogger(__name__)

User = get_user_model()

TARGET_MODELS = {
    ReportTargetType.COURSE.value: Course,
    ReportTargetType.ASSIGNMENT.value: Assignment,
    ReportTargetType.SUBMISSION.value: Submission,
    ReportTargetType.USER.value: User,
}

# action -> the only target type it can be applied to (None: any)
ACTION_TARGETS = {
    ModerationAction.WARN.value: None,
    ModerationAction.INVALIDATE_SUBMISSION.value: ReportTargetType.SUBMISSION.value,
    ModerationAction.SUSPEND_USER.value: ReportTargetType.USER.value,
    ModerationAction.ARCHIVE_COURSE.value: ReportTargetType.COURSE.value,
}


def resolve_target(target_type: str, target_id: int):
    model = TARGET_MODELS.get(str(target_type))
    target = model.objects.filter(pk=target_id).first() if model else None
    if target is None:
        raise NotFoundError(f"Reported {target_type} not found", code=ErrorCode.TARGET_NOT_FOUND)
    return target


def record_audit(operator, action: str, target_type: str, target_id: int, reason: str = "") -> AuditLog:
    return AuditLog.objects.create(
        operator=operator, action=action, target_type=target_type, target_id=target_id, reason=reason,
    )


@transaction.atomic
def file_report(reporter, target_type: str, target_id: int, reason: str, content: str = "") -> Report:
    """Create a report against an existing course, assignment, submission or user."""
    resolve_target(target_type, target_id)
    report = Report.objects.create(
        reporter=reporter, target_type=target_type, target_id=target_id, reason=reason, content=content,
    )
    logger.info("Report %s filed by user %s on %s:%s", report.pk, reporter.pk, target_type, target_id)
    return report


def list_reports(operator, status: str | None = None, target_type: str | None = None):
    ensure_role(operator, UserRole.OPERATOR)
    qs = Report.objects.select_related("reporter")
    if status:
        qs = qs.filter(status=status)
    if target_type:
        qs = qs.filter(target_type=target_type)
    return qs


def get_report(operator, report_id: int) -> Report:
    ensure_role(operator, UserRole.OPERATOR)
    report = Report.objects.select_related("reporter").filter(pk=report_id).first()
    if report is None:
        raise NotFoundError("Report not found", code=ErrorCode.REPORT_NOT_FOUND)
    return report


@transaction.atomic
def update_status(operator, report: Report, target: str) -> Report:
    """Move a report along received -> investigating -> resolved."""
    ensure_role(operator, UserRole.OPERATOR)
    locked = Report.objects.select_for_update().get(pk=report.pk)
    raise_for_rule(can_transition_report(locked.status, target))
    if locked.status == target:
        return locked
    locked.status = target
    locked.resolved_at = timezone.now() if target == ReportStatus.RESOLVED else None
    locked.save(update_fields=["status", "resolved_at"])
    record_audit(operator, f"update_report_status_{target}", locked.target_type, locked.target_id)
    logger.info("Report %s status -> %s by user %s", locked.pk, target, operator.pk)
    return locked


def _invalidate_submission(operator, submission: Submission, reason: str) -> None:
    grade = submission.current_grade() or Grade(submission=submission)
    grade.feedback = reason
    grade.graded_by = operator
    grade.graded_at = timezone.now()
    grade.save()
    submission.status = SubmissionStatus.RESUBMISSION_REQUIRED
    submission.save(update_fields=["status", "updated_at"])


def _suspend_user(user) -> None:
    user.is_active = False
    user.save(update_fields=["is_active"])


def _archive_course(course: Course) -> None:
    if course.status == CourseStatus.DRAFT:
        raise ValidationFailed("Draft courses cannot be archived", code=ErrorCode.ACTION_ERROR)
    course.status = CourseStatus.ARCHIVED
    course.save(update_fields=["status", "updated_at"])


@transaction.atomic
def execute_action(operator, report: Report, action: str, reason: str) -> Report:
    """Apply an enforcement action to the report target and resolve the report.

    Raises:
        Forbidden(already_resolved): the report is already resolved.
        ValidationFailed: short reason, or the action does not fit the target type.
        NotFoundError(target_not_found): the target has been deleted.
    """
    ensure_role(operator, UserRole.OPERATOR)
    locked = Report.objects.select_for_update().get(pk=report.pk)
    if locked.status == ReportStatus.RESOLVED:
        raise Forbidden("Report is already resolved", code=ErrorCode.ALREADY_RESOLVED)
    reason = (reason or "").strip()
    if len(reason) < MIN_ACTION_REASON_LENGTH:
        raise ValidationFailed(
            f"Reason must be at least {MIN_ACTION_REASON_LENGTH} characters",
            details={"reason": [f"Ensure this field has at least {MIN_ACTION_REASON_LENGTH} characters."]},
        )
    action = str(action)
    if action not in ACTION_TARGETS:
        raise ValidationFailed(f"Unknown action '{action}'", code=ErrorCode.ACTION_ERROR)
    required_type = ACTION_TARGETS[action]
    if required_type and required_type != locked.target_type:
        raise ValidationFailed(
            f"Action '{action}' cannot be applied to a {locked.target_type}", code=ErrorCode.ACTION_ERROR,
        )

    target = resolve_target(locked.target_type, locked.target_id)
    if action == ModerationAction.INVALIDATE_SUBMISSION:
        _invalidate_submission(operator, target, reason)
    elif action == ModerationAction.SUSPEND_USER:
        _suspend_user(target)
    elif action == ModerationAction.ARCHIVE_COURSE:
        _archive_course(target)

    locked.status = ReportStatus.RESOLVED
    locked.action_taken = action
    locked.action_reason = reason
    locked.resolved_at = timezone.now()
    locked.save(update_fields=["status", "action_taken", "action_reason", "resolved_at"])
    record_audit(operator, f"execute_action_{action}", locked.target_type, locked.target_id, reason)
    logger.info("Report %s resolved with %s by user %s", locked.pk, action, operator.pk)
    return locked
