"""Submission eligibility: may a learner submit (or resubmit) an assignment right now?"""

from dataclasses import dataclass
from datetime import datetime

from LearningManagementApp.core.choices import AssignmentStatus
from LearningManagementApp.core.errors import ErrorCode
from LearningManagementApp.domain.rules.result import RuleResult


@dataclass(frozen=True)
class AssignmentSnapshot:
    """The assignment attributes the checker depends on."""
    status: str
    due_date: datetime | None
    allow_late: bool
    allow_resubmission: bool


@dataclass(frozen=True)
class SubmissionSnapshot:
    """The learner's existing submission, if any."""
    status: str
    late: bool
    submitted_at: datetime


@dataclass(frozen=True)
class SubmissionDecision:
    """Result of ``check_submission``.

    ``is_late`` is computed once here and must be persisted as-is.
    ``overwrite`` is True when the existing row is to be replaced in place.
    """
    result: RuleResult
    is_late: bool = False
    overwrite: bool = False

    @property
    def allowed(self) -> bool:
        return self.result.allowed


def is_past_due(due_date: datetime | None, now: datetime) -> bool:
    return due_date is not None and now > due_date


def check_submission(
    assignment: AssignmentSnapshot,
    *,
    is_enrolled: bool,
    existing: SubmissionSnapshot | None,
    now: datetime,
) -> SubmissionDecision:
    """Evaluate the submission rules in order: enrollment, status, deadline, resubmission."""
    has_prior_submission = existing is not None
    if not is_enrolled:
        return SubmissionDecision(RuleResult.deny(
            ErrorCode.NOT_ENROLLED, "You are not enrolled in this course"))

    status = str(assignment.status)
    if status == AssignmentStatus.CLOSED:
        return SubmissionDecision(RuleResult.deny(
            ErrorCode.ASSIGNMENT_CLOSED, "This assignment has been closed"))
    if status != AssignmentStatus.PUBLISHED:
        return SubmissionDecision(RuleResult.deny(
            ErrorCode.NOT_PUBLISHED, "This assignment is not published"))

    late = is_past_due(assignment.due_date, now)
    if late and not assignment.allow_late:
        return SubmissionDecision(RuleResult.deny(
            ErrorCode.PAST_DUE_NOT_ALLOWED, "The submission deadline has passed"), is_late=True)

    if has_prior_submission and not assignment.allow_resubmission:
        return SubmissionDecision(RuleResult.deny(
            ErrorCode.RESUBMISSION_NOT_ALLOWED, "Resubmission is not allowed for this assignment"), is_late=late)

    return SubmissionDecision(RuleResult.ok(), is_late=late, overwrite=has_prior_submission)
