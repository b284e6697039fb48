"""Status-transition rules for courses, assignments and moderation reports.

All functions are pure: they take the current state plus context and return a
``RuleResult``. Course graph:

    draft -> published -> archived -> published
    published -> draft   (only while nobody is enrolled)

Assignment graph (no regression, closed is terminal):

    draft -> published -> closed
"""

from dataclasses import dataclass
from datetime import datetime

from LearningManagementApp.core.choices import AssignmentStatus, CourseStatus, ReportStatus
from LearningManagementApp.core.errors import ErrorCode
from LearningManagementApp.domain.rules.result import RuleResult


COURSE_TRANSITIONS: dict[str, set[str]] = {
    CourseStatus.DRAFT.value: {CourseStatus.PUBLISHED.value},
    CourseStatus.PUBLISHED.value: {CourseStatus.DRAFT.value, CourseStatus.ARCHIVED.value},
    CourseStatus.ARCHIVED.value: {CourseStatus.PUBLISHED.value},
}

ASSIGNMENT_TRANSITIONS: dict[str, set[str]] = {
    AssignmentStatus.DRAFT.value: {AssignmentStatus.PUBLISHED.value},
    AssignmentStatus.PUBLISHED.value: {AssignmentStatus.CLOSED.value},
    AssignmentStatus.CLOSED.value: set(),
}

REPORT_TRANSITIONS: dict[str, set[str]] = {
    ReportStatus.RECEIVED.value: {ReportStatus.INVESTIGATING.value},
    ReportStatus.INVESTIGATING.value: {ReportStatus.RESOLVED.value},
    ReportStatus.RESOLVED.value: set(),
}


@dataclass(frozen=True)
class PublishFields:
    """The assignment fields that must all be present before publishing."""
    title: str | None
    description: str | None
    due_date: datetime | None
    weight: int | None


def _invalid(current: str, target: str, reason: str | None = None) -> RuleResult:
    return RuleResult.deny(
        ErrorCode.INVALID_STATUS_TRANSITION,
        reason or f"Cannot transition from {current} to {target}",
    )


def can_transition_course(current: str, target: str, enrolled_count: int) -> RuleResult:
    """Decide whether a course may move from ``current`` to ``target``."""
    current, target = str(current), str(target)
    if current == target:
        return RuleResult.ok()
    if current == CourseStatus.DRAFT and target == CourseStatus.ARCHIVED:
        return _invalid(current, target, "Draft courses must be published before they can be archived")
    if current == CourseStatus.ARCHIVED and target == CourseStatus.DRAFT:
        return _invalid(current, target, "Archived courses cannot return to draft")
    if current == CourseStatus.PUBLISHED and target == CourseStatus.DRAFT and enrolled_count > 0:
        return _invalid(current, target, "Courses with enrolled learners cannot return to draft")
    if target not in COURSE_TRANSITIONS.get(current, set()):
        return _invalid(current, target)
    return RuleResult.ok()


def next_course_statuses(current: str, enrolled_count: int) -> list[str]:
    """States reachable from ``current`` (excluding itself)."""
    return [
        status for status in CourseStatus.values
        if status != current and can_transition_course(current, status, enrolled_count)
    ]


def missing_publish_fields(fields: PublishFields) -> list[str]:
    """Names of the fields that block publishing; blank strings count as missing."""
    missing = []
    if not (fields.title or "").strip():
        missing.append("title")
    if not (fields.description or "").strip():
        missing.append("description")
    if fields.due_date is None:
        missing.append("due_date")
    if fields.weight is None:
        missing.append("weight")
    return missing


def can_transition_assignment(current: str, target: str, fields: PublishFields) -> RuleResult:
    """Decide whether an assignment may move from ``current`` to ``target``.

    ``closed`` is terminal, and an incomplete assignment can never be
    published, whatever its current state.
    """
    current, target = str(current), str(target)
    if current == AssignmentStatus.CLOSED:
        return _invalid(current, target, "Closed assignments cannot change status")
    if target == AssignmentStatus.PUBLISHED:
        missing = missing_publish_fields(fields)
        if missing:
            return RuleResult.deny(
                ErrorCode.ASSIGNMENT_INCOMPLETE,
                "Cannot publish assignment with incomplete information: " + ", ".join(missing),
            )
    if current == target:
        return RuleResult.ok()
    if target not in ASSIGNMENT_TRANSITIONS.get(current, set()):
        return _invalid(current, target)
    return RuleResult.ok()


def next_assignment_statuses(current: str) -> list[str]:
    return sorted(ASSIGNMENT_TRANSITIONS.get(str(current), set()))


def can_transition_report(current: str, target: str) -> RuleResult:
    """Reports move received -> investigating -> resolved; resolved is final."""
    current, target = str(current), str(target)
    if current == target:
        return RuleResult.ok()
    if current == ReportStatus.RESOLVED:
        return _invalid(current, target, "Resolved reports cannot change status")
    if current == ReportStatus.RECEIVED and target == ReportStatus.RESOLVED:
        return _invalid(current, target, "Reports must be investigated before they are resolved")
    if target not in REPORT_TRANSITIONS.get(current, set()):
        return _invalid(current, target)
    return RuleResult.ok()
