"""Learner submissions: submit, resubmit in place, and read back."""
import logging
from datetime import datetime

from django.db import IntegrityError, transaction
from django.utils import timezone

from LearningManagementApp.core.access import is_enrolled
from LearningManagementApp.core.choices import SubmissionStatus
from LearningManagementApp.core.errors import ErrorCode, Forbidden, raise_for_rule
from LearningManagementApp.learning.models import Assignment, Submission
from LearningManagementApp.domain.rules.eligibility import AssignmentSnapshot, SubmissionSnapshot, check_submission

logger = logging.getLogger(__name__)


def assignment_snapshot(assignment: Assignment) -> AssignmentSnapshot:
    return AssignmentSnapshot(
        status=assignment.status,
        due_date=assignment.due_date,
        allow_late=assignment.allow_late,
        allow_resubmission=assignment.allow_resubmission,
    )


def submission_snapshot(submission: Submission | None) -> SubmissionSnapshot | None:
    if submission is None:
        return None
    return SubmissionSnapshot(status=submission.status, late=submission.late, submitted_at=submission.submitted_at)


def _current_submission(learner, assignment: Assignment) -> Submission | None:
    return Submission.objects.select_for_update().filter(assignment=assignment, learner=learner).first()


def _write_submission(learner, assignment: Assignment, existing: Submission | None, text: str, link: str, now: datetime) -> tuple[Submission, bool]:
    decision = check_submission(
        assignment_snapshot(assignment),
        is_enrolled=is_enrolled(learner, assignment.course),
        existing=submission_snapshot(existing),
        now=now,
    )
    if not decision.allowed:
        logger.info(
            "Submission by user %s to assignment %s rejected (%s)",
            learner.pk, assignment.pk, decision.result.code,
        )
    raise_for_rule(decision.result)

    if decision.overwrite:
        existing.text = text
        existing.link = link or ""
        existing.status = SubmissionStatus.SUBMITTED
        existing.late = decision.is_late
        existing.submitted_at = now
        existing.save(update_fields=["text", "link", "status", "late", "submitted_at", "updated_at"])
        logger.info("Submission %s overwritten (late=%s)", existing.pk, decision.is_late)
        return existing, False

    submission = Submission.objects.create(
        assignment=assignment,
        learner=learner,
        text=text,
        link=link or "",
        status=SubmissionStatus.SUBMITTED,
        late=decision.is_late,
        submitted_at=now,
    )
    logger.info("Submission %s created (late=%s)", submission.pk, decision.is_late)
    return submission, True


@transaction.atomic
def submit(learner, assignment: Assignment, text: str, link: str = "", now: datetime | None = None) -> tuple[Submission, bool]:
    """Create or overwrite the learner's submission for ``assignment``.

    The late flag is computed from ``now`` once and stored; it is not
    recalculated if the due date changes later. A resubmission rewrites the
    existing row and resets its status to ``submitted``; the grade row is kept.
    If a concurrent first submission wins the insert, its row is re-read and
    the eligibility rules run again against it.

    Returns:
        ``(submission, created)``.

    Raises:
        Forbidden: any eligibility rule fails (not_enrolled, not_published,
            assignment_closed, past_due_not_allowed, resubmission_not_allowed).
    """
    now = now or timezone.now()
    existing = _current_submission(learner, assignment)
    try:
        with transaction.atomic():
            return _write_submission(learner, assignment, existing, text, link, now)
    except IntegrityError:
        logger.info("Concurrent submission by user %s to assignment %s, retrying on stored row", learner.pk, assignment.pk)
    return _write_submission(learner, assignment, _current_submission(learner, assignment), text, link, now)


def history_for(learner, assignment: Assignment) -> list[Submission]:
    """The learner's submissions for an assignment (at most one current row)."""
    if not is_enrolled(learner, assignment.course):
        raise Forbidden("You are not enrolled in this course", code=ErrorCode.NOT_ENROLLED)
    return list(Submission.objects.filter(assignment=assignment, learner=learner).select_related("grade"))
