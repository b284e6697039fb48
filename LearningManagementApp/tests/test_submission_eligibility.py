from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from LearningManagementApp.core.choices import AssignmentStatus, SubmissionStatus
from LearningManagementApp.core.errors import ErrorCode
from LearningManagementApp.domain.rules.eligibility import (
    AssignmentSnapshot,
    SubmissionSnapshot,
    check_submission,
    is_past_due,
)

NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)
PRIOR = SubmissionSnapshot(status=SubmissionStatus.GRADED, late=False, submitted_at=NOW - timedelta(days=1))


def snapshot(**overrides) -> AssignmentSnapshot:
    values = {
        "status": AssignmentStatus.PUBLISHED,
        "due_date": NOW + timedelta(days=1),
        "allow_late": False,
        "allow_resubmission": False,
    }
    values.update(overrides)
    return AssignmentSnapshot(**values)


def test_first_submission_on_time():
    decision = check_submission(snapshot(), is_enrolled=True, existing=None, now=NOW)
    assert decision.allowed
    assert decision.is_late is False
    assert decision.overwrite is False


def test_not_enrolled_is_checked_first():
    decision = check_submission(
        snapshot(status=AssignmentStatus.CLOSED), is_enrolled=False, existing=PRIOR, now=NOW,
    )
    assert decision.result.code == ErrorCode.NOT_ENROLLED


@pytest.mark.parametrize("status,code", [
    (AssignmentStatus.DRAFT, ErrorCode.NOT_PUBLISHED),
    (AssignmentStatus.CLOSED, ErrorCode.ASSIGNMENT_CLOSED),
])
def test_unpublished_statuses_rejected(status, code):
    decision = check_submission(snapshot(status=status), is_enrolled=True, existing=None, now=NOW)
    assert decision.result.code == code


def test_late_without_allow_late_rejected():
    decision = check_submission(
        snapshot(due_date=NOW - timedelta(minutes=1)), is_enrolled=True, existing=None, now=NOW,
    )
    assert not decision.allowed
    assert decision.result.code == ErrorCode.PAST_DUE_NOT_ALLOWED


def test_late_with_allow_late_is_flagged():
    decision = check_submission(
        snapshot(due_date=NOW - timedelta(hours=5), allow_late=True), is_enrolled=True, existing=None, now=NOW,
    )
    assert decision.allowed
    assert decision.is_late is True


def test_resubmission_requires_flag():
    decision = check_submission(snapshot(), is_enrolled=True, existing=PRIOR, now=NOW)
    assert decision.result.code == ErrorCode.RESUBMISSION_NOT_ALLOWED


def test_resubmission_overwrites_when_allowed():
    decision = check_submission(snapshot(allow_resubmission=True), is_enrolled=True, existing=PRIOR, now=NOW)
    assert decision.allowed
    assert decision.overwrite is True


def test_deadline_is_checked_before_resubmission():
    decision = check_submission(
        snapshot(due_date=NOW - timedelta(days=1), allow_resubmission=True),
        is_enrolled=True, existing=PRIOR, now=NOW,
    )
    assert decision.result.code == ErrorCode.PAST_DUE_NOT_ALLOWED


def test_no_due_date_is_never_late():
    assert is_past_due(None, NOW) is False
    decision = check_submission(snapshot(due_date=None), is_enrolled=True, existing=None, now=NOW)
    assert decision.allowed and decision.is_late is False


@given(st.integers(min_value=-10_000, max_value=10_000), st.booleans())
def test_late_flag_matches_deadline(offset_minutes, allow_late):
    due = NOW + timedelta(minutes=offset_minutes)
    decision = check_submission(
        snapshot(due_date=due, allow_late=allow_late), is_enrolled=True, existing=None, now=NOW,
    )
    late = NOW > due
    assert decision.allowed == (not late or allow_late)
    if decision.allowed:
        assert decision.is_late == late
