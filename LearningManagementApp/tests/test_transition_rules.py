from datetime import datetime, timezone

import pytest
from hypothesis import given, strategies as st

from LearningManagementApp.core.choices import AssignmentStatus, CourseStatus, ReportStatus
from LearningManagementApp.core.errors import ErrorCode
from LearningManagementApp.domain.rules.transitions import (
    PublishFields,
    can_transition_assignment,
    can_transition_course,
    can_transition_report,
    missing_publish_fields,
    next_assignment_statuses,
    next_course_statuses,
)

COMPLETE = PublishFields(
    title="HW", description="Do it", due_date=datetime(2030, 1, 1, tzinfo=timezone.utc), weight=20,
)

course_states = st.sampled_from(CourseStatus.values)
assignment_states = st.sampled_from(AssignmentStatus.values)
counts = st.integers(min_value=0, max_value=10_000)

optional_text = st.one_of(st.none(), st.just(""), st.just("   "), st.text(min_size=1).filter(str.strip))
publish_fields = st.builds(
    PublishFields,
    title=optional_text,
    description=optional_text,
    due_date=st.one_of(st.none(), st.just(COMPLETE.due_date)),
    weight=st.one_of(st.none(), st.integers(min_value=0, max_value=100)),
)


@given(course_states, counts)
def test_course_same_state_is_always_allowed(state, enrolled):
    assert can_transition_course(state, state, enrolled).allowed


@given(counts)
def test_published_to_draft_forbidden_iff_enrolled(enrolled):
    result = can_transition_course(CourseStatus.PUBLISHED, CourseStatus.DRAFT, enrolled)
    assert result.allowed == (enrolled == 0)
    if enrolled:
        assert result.code == ErrorCode.INVALID_STATUS_TRANSITION
        assert "enrolled" in result.reason


@given(counts)
def test_draft_archived_pairs_always_forbidden(enrolled):
    assert not can_transition_course(CourseStatus.DRAFT, CourseStatus.ARCHIVED, enrolled).allowed
    assert not can_transition_course(CourseStatus.ARCHIVED, CourseStatus.DRAFT, enrolled).allowed


@pytest.mark.parametrize("current,target", [
    (CourseStatus.DRAFT, CourseStatus.PUBLISHED),
    (CourseStatus.PUBLISHED, CourseStatus.ARCHIVED),
    (CourseStatus.ARCHIVED, CourseStatus.PUBLISHED),
])
def test_course_allowed_transitions(current, target):
    assert can_transition_course(current, target, 5).allowed


def test_course_transition_accepts_plain_strings():
    assert can_transition_course("draft", "published", 0).allowed
    assert not can_transition_course("draft", "archived", 0).allowed


def test_next_course_statuses():
    assert next_course_statuses(CourseStatus.PUBLISHED, 0) == [CourseStatus.DRAFT, CourseStatus.ARCHIVED]
    assert next_course_statuses(CourseStatus.PUBLISHED, 3) == [CourseStatus.ARCHIVED]
    assert next_course_statuses(CourseStatus.ARCHIVED, 0) == [CourseStatus.PUBLISHED]


@given(assignment_states, publish_fields)
def test_closed_assignment_is_terminal(target, fields):
    result = can_transition_assignment(AssignmentStatus.CLOSED, target, fields)
    assert not result.allowed
    assert result.code == ErrorCode.INVALID_STATUS_TRANSITION


@given(assignment_states, publish_fields)
def test_incomplete_assignment_never_publishes(current, fields):
    if not missing_publish_fields(fields):
        return
    assert not can_transition_assignment(current, AssignmentStatus.PUBLISHED, fields).allowed


def test_incomplete_publish_reports_missing_fields():
    fields = PublishFields(title="HW", description="", due_date=None, weight=10)
    result = can_transition_assignment(AssignmentStatus.DRAFT, AssignmentStatus.PUBLISHED, fields)
    assert result.code == ErrorCode.ASSIGNMENT_INCOMPLETE
    assert "description" in result.reason and "due_date" in result.reason


@pytest.mark.parametrize("current,target,allowed", [
    (AssignmentStatus.DRAFT, AssignmentStatus.PUBLISHED, True),
    (AssignmentStatus.PUBLISHED, AssignmentStatus.CLOSED, True),
    (AssignmentStatus.DRAFT, AssignmentStatus.DRAFT, True),
    (AssignmentStatus.PUBLISHED, AssignmentStatus.PUBLISHED, True),
    (AssignmentStatus.DRAFT, AssignmentStatus.CLOSED, False),
    (AssignmentStatus.PUBLISHED, AssignmentStatus.DRAFT, False),
])
def test_assignment_transition_table(current, target, allowed):
    assert can_transition_assignment(current, target, COMPLETE).allowed is allowed


def test_zero_weight_counts_as_present():
    fields = PublishFields(title="HW", description="Do it", due_date=COMPLETE.due_date, weight=0)
    assert missing_publish_fields(fields) == []


def test_next_assignment_statuses():
    assert next_assignment_statuses(AssignmentStatus.DRAFT) == [AssignmentStatus.PUBLISHED]
    assert next_assignment_statuses(AssignmentStatus.CLOSED) == []


@given(st.sampled_from(ReportStatus.values))
def test_resolved_report_is_terminal(target):
    result = can_transition_report(ReportStatus.RESOLVED, target)
    assert result.allowed == (target == ReportStatus.RESOLVED)


def test_report_must_be_investigated_first():
    assert not can_transition_report(ReportStatus.RECEIVED, ReportStatus.RESOLVED).allowed
    assert can_transition_report(ReportStatus.RECEIVED, ReportStatus.INVESTIGATING).allowed
    assert can_transition_report(ReportStatus.INVESTIGATING, ReportStatus.RESOLVED).allowed
