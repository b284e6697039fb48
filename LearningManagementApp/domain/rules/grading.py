"""Weighted grade aggregation and learner progress.

The course total is normalized by the weight of the assignments that actually
contribute a score, so weights need not sum to 100.
"""

from dataclasses import dataclass, field
from datetime import datetime

from LearningManagementApp.core.choices import ProgressStatus, SubmissionStatus

MAX_SCORE = 100

SCORING_STATUSES = frozenset({SubmissionStatus.GRADED.value, SubmissionStatus.RESUBMISSION_REQUIRED.value})
COMPLETED_STATUSES = frozenset({SubmissionStatus.SUBMITTED.value, SubmissionStatus.GRADED.value})


@dataclass(frozen=True)
class GradedItem:
    """One published assignment and the learner's latest submission for it (if any)."""
    assignment_id: int
    title: str
    weight: int
    submission_status: str | None = None
    score: int | None = None
    feedback: str | None = None
    late: bool = False
    submitted_at: datetime | None = None
    graded_at: datetime | None = None

    @property
    def progress_status(self) -> str:
        if self.submission_status is None:
            return ProgressStatus.NOT_SUBMITTED.value
        return str(self.submission_status)

    @property
    def contributes(self) -> bool:
        return str(self.submission_status) in SCORING_STATUSES and self.score is not None


@dataclass(frozen=True)
class CourseGrade:
    total_score: float
    max_score: int = MAX_SCORE
    items: list[GradedItem] = field(default_factory=list)


def weighted_total(items: list[GradedItem]) -> float:
    """Σ(score × weight) / Σ(weight) over contributing items; 0.0 when nothing contributes."""
    contributing = [item for item in items if item.contributes]
    total_weight = sum(item.weight or 0 for item in contributing)
    if total_weight == 0:
        return 0.0
    weighted_sum = sum(item.score * (item.weight or 0) for item in contributing)
    return weighted_sum / total_weight


def aggregate_course_grade(items: list[GradedItem]) -> CourseGrade:
    return CourseGrade(total_score=weighted_total(items), items=list(items))


def calculate_progress(completed: int, total: int) -> int:
    """Completion percentage rounded half-up (0 when there is nothing to complete)."""
    if total == 0:
        return 0
    return int(completed * 100 / total + 0.5)


def count_completed(statuses: list[str | None]) -> int:
    """Assignments counted as done: submitted or graded (resubmission requests are not done)."""
    return sum(1 for status in statuses if status is not None and str(status) in COMPLETED_STATUSES)
