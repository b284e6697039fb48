from datetime import timedelta

import pytest
from django.utils import timezone
from model_bakery import baker

from LearningManagementApp.core.choices import AssignmentStatus, SubmissionStatus
from LearningManagementApp.courses.models import Enrollment
from LearningManagementApp.tests.utils import login

pytestmark = pytest.mark.django_db


def test_enroll_and_cancel(course, learner):
    client = login(learner)
    resp = client.post("/api/v1/enrollments/", {"course_id": course.id}, format="json")
    assert resp.status_code == 201
    assert resp.json()["data"]["course"] == course.id

    status = client.get(f"/api/v1/enrollments/status/{course.id}/").json()["data"]
    assert status["is_enrolled"] is True

    resp = client.delete(f"/api/v1/enrollments/{course.id}/")
    assert resp.status_code == 200
    assert not Enrollment.objects.filter(course=course, learner=learner).exists()


def test_duplicate_enrollment_conflict(course, learner, enrollment):
    resp = login(learner).post("/api/v1/enrollments/", {"course_id": course.id}, format="json")
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "already_enrolled"


def test_enroll_in_draft_course_forbidden(draft_course, learner):
    resp = login(learner).post("/api/v1/enrollments/", {"course_id": draft_course.id}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "course_not_published"


def test_enroll_unknown_course(learner):
    resp = login(learner).post("/api/v1/enrollments/", {"course_id": 424242}, format="json")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "course_not_found"


def test_instructor_cannot_enroll(course, instructor):
    resp = login(instructor).post("/api/v1/enrollments/", {"course_id": course.id}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "invalid_role"


def test_cancel_without_enrollment(course, learner):
    resp = login(learner).delete(f"/api/v1/enrollments/{course.id}/")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "not_enrolled"


def test_learner_dashboard(course, assignment, instructor, learner, enrollment):
    now = timezone.now()
    far = baker.make(
        "learning.Assignment", course=course, title="Later", description="d",
        due_date=now + timedelta(days=30), weight=10, status=AssignmentStatus.PUBLISHED,
    )
    done = baker.make(
        "learning.Assignment", course=course, title="Done", description="d",
        due_date=now + timedelta(days=1), weight=10, status=AssignmentStatus.PUBLISHED,
    )
    sub = baker.make("learning.Submission", assignment=done, learner=learner, text="x", status=SubmissionStatus.GRADED)
    baker.make("learning.Grade", submission=sub, graded_by=instructor, score=90, feedback="Nice work")

    resp = login(learner).get("/api/v1/dashboard/learner/")
    assert resp.status_code == 200
    data = resp.json()["data"]

    [progress] = data["courses"]
    assert progress["course_id"] == course.id
    assert progress["total_assignments"] == 3
    assert progress["completed_assignments"] == 1
    assert progress["progress"] == 33

    upcoming_ids = [u["assignment_id"] for u in data["upcoming"]]
    assert upcoming_ids == [assignment.id]
    assert far.id not in upcoming_ids
    assert 70 <= data["upcoming"][0]["due_in_hours"] <= 72

    [feedback] = data["recent_feedback"]
    assert feedback["feedback"] == "Nice work"
    assert feedback["score"] == 90


def test_instructor_dashboard(course, assignment, instructor, learner, enrollment):
    baker.make("learning.Submission", assignment=assignment, learner=learner, text="x")
    resp = login(instructor).get("/api/v1/dashboard/instructor/")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["pending_count"] == 1
    [row] = data["courses"]
    assert row["enrolled_count"] == 1
    assert row["assignment_count"] == 1
    assert data["recent_submissions"][0]["learner"]["email"] == learner.email


def test_dashboard_role_guard(learner):
    resp = login(learner).get("/api/v1/dashboard/instructor/")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "invalid_role"
