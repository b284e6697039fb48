import pytest
from model_bakery import baker
from rest_framework.test import APIClient

from LearningManagementApp.core.choices import CourseStatus, ReportStatus, SubmissionStatus
from LearningManagementApp.moderation.models import AuditLog, Report
from LearningManagementApp.tests.utils import login

pytestmark = pytest.mark.django_db

REASON = "Copied from a public repository"


@pytest.fixture
def submission(assignment, learner, enrollment):
    return baker.make("learning.Submission", assignment=assignment, learner=learner, text="copied")


def file_report(client, target_type, target_id, reason="plagiarism"):
    return client.post(
        "/api/v1/reports/",
        {"target_type": target_type, "target_id": target_id, "reason": reason, "content": "see link"},
        format="json",
    )


def test_any_user_can_report(other_learner, submission):
    resp = file_report(login(other_learner), "submission", submission.id)
    assert resp.status_code == 201
    assert resp.json()["data"]["status"] == "received"


def test_report_unknown_target(learner):
    resp = file_report(login(learner), "course", 999999)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "target_not_found"


def test_reports_are_operator_only(learner, operator, submission):
    file_report(login(learner), "submission", submission.id)
    assert login(learner).get("/api/v1/reports/").status_code == 403
    resp = login(operator).get("/api/v1/reports/?status=received")
    assert resp.status_code == 200
    assert resp.json()["data"]["count"] == 1


def test_report_status_flow_is_audited(operator, learner, course):
    report = baker.make(Report, target_type="course", target_id=course.id, reporter=learner, reason="spam")
    client = login(operator)

    resp = client.patch(f"/api/v1/reports/{report.id}/status/", {"status": "resolved"}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "invalid_status_transition"

    resp = client.patch(f"/api/v1/reports/{report.id}/status/", {"status": "investigating"}, format="json")
    assert resp.status_code == 200
    assert AuditLog.objects.filter(operator=operator, target_type="course", target_id=course.id).count() == 1


def test_invalidate_submission_action(operator, learner, submission):
    report = baker.make(Report, target_type="submission", target_id=submission.id, reporter=learner, reason="plagiarism")
    resp = login(operator).post(
        f"/api/v1/reports/{report.id}/action/", {"action": "invalidate_submission", "reason": REASON}, format="json",
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "resolved"
    assert resp.json()["data"]["action_taken"] == "invalidate_submission"
    submission.refresh_from_db()
    assert submission.status == SubmissionStatus.RESUBMISSION_REQUIRED
    assert submission.grade.feedback == REASON
    assert AuditLog.objects.get(action="execute_action_invalidate_submission").reason == REASON


def test_action_on_resolved_report(operator, learner, course):
    report = baker.make(
        Report, target_type="course", target_id=course.id, reporter=learner, reason="spam",
        status=ReportStatus.RESOLVED,
    )
    resp = login(operator).post(f"/api/v1/reports/{report.id}/action/", {"action": "warn", "reason": REASON}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "already_resolved"


def test_action_reason_too_short(operator, learner, course):
    report = baker.make(Report, target_type="course", target_id=course.id, reporter=learner, reason="spam")
    resp = login(operator).post(f"/api/v1/reports/{report.id}/action/", {"action": "warn", "reason": "short"}, format="json")
    assert resp.status_code == 400
    assert "reason" in resp.json()["error"]["details"]


def test_suspend_user_and_archive_course(operator, learner, other_learner, course):
    user_report = baker.make(Report, target_type="user", target_id=other_learner.id, reporter=learner, reason="spam")
    course_report = baker.make(Report, target_type="course", target_id=course.id, reporter=learner, reason="inappropriate")
    client = login(operator)

    resp = client.post(f"/api/v1/reports/{user_report.id}/action/", {"action": "archive_course", "reason": REASON}, format="json")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "action_error"

    client.post(f"/api/v1/reports/{user_report.id}/action/", {"action": "suspend_user", "reason": REASON}, format="json")
    other_learner.refresh_from_db()
    assert other_learner.is_active is False

    client.post(f"/api/v1/reports/{course_report.id}/action/", {"action": "archive_course", "reason": REASON}, format="json")
    course.refresh_from_db()
    assert course.status == CourseStatus.ARCHIVED


def test_metadata_crud(operator, learner):
    client = login(operator)
    resp = client.post("/api/v1/metadata/categories/", {"name": "Data Science"}, format="json")
    assert resp.status_code == 201
    category_id = resp.json()["data"]["id"]

    resp = client.post("/api/v1/metadata/categories/", {"name": "data science"}, format="json")
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "duplicate_name"

    resp = client.patch(f"/api/v1/metadata/categories/{category_id}/toggle/")
    assert resp.json()["data"]["active"] is False
    public = APIClient().get("/api/v1/metadata/categories/").json()["data"]["results"]
    assert public == []

    resp = login(learner).post("/api/v1/metadata/difficulties/", {"name": "Hard"}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "invalid_role"
