import pytest
from model_bakery import baker
from rest_framework.test import APIClient

from LearningManagementApp.core.choices import CourseStatus, UserRole
from LearningManagementApp.tests.utils import PASSWORD, login

pytestmark = pytest.mark.django_db

SIGNUP = {
    "email": "new@example.com",
    "password": "longenough1",
    "name": "New Learner",
    "phone": "01012345678",
    "role": UserRole.LEARNER,
    "terms_accepted": True,
}


def test_signup_and_login():
    client = APIClient()
    resp = client.post("/api/v1/auth/signup/", SIGNUP, format="json")
    assert resp.status_code == 201
    body = resp.json()
    assert body["ok"] is True
    assert body["data"]["email"] == "new@example.com"
    assert "password" not in body["data"]

    token = client.post("/api/v1/auth/token/", {"email": SIGNUP["email"], "password": SIGNUP["password"]}, format="json")
    assert token.status_code == 200
    assert "access" in token.json()["data"]


@pytest.mark.parametrize("override,field", [
    ({"role": UserRole.OPERATOR}, "role"),
    ({"terms_accepted": False}, "terms_accepted"),
    ({"password": "short"}, "password"),
    ({"phone": "123"}, "phone"),
])
def test_signup_validation_envelope(override, field):
    resp = APIClient().post("/api/v1/auth/signup/", {**SIGNUP, **override}, format="json")
    assert resp.status_code == 400
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "validation_error"
    assert field in body["error"]["details"]


def test_me_requires_authentication():
    resp = APIClient().get("/api/v1/auth/me/")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "unauthenticated"


def test_me_returns_profile(learner):
    resp = login(learner).get("/api/v1/auth/me/")
    assert resp.status_code == 200
    assert resp.json()["data"]["role"] == "learner"


def test_suspended_user_cannot_log_in(learner):
    learner.is_active = False
    learner.save()
    resp = APIClient().post("/api/v1/auth/token/", {"email": learner.email, "password": PASSWORD}, format="json")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "unauthenticated"


def test_catalog_lists_only_published(course, draft_course):
    resp = APIClient().get("/api/v1/courses/")
    assert resp.status_code == 200
    ids = [c["id"] for c in resp.json()["data"]["results"]]
    assert ids == [course.id]


def test_catalog_search_and_category_filter(instructor):
    web = baker.make("courses.Category", name="Web")
    baker.make("courses.Course", instructor=instructor, title="Django basics", status=CourseStatus.PUBLISHED, category=web)
    baker.make("courses.Course", instructor=instructor, title="Rust basics", status=CourseStatus.PUBLISHED)

    client = APIClient()
    titles = [c["title"] for c in client.get("/api/v1/courses/?search=django").json()["data"]["results"]]
    assert titles == ["Django basics"]
    titles = [c["title"] for c in client.get(f"/api/v1/courses/?category={web.id}").json()["data"]["results"]]
    assert titles == ["Django basics"]


def test_draft_course_hidden_from_others(draft_course, instructor, learner):
    resp = login(learner).get(f"/api/v1/courses/{draft_course.id}/")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "course_not_found"

    resp = login(instructor).get(f"/api/v1/courses/{draft_course.id}/")
    assert resp.status_code == 200
    assert resp.json()["data"]["next_statuses"] == ["published"]


def test_instructor_creates_and_publishes_course(instructor):
    client = login(instructor)
    resp = client.post("/api/v1/courses/", {"title": "Databases", "description": "SQL"}, format="json")
    assert resp.status_code == 201
    course_id = resp.json()["data"]["id"]
    assert resp.json()["data"]["status"] == "draft"

    resp = client.patch(f"/api/v1/courses/{course_id}/status/", {"status": "published"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "published"


def test_learner_cannot_create_course(learner):
    resp = login(learner).post("/api/v1/courses/", {"title": "Mine"}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "invalid_role"


def test_draft_to_archived_rejected(draft_course, instructor):
    resp = login(instructor).patch(f"/api/v1/courses/{draft_course.id}/status/", {"status": "archived"}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "invalid_status_transition"


def test_non_owner_cannot_edit_course(course, other_instructor):
    resp = login(other_instructor).patch(f"/api/v1/courses/{course.id}/", {"title": "Hijacked"}, format="json")
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "not_owner"
