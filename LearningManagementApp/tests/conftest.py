from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from model_bakery import baker

from LearningManagementApp.core.choices import AssignmentStatus, CourseStatus, UserRole
from LearningManagementApp.tests.utils import make_user


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def instructor():
    return make_user(UserRole.INSTRUCTOR, email="instructor@example.com")


@pytest.fixture
def other_instructor():
    return make_user(UserRole.INSTRUCTOR, email="other.instructor@example.com")


@pytest.fixture
def learner():
    return make_user(UserRole.LEARNER, email="learner@example.com")


@pytest.fixture
def other_learner():
    return make_user(UserRole.LEARNER, email="other.learner@example.com")


@pytest.fixture
def operator():
    return make_user(UserRole.OPERATOR, email="operator@example.com")


@pytest.fixture
def course(instructor):
    return baker.make("courses.Course", instructor=instructor, title="Python 101", status=CourseStatus.PUBLISHED)


@pytest.fixture
def draft_course(instructor):
    return baker.make("courses.Course", instructor=instructor, title="Draft course", status=CourseStatus.DRAFT)


@pytest.fixture
def assignment(course):
    return baker.make(
        "learning.Assignment",
        course=course,
        title="Homework 1",
        description="Write a parser",
        due_date=timezone.now() + timedelta(days=3),
        weight=50,
        status=AssignmentStatus.PUBLISHED,
    )


@pytest.fixture
def enrollment(course, learner):
    return baker.make("courses.Enrollment", course=course, learner=learner)
