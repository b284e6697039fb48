from django.urls import path, include
from rest_framework_nested import routers
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from LearningManagementApp.api.views import (
    AssignmentViewSet,
    CategoryViewSet,
    CourseAssignmentViewSet,
    CourseViewSet,
    DashboardViewSet,
    DifficultyViewSet,
    EnrollmentViewSet,
    GradeBookViewSet,
    MeView,
    ReportViewSet,
    SignupView,
    SubmissionViewSet,
)

router = routers.SimpleRouter()
router.register(r"courses", CourseViewSet, basename="course")
router.register(r"assignments", AssignmentViewSet, basename="assignment")
router.register(r"enrollments", EnrollmentViewSet, basename="enrollment")
router.register(r"submissions", SubmissionViewSet, basename="submission")
router.register(r"grades", GradeBookViewSet, basename="grade")
router.register(r"dashboard", DashboardViewSet, basename="dashboard")
router.register(r"metadata/categories", CategoryViewSet, basename="category")
router.register(r"metadata/difficulties", DifficultyViewSet, basename="difficulty")
router.register(r"reports", ReportViewSet, basename="report")

courses_router = routers.NestedSimpleRouter(router, r"courses", lookup="course")
courses_router.register(r"assignments", CourseAssignmentViewSet, basename="course-assignments")

urlpatterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="docs"),
    path("auth/signup/", SignupView.as_view(), name="auth-signup"),
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("auth/me/", MeView.as_view(), name="auth-me"),
    path("", include(router.urls)),
    path("", include(courses_router.urls)),
]
