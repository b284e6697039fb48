"""REST API views for authentication, courses, assignments, submissions, grades, dashboards, metadata and moderation."""

from django.db.models import Count

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)

from LearningManagementApp.api.mixins import PaginationMixin
from LearningManagementApp.api.throttles import SubmissionRateThrottle
from LearningManagementApp.core.access import ensure_owner, has_role
from LearningManagementApp.core.choices import UserRole
from LearningManagementApp.core.errors import ErrorCode, NotFoundError
from LearningManagementApp.core.permissions import (
    IsCourseOwner,
    IsInstructor,
    IsLearner,
    IsOperator,
    IsOperatorOrReadOnly,
    IsSubmissionParticipant,
)
from LearningManagementApp.courses.models import Category, Course, Difficulty, Enrollment
from LearningManagementApp.learning.models import Submission
from LearningManagementApp.domain.services import (
    assignment_service,
    course_service,
    dashboard_service,
    enrollment_service,
    grading_service,
    metadata_service,
    moderation_service,
    submission_service,
)
from LearningManagementApp.api.serializers import (
    AssignmentReadSerializer,
    AssignmentStatusSerializer,
    AssignmentWriteSerializer,
    CategorySerializer,
    CourseGradeBookSerializer,
    CourseReadSerializer,
    CourseStatusSerializer,
    CourseWriteSerializer,
    DifficultySerializer,
    EnrollmentCreateSerializer,
    EnrollmentSerializer,
    EnrollmentStatusSerializer,
    GradeSerializer,
    GradeWriteSerializer,
    InstructorDashboardSerializer,
    LearnerAssignmentSerializer,
    LearnerDashboardSerializer,
    MetadataCreateSerializer,
    MetadataWriteSerializer,
    ReportActionSerializer,
    ReportCreateSerializer,
    ReportSerializer,
    ReportStatusSerializer,
    ResubmissionRequestSerializer,
    SignupSerializer,
    SubmissionReadSerializer,
    SubmissionRowSerializer,
    SubmissionWriteSerializer,
    UserSerializer,
)

AUTH_RESPONSES = {
    401: OpenApiResponse(description="Authentication required."),
    403: OpenApiResponse(description="Forbidden (role, ownership or rule violation)."),
    404: OpenApiResponse(description="Not Found"),
}

VALIDATION_RESPONSE = {
    400: OpenApiResponse(description="Validation failed."),
}

CONFLICT_RESPONSE = {
    409: OpenApiResponse(description="Conflict."),
}

COURSE_ORDERING = {
    "latest": ("-created_at", "-id"),
    "popular": ("-enrolled_count", "-id"),
    "title": ("title", "id"),
}


def _serialize_assignments(items):
    """Owner rows are Assignments, learner rows are LearnerAssignments."""
    if items and hasattr(items[0], "submission_status"):
        return LearnerAssignmentSerializer
    return AssignmentReadSerializer


# ---------- Auth ----------
@extend_schema(
    tags=["Auth"],
    request=SignupSerializer,
    responses={201: UserSerializer, **VALIDATION_RESPONSE},
    description="Register a learner or instructor account. Terms must be accepted.",
)
class SignupView(APIView):
    """User registration endpoint."""
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        ser = SignupSerializer(data=request.data, context={"request": request})
        ser.is_valid(raise_exception=True)
        user = ser.save()
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Auth"], responses={200: UserSerializer, **AUTH_RESPONSES})
class MeView(APIView):
    """Profile of the authenticated user."""
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)


# ---------- Courses ----------
@extend_schema_view(
    list=extend_schema(
        tags=["Courses"],
        parameters=[
            OpenApiParameter("search", str, description="Match in title or description."),
            OpenApiParameter("category", int),
            OpenApiParameter("difficulty", int),
            OpenApiParameter("ordering", str, enum=list(COURSE_ORDERING)),
            OpenApiParameter("mine", bool, description="Instructors: list own courses in any status."),
        ],
        responses={200: CourseReadSerializer(many=True)},
    ),
    retrieve=extend_schema(tags=["Courses"], responses={200: CourseReadSerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Courses"],
        request=CourseWriteSerializer,
        responses={201: CourseReadSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
    update=extend_schema(tags=["Courses"], request=CourseWriteSerializer, responses={200: CourseReadSerializer, **AUTH_RESPONSES}),
    partial_update=extend_schema(
        tags=["Courses"], request=CourseWriteSerializer, responses={200: CourseReadSerializer, **AUTH_RESPONSES},
    ),
    change_status=extend_schema(
        tags=["Courses"],
        request=CourseStatusSerializer,
        responses={200: CourseReadSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
        description="draft -> published -> archived -> published; published -> draft only without enrollments.",
    ),
)
class CourseViewSet(
    PaginationMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet,
):
    """Course catalog and instructor course management."""
    queryset = Course.objects.select_related("instructor", "category", "difficulty")
    serializer_class = CourseWriteSerializer
    lookup_value_regex = r"\d+"

    def get_serializer_class(self):
        if self.action in ("list", "retrieve"):
            return CourseReadSerializer
        if self.action == "change_status":
            return CourseStatusSerializer
        return CourseWriteSerializer

    def get_permissions(self) -> list:
        if self.action == "create":
            return [IsAuthenticated(), IsInstructor()]
        if self.action in ("update", "partial_update", "change_status"):
            return [IsAuthenticated(), IsInstructor(), IsCourseOwner()]
        return [AllowAny()]

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        params = self.request.query_params
        if params.get("mine") in ("1", "true") and has_role(user, UserRole.INSTRUCTOR):
            qs = qs.for_instructor(user)
        else:
            qs = qs.published()
        qs = qs.search(params.get("search"))
        if params.get("category", "").isdigit():
            qs = qs.filter(category_id=params["category"])
        if params.get("difficulty", "").isdigit():
            qs = qs.filter(difficulty_id=params["difficulty"])
        ordering = COURSE_ORDERING.get(params.get("ordering"), COURSE_ORDERING["latest"])
        return qs.annotate(enrolled_count=Count("enrollments", distinct=True)).order_by(*ordering)

    def list(self, request: Request, *args, **kwargs) -> Response:
        return self.paginate_and_respond(self.get_queryset(), CourseReadSerializer)

    def retrieve(self, request: Request, *args, **kwargs) -> Response:
        """Published courses for everyone; drafts and archived courses for their owner only."""
        course = course_service.get_course_for(request.user, kwargs["pk"])
        return Response(CourseReadSerializer(course, context={"request": request}).data)

    def get_object(self):
        course = Course.objects.filter(pk=self.kwargs["pk"]).first()
        if course is None:
            raise NotFoundError("Course not found", code=ErrorCode.COURSE_NOT_FOUND)
        self.check_object_permissions(self.request, course)
        return course

    def create(self, request: Request, *args, **kwargs) -> Response:
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        course = course_service.create_course(request.user, ser.validated_data)
        return Response(CourseReadSerializer(course, context={"request": request}).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, *args, **kwargs) -> Response:
        course = self.get_object()
        ser = self.get_serializer(course, data=request.data, partial=kwargs.pop("partial", False))
        ser.is_valid(raise_exception=True)
        course = course_service.update_course(request.user, course, ser.validated_data)
        return Response(CourseReadSerializer(course, context={"request": request}).data)

    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request: Request, pk: int | None = None) -> Response:
        course = self.get_object()
        ser = CourseStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        course = course_service.change_status(request.user, course, ser.validated_data["status"])
        return Response(CourseReadSerializer(course, context={"request": request}).data)


# ---------- Assignments ----------
@extend_schema_view(
    list=extend_schema(
        tags=["Assignments"],
        responses={200: AssignmentReadSerializer(many=True), **AUTH_RESPONSES},
        description="All assignments for the owning instructor; published ones for enrolled learners.",
    ),
    create=extend_schema(
        tags=["Assignments"],
        request=AssignmentWriteSerializer,
        responses={201: AssignmentReadSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
)
class CourseAssignmentViewSet(PaginationMixin, viewsets.GenericViewSet):
    """Assignments nested under a course."""
    serializer_class = AssignmentWriteSerializer
    permission_classes = [IsAuthenticated]

    def get_course(self) -> Course:
        return assignment_service.get_course(self.kwargs["course_pk"])

    def list(self, request: Request, course_pk: int | None = None) -> Response:
        items = assignment_service.list_for_course(request.user, self.get_course())
        return self.paginate_and_respond(items, _serialize_assignments(items))

    def create(self, request: Request, course_pk: int | None = None) -> Response:
        course = self.get_course()
        ensure_owner(request.user, course)
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        assignment = assignment_service.create_assignment(request.user, course, ser.validated_data)
        return Response(AssignmentReadSerializer(assignment).data, status=status.HTTP_201_CREATED)


@extend_schema_view(
    retrieve=extend_schema(tags=["Assignments"], responses={200: AssignmentReadSerializer, **AUTH_RESPONSES}),
    partial_update=extend_schema(
        tags=["Assignments"],
        request=AssignmentWriteSerializer,
        responses={200: AssignmentReadSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
    destroy=extend_schema(
        tags=["Assignments"],
        responses={200: OpenApiResponse(description="Deleted"), **AUTH_RESPONSES},
        description="Only draft assignments without submissions can be deleted.",
    ),
    change_status=extend_schema(
        tags=["Assignments"],
        request=AssignmentStatusSerializer,
        responses={200: AssignmentReadSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
    submissions=extend_schema(
        tags=["Submissions"],
        responses={200: SubmissionRowSerializer(many=True), **AUTH_RESPONSES},
        description="Every enrolled learner with their submission status (owning instructor).",
    ),
    my_submission=extend_schema(
        tags=["Submissions"],
        request=SubmissionWriteSerializer,
        responses={
            200: SubmissionReadSerializer(many=True),
            201: SubmissionReadSerializer,
            429: OpenApiResponse(description="Too many requests / throttled."),
            **AUTH_RESPONSES,
            **VALIDATION_RESPONSE,
        },
        description="GET: the learner's submission history. POST: submit or resubmit.",
    ),
)
class AssignmentViewSet(PaginationMixin, viewsets.GenericViewSet):
    """Single-assignment operations and submissions."""
    serializer_class = AssignmentWriteSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_throttles(self):
        if self.action == "my_submission":
            return [SubmissionRateThrottle()]
        return super().get_throttles()

    def get_object(self):
        return assignment_service.get_assignment(self.kwargs["pk"])

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        item = assignment_service.detail_for(request.user, self.get_object())
        if isinstance(item, assignment_service.LearnerAssignment):
            return Response(LearnerAssignmentSerializer(item).data)
        return Response(AssignmentReadSerializer(item).data)

    def partial_update(self, request: Request, pk: int | None = None) -> Response:
        assignment = self.get_object()
        ensure_owner(request.user, assignment.course)
        ser = self.get_serializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        assignment = assignment_service.update_assignment(request.user, assignment, ser.validated_data)
        return Response(AssignmentReadSerializer(assignment).data)

    def destroy(self, request: Request, pk: int | None = None) -> Response:
        assignment = self.get_object()
        assignment_id = assignment.pk
        assignment_service.delete_assignment(request.user, assignment)
        return Response({"id": assignment_id, "deleted": True})

    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request: Request, pk: int | None = None) -> Response:
        assignment = self.get_object()
        ensure_owner(request.user, assignment.course)
        ser = AssignmentStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        assignment = assignment_service.change_status(request.user, assignment, ser.validated_data["status"])
        return Response(AssignmentReadSerializer(assignment).data)

    @action(detail=True, methods=["get"], url_path="submissions")
    def submissions(self, request: Request, pk: int | None = None) -> Response:
        rows = assignment_service.submissions_for(request.user, self.get_object())
        return self.paginate_and_respond(rows, SubmissionRowSerializer)

    @action(detail=True, methods=["get", "post"], url_path="submission", permission_classes=[IsAuthenticated, IsLearner])
    def my_submission(self, request: Request, pk: int | None = None) -> Response:
        assignment = self.get_object()
        if request.method == "GET":
            history = submission_service.history_for(request.user, assignment)
            return Response(SubmissionReadSerializer(history, many=True).data)
        ser = SubmissionWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        submission, created = submission_service.submit(
            request.user, assignment, ser.validated_data["text"], ser.validated_data.get("link", ""),
        )
        return Response(
            SubmissionReadSerializer(submission).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


# ---------- Enrollment ----------
@extend_schema_view(
    list=extend_schema(tags=["Enrollment"], responses={200: EnrollmentSerializer(many=True), **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Enrollment"],
        request=EnrollmentCreateSerializer,
        responses={201: EnrollmentSerializer, **AUTH_RESPONSES, **CONFLICT_RESPONSE},
    ),
    destroy=extend_schema(
        tags=["Enrollment"],
        parameters=[OpenApiParameter("id", int, OpenApiParameter.PATH, description="Course id.")],
        responses={200: OpenApiResponse(description="Enrollment cancelled"), **AUTH_RESPONSES},
    ),
    enrollment_status=extend_schema(
        tags=["Enrollment"],
        parameters=[OpenApiParameter("course_id", int, OpenApiParameter.PATH)],
        responses={200: EnrollmentStatusSerializer, **AUTH_RESPONSES},
    ),
)
class EnrollmentViewSet(PaginationMixin, viewsets.GenericViewSet):
    """Learner enrollment; detail routes are keyed by course id."""
    serializer_class = EnrollmentCreateSerializer
    permission_classes = [IsAuthenticated, IsLearner]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        qs = Enrollment.objects.for_learner(request.user).select_related("course").order_by("-enrolled_at", "-id")
        return self.paginate_and_respond(qs, EnrollmentSerializer)

    def create(self, request: Request) -> Response:
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        enrollment = enrollment_service.enroll(request.user, ser.validated_data["course_id"])
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)

    def destroy(self, request: Request, pk: int | None = None) -> Response:
        enrollment_service.unenroll(request.user, int(pk))
        return Response({"course_id": int(pk), "enrolled": False})

    @action(detail=False, methods=["get"], url_path=r"status/(?P<course_id>\d+)")
    def enrollment_status(self, request: Request, course_id: str | None = None) -> Response:
        data = enrollment_service.enrollment_status(request.user, int(course_id))
        return Response(EnrollmentStatusSerializer(data).data)


# ---------- Submissions & grading ----------
@extend_schema_view(
    retrieve=extend_schema(tags=["Submissions"], responses={200: SubmissionReadSerializer, **AUTH_RESPONSES}),
    grade=extend_schema(
        tags=["Grading"],
        request=GradeWriteSerializer,
        responses={200: GradeSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
    request_resubmission=extend_schema(
        tags=["Grading"],
        request=ResubmissionRequestSerializer,
        responses={200: GradeSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
)
class SubmissionViewSet(viewsets.GenericViewSet):
    """Submission detail for participants; grading for the owning instructor."""
    queryset = Submission.objects.select_related("assignment__course", "learner")
    serializer_class = SubmissionReadSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def get_permissions(self) -> list:
        if self.action in ("grade", "request_resubmission"):
            return [IsAuthenticated(), IsInstructor(), IsCourseOwner()]
        return [IsAuthenticated(), IsSubmissionParticipant()]

    def get_object(self):
        submission = self.get_queryset().filter(pk=self.kwargs["pk"]).first()
        if submission is None:
            raise NotFoundError("Submission not found", code=ErrorCode.SUBMISSION_NOT_FOUND)
        self.check_object_permissions(self.request, submission)
        return submission

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        return Response(SubmissionReadSerializer(self.get_object()).data)

    @action(detail=True, methods=["post"], url_path="grade")
    def grade(self, request: Request, pk: int | None = None) -> Response:
        submission = self.get_object()
        ser = GradeWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        grade = grading_service.grade_submission(
            request.user, submission, ser.validated_data["score"], ser.validated_data["feedback"],
        )
        return Response(GradeSerializer(grade).data)

    @action(detail=True, methods=["post"], url_path="request-resubmission")
    def request_resubmission(self, request: Request, pk: int | None = None) -> Response:
        submission = self.get_object()
        ser = ResubmissionRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        grade = grading_service.request_resubmission(
            request.user, submission, ser.validated_data["feedback"], ser.validated_data.get("score"),
        )
        return Response(GradeSerializer(grade).data)


@extend_schema_view(
    my=extend_schema(tags=["Grading"], responses={200: CourseGradeBookSerializer(many=True), **AUTH_RESPONSES}),
)
class GradeBookViewSet(viewsets.GenericViewSet):
    """The learner's weighted grades per enrolled course."""
    serializer_class = CourseGradeBookSerializer
    permission_classes = [IsAuthenticated, IsLearner]

    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request: Request) -> Response:
        books = grading_service.my_grades(request.user)
        return Response(CourseGradeBookSerializer(books, many=True).data)


# ---------- Dashboards ----------
@extend_schema_view(
    learner=extend_schema(tags=["Dashboard"], responses={200: LearnerDashboardSerializer, **AUTH_RESPONSES}),
    instructor=extend_schema(tags=["Dashboard"], responses={200: InstructorDashboardSerializer, **AUTH_RESPONSES}),
)
class DashboardViewSet(viewsets.GenericViewSet):
    permission_classes = [IsAuthenticated]

    def get_serializer_class(self):
        return InstructorDashboardSerializer if self.action == "instructor" else LearnerDashboardSerializer

    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated, IsLearner])
    def learner(self, request: Request) -> Response:
        return Response(LearnerDashboardSerializer(dashboard_service.learner_dashboard(request.user)).data)

    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated, IsInstructor])
    def instructor(self, request: Request) -> Response:
        return Response(InstructorDashboardSerializer(dashboard_service.instructor_dashboard(request.user)).data)


# ---------- Metadata ----------
class MetadataViewSet(PaginationMixin, viewsets.GenericViewSet):
    """Shared CRUD for operator-managed metadata. Subclasses set ``model`` and ``serializer_class``."""
    model = None
    permission_classes = [IsOperatorOrReadOnly]
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        include_inactive = (
            self.request.query_params.get("include_inactive") in ("1", "true")
            and has_role(self.request.user, UserRole.OPERATOR)
        )
        return metadata_service.list_entries(self.model, include_inactive=include_inactive)

    def get_object(self):
        return metadata_service.get_entry(self.model, self.kwargs["pk"])

    def list(self, request: Request) -> Response:
        return self.paginate_and_respond(self.get_queryset(), self.serializer_class)

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        return Response(self.serializer_class(self.get_object()).data)

    def create(self, request: Request) -> Response:
        ser = MetadataCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        entry = metadata_service.create_entry(request.user, self.model, ser.validated_data["name"])
        return Response(self.serializer_class(entry).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: int | None = None) -> Response:
        ser = MetadataWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        entry = metadata_service.update_entry(
            request.user, self.get_object(),
            name=ser.validated_data.get("name"), active=ser.validated_data.get("active"),
        )
        return Response(self.serializer_class(entry).data)

    @action(detail=True, methods=["patch"], url_path="toggle")
    def toggle(self, request: Request, pk: int | None = None) -> Response:
        entry = metadata_service.toggle_entry(request.user, self.get_object())
        return Response(self.serializer_class(entry).data)


@extend_schema_view(
    list=extend_schema(tags=["Metadata"], responses={200: CategorySerializer(many=True)}),
    retrieve=extend_schema(tags=["Metadata"], responses={200: CategorySerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Metadata"], request=MetadataCreateSerializer,
        responses={201: CategorySerializer, **AUTH_RESPONSES, **CONFLICT_RESPONSE},
    ),
    partial_update=extend_schema(
        tags=["Metadata"], request=MetadataWriteSerializer,
        responses={200: CategorySerializer, **AUTH_RESPONSES, **CONFLICT_RESPONSE},
    ),
    toggle=extend_schema(tags=["Metadata"], request=None, responses={200: CategorySerializer, **AUTH_RESPONSES}),
)
class CategoryViewSet(MetadataViewSet):
    model = Category
    serializer_class = CategorySerializer


@extend_schema_view(
    list=extend_schema(tags=["Metadata"], responses={200: DifficultySerializer(many=True)}),
    retrieve=extend_schema(tags=["Metadata"], responses={200: DifficultySerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Metadata"], request=MetadataCreateSerializer,
        responses={201: DifficultySerializer, **AUTH_RESPONSES, **CONFLICT_RESPONSE},
    ),
    partial_update=extend_schema(
        tags=["Metadata"], request=MetadataWriteSerializer,
        responses={200: DifficultySerializer, **AUTH_RESPONSES, **CONFLICT_RESPONSE},
    ),
    toggle=extend_schema(tags=["Metadata"], request=None, responses={200: DifficultySerializer, **AUTH_RESPONSES}),
)
class DifficultyViewSet(MetadataViewSet):
    model = Difficulty
    serializer_class = DifficultySerializer


# ---------- Moderation ----------
@extend_schema_view(
    list=extend_schema(
        tags=["Moderation"],
        parameters=[OpenApiParameter("status", str), OpenApiParameter("target_type", str)],
        responses={200: ReportSerializer(many=True), **AUTH_RESPONSES},
    ),
    retrieve=extend_schema(tags=["Moderation"], responses={200: ReportSerializer, **AUTH_RESPONSES}),
    create=extend_schema(
        tags=["Moderation"],
        request=ReportCreateSerializer,
        responses={201: ReportSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
    ),
    change_status=extend_schema(
        tags=["Moderation"],
        request=ReportStatusSerializer,
        responses={200: ReportSerializer, **AUTH_RESPONSES},
    ),
    execute_action=extend_schema(
        tags=["Moderation"],
        request=ReportActionSerializer,
        responses={200: ReportSerializer, **AUTH_RESPONSES, **VALIDATION_RESPONSE},
        description="warn, invalidate_submission, suspend_user or archive_course; resolves the report.",
    ),
)
class ReportViewSet(PaginationMixin, viewsets.GenericViewSet):
    """Reports are filed by any user and handled by operators."""
    serializer_class = ReportCreateSerializer
    lookup_value_regex = r"\d+"

    def get_permissions(self) -> list:
        if self.action == "create":
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsOperator()]

    def get_object(self):
        return moderation_service.get_report(self.request.user, self.kwargs["pk"])

    def list(self, request: Request) -> Response:
        qs = moderation_service.list_reports(
            request.user,
            status=request.query_params.get("status"),
            target_type=request.query_params.get("target_type"),
        )
        return self.paginate_and_respond(qs, ReportSerializer)

    def retrieve(self, request: Request, pk: int | None = None) -> Response:
        return Response(ReportSerializer(self.get_object()).data)

    def create(self, request: Request) -> Response:
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = moderation_service.file_report(request.user, **ser.validated_data)
        return Response(ReportSerializer(report).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="status")
    def change_status(self, request: Request, pk: int | None = None) -> Response:
        ser = ReportStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = moderation_service.update_status(request.user, self.get_object(), ser.validated_data["status"])
        return Response(ReportSerializer(report).data)

    @action(detail=True, methods=["post"], url_path="action")
    def execute_action(self, request: Request, pk: int | None = None) -> Response:
        report = self.get_object()
        ser = ReportActionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = moderation_service.execute_action(
            request.user, report, ser.validated_data["action"], ser.validated_data["reason"],
        )
        return Response(ReportSerializer(report).data)
