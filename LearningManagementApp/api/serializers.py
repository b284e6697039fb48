from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.utils import timezone
from rest_framework import serializers

from LearningManagementApp.courses.models import Category, Course, Difficulty, Enrollment
from LearningManagementApp.learning.models import Assignment, Grade, Submission
from LearningManagementApp.moderation.models import Report
from LearningManagementApp.core.access import is_owner
from LearningManagementApp.core.choices import (
    AssignmentStatus,
    CourseStatus,
    ModerationAction,
    ReportStatus,
    UserRole,
)
from LearningManagementApp.core.validators import validate_action_reason, validate_not_blank, validate_submission_link
from LearningManagementApp.domain.rules.transitions import next_assignment_statuses, next_course_statuses

User = get_user_model()

SIGNUP_ROLES = [(UserRole.LEARNER.value, UserRole.LEARNER.label), (UserRole.INSTRUCTOR.value, UserRole.INSTRUCTOR.label)]


# ---------- Users ----------
class SignupSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8, help_text="User password (write-only).")
    role = serializers.ChoiceField(choices=SIGNUP_ROLES, help_text="learner or instructor; operators are provisioned.")
    terms_accepted = serializers.BooleanField(write_only=True)

    class Meta:
        model = User
        fields = ["id", "email", "password", "name", "phone", "role", "terms_accepted"]
        extra_kwargs = {"name": {"required": True, "allow_blank": False}}

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate_terms_accepted(self, value):
        if not value:
            raise serializers.ValidationError("Terms must be accepted.")
        return value

    def create(self, validated):
        validated.pop("terms_accepted")
        user = User(
            email=validated["email"],
            username=validated["email"],
            name=validated["name"],
            phone=validated.get("phone", ""),
            role=validated["role"],
            terms_accepted_at=timezone.now(),
        )
        user.set_password(validated["password"])
        user.save()
        return user


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name", "phone", "role"]


class UserMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "name", "email"]


# ---------- Metadata ----------
class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "active", "created_at"]
        read_only_fields = ["id", "created_at"]


class DifficultySerializer(serializers.ModelSerializer):
    class Meta:
        model = Difficulty
        fields = ["id", "name", "active", "created_at"]
        read_only_fields = ["id", "created_at"]


class MetadataWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50, required=False, validators=[validate_not_blank])
    active = serializers.BooleanField(required=False)


class MetadataCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50, validators=[validate_not_blank])


# ---------- Courses ----------
class CourseWriteSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all(), required=False, allow_null=True)
    difficulty = serializers.PrimaryKeyRelatedField(queryset=Difficulty.objects.all(), required=False, allow_null=True)

    class Meta:
        model = Course
        fields = ["title", "description", "category", "difficulty", "curriculum"]
        extra_kwargs = {
            "title": {"help_text": "Course title.", "validators": [validate_not_blank]},
            "curriculum": {"help_text": "Free-form syllabus."},
        }


class CourseReadSerializer(serializers.ModelSerializer):
    instructor = UserMiniSerializer(read_only=True)
    category = CategorySerializer(read_only=True)
    difficulty = DifficultySerializer(read_only=True)
    enrolled_count = serializers.SerializerMethodField()
    next_statuses = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = [
            "id", "title", "description", "category", "difficulty", "curriculum", "status",
            "instructor", "enrolled_count", "next_statuses", "created_at", "updated_at",
        ]

    def get_enrolled_count(self, obj) -> int:
        count = getattr(obj, "enrolled_count", None)
        return count if count is not None else obj.enrollments.count()

    def get_next_statuses(self, obj) -> list[str]:
        """Reachable statuses, only shown to the owning instructor."""
        request = self.context.get("request")
        if not request or not is_owner(request.user, obj):
            return []
        return next_course_statuses(obj.status, self.get_enrolled_count(obj))


class CourseStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CourseStatus.choices)


# ---------- Assignments ----------
class AssignmentWriteSerializer(serializers.ModelSerializer):
    weight = serializers.IntegerField(min_value=0, max_value=100, required=False, allow_null=True)

    class Meta:
        model = Assignment
        fields = ["title", "description", "due_date", "weight", "allow_late", "allow_resubmission"]
        extra_kwargs = {
            "title": {"validators": [validate_not_blank]},
            "due_date": {"help_text": "Deadline (ISO 8601). Required before publishing."},
            "weight": {"help_text": "Share of the course total, 0-100. Required before publishing."},
        }


class AssignmentReadSerializer(serializers.ModelSerializer):
    next_statuses = serializers.SerializerMethodField()

    class Meta:
        model = Assignment
        fields = [
            "id", "course", "title", "description", "due_date", "weight", "allow_late",
            "allow_resubmission", "status", "next_statuses", "created_at", "updated_at",
        ]

    def get_next_statuses(self, obj) -> list[str]:
        return next_assignment_statuses(obj.status)


class LearnerAssignmentSerializer(serializers.Serializer):
    """An assignment as a learner sees it, plus their own submission status."""

    def to_representation(self, instance):
        data = AssignmentReadSerializer(instance.assignment).data
        data.pop("next_statuses")
        data["submission_status"] = instance.submission_status
        return data


class AssignmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AssignmentStatus.choices)


# ---------- Submissions & grades ----------
class GradeSerializer(serializers.ModelSerializer):
    graded_by = UserMiniSerializer(read_only=True)

    class Meta:
        model = Grade
        fields = ["id", "submission", "score", "feedback", "graded_by", "graded_at"]
        read_only_fields = fields


class SubmissionWriteSerializer(serializers.Serializer):
    text = serializers.CharField(validators=[validate_not_blank], help_text="Submission body.")
    link = serializers.URLField(
        required=False,
        allow_blank=True,
        validators=[validate_submission_link],
        help_text="Optional http(s) link to external work.",
    )


class SubmissionReadSerializer(serializers.ModelSerializer):
    learner = UserMiniSerializer(read_only=True)
    grade = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = ["id", "assignment", "learner", "text", "link", "status", "late", "submitted_at", "updated_at", "grade"]
        read_only_fields = fields

    def get_grade(self, obj) -> dict | None:
        grade = obj.current_grade()
        return GradeSerializer(grade).data if grade else None


class SubmissionRowSerializer(serializers.Serializer):
    learner = UserMiniSerializer()
    submission_status = serializers.CharField()
    submission = SubmissionReadSerializer(allow_null=True)


class GradeWriteSerializer(serializers.Serializer):
    score = serializers.IntegerField(help_text="0-100.")
    feedback = serializers.CharField(validators=[validate_not_blank])


class ResubmissionRequestSerializer(serializers.Serializer):
    feedback = serializers.CharField(validators=[validate_not_blank])
    score = serializers.IntegerField(required=False, allow_null=True, help_text="Optional, 0-100.")


class GradedItemSerializer(serializers.Serializer):
    assignment_id = serializers.IntegerField()
    title = serializers.CharField()
    weight = serializers.IntegerField()
    status = serializers.CharField(source="progress_status")
    score = serializers.IntegerField(allow_null=True)
    feedback = serializers.CharField(allow_null=True)
    late = serializers.BooleanField()
    submitted_at = serializers.DateTimeField(allow_null=True)
    graded_at = serializers.DateTimeField(allow_null=True)


class CourseGradeBookSerializer(serializers.Serializer):
    course_id = serializers.IntegerField(source="course.id")
    course_title = serializers.CharField(source="course.title")
    total_score = serializers.FloatField(source="grade.total_score")
    max_score = serializers.IntegerField(source="grade.max_score")
    assignments = GradedItemSerializer(source="grade.items", many=True)


# ---------- Enrollment ----------
class EnrollmentCreateSerializer(serializers.Serializer):
    course_id = serializers.IntegerField()


class EnrollmentSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source="course.title", read_only=True)

    class Meta:
        model = Enrollment
        fields = ["id", "course", "course_title", "enrolled_at"]
        read_only_fields = fields


class EnrollmentStatusSerializer(serializers.Serializer):
    course_id = serializers.IntegerField()
    is_enrolled = serializers.BooleanField()
    enrolled_at = serializers.DateTimeField(allow_null=True)


# ---------- Dashboards ----------
class CourseProgressSerializer(serializers.Serializer):
    course_id = serializers.IntegerField(source="course.id")
    title = serializers.CharField(source="course.title")
    status = serializers.CharField(source="course.status")
    total_assignments = serializers.IntegerField()
    completed_assignments = serializers.IntegerField()
    progress = serializers.IntegerField()


class UpcomingAssignmentSerializer(serializers.Serializer):
    assignment_id = serializers.IntegerField(source="assignment.id")
    title = serializers.CharField(source="assignment.title")
    course_id = serializers.IntegerField(source="assignment.course_id")
    course_title = serializers.CharField(source="assignment.course.title")
    due_date = serializers.DateTimeField(source="assignment.due_date")
    due_in_hours = serializers.IntegerField()
    submission_status = serializers.CharField()


class FeedbackItemSerializer(serializers.Serializer):
    submission_id = serializers.IntegerField(source="submission.id")
    assignment_title = serializers.CharField(source="submission.assignment.title")
    course_title = serializers.CharField(source="submission.assignment.course.title")
    status = serializers.CharField(source="submission.status")
    score = serializers.IntegerField(allow_null=True)
    feedback = serializers.CharField()
    graded_at = serializers.DateTimeField()


class LearnerDashboardSerializer(serializers.Serializer):
    courses = CourseProgressSerializer(many=True)
    upcoming = UpcomingAssignmentSerializer(many=True)
    recent_feedback = FeedbackItemSerializer(many=True)


class InstructorCourseSerializer(serializers.ModelSerializer):
    enrolled_count = serializers.IntegerField()
    assignment_count = serializers.IntegerField()

    class Meta:
        model = Course
        fields = ["id", "title", "status", "enrolled_count", "assignment_count", "updated_at"]


class RecentSubmissionSerializer(serializers.ModelSerializer):
    learner = UserMiniSerializer()
    assignment_title = serializers.CharField(source="assignment.title")
    course_title = serializers.CharField(source="assignment.course.title")

    class Meta:
        model = Submission
        fields = ["id", "assignment", "assignment_title", "course_title", "learner", "status", "late", "submitted_at"]


class InstructorDashboardSerializer(serializers.Serializer):
    courses = InstructorCourseSerializer(many=True)
    pending_count = serializers.IntegerField()
    recent_submissions = RecentSubmissionSerializer(many=True)


# ---------- Moderation ----------
class ReportCreateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Report
        fields = ["target_type", "target_id", "reason", "content"]


class ReportSerializer(serializers.ModelSerializer):
    reporter = UserMiniSerializer(read_only=True)

    class Meta:
        model = Report
        fields = [
            "id", "target_type", "target_id", "reporter", "reason", "content", "status",
            "action_taken", "action_reason", "created_at", "resolved_at",
        ]
        read_only_fields = fields


class ReportStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReportStatus.choices)


class ReportActionSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ModerationAction.choices)
    reason = serializers.CharField(validators=[validate_action_reason])
