from django.apps import AppConfig

class CoursesConfig(AppConfig):
    """AppConfig for the catalog domain (courses, metadata, enrollments)."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "LearningManagementApp.courses"
    label = "courses"
