from django.apps import AppConfig

class ModerationConfig(AppConfig):
    """AppConfig for operator moderation (reports and audit log)."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "LearningManagementApp.moderation"
    label = "moderation"
