"""Core app configuration and startup checks (response envelope wiring)."""

from django.apps import AppConfig
from django.conf import settings
from django.core.checks import register, Error

ENVELOPE_RENDERER = "LearningManagementApp.api.renderers.EnvelopeJSONRenderer"
ENVELOPE_HANDLER = "LearningManagementApp.api.exceptions.envelope_exception_handler"


class CoreConfig(AppConfig):
    """AppConfig registering a system check for the API envelope configuration."""
    default_auto_field = "django.db.models.BigAutoField"
    name = "LearningManagementApp.core"

    def ready(self):
        """Register a Django system check ensuring every API response is enveloped."""
        @register()
        def envelope_check(app_configs, **kwargs):
            rf = getattr(settings, "REST_FRAMEWORK", {})
            errors = []
            if rf.get("EXCEPTION_HANDLER") != ENVELOPE_HANDLER:
                errors.append(Error(
                    f"REST_FRAMEWORK['EXCEPTION_HANDLER'] must be {ENVELOPE_HANDLER}",
                    id="core.E001",
                ))
            if ENVELOPE_RENDERER not in rf.get("DEFAULT_RENDERER_CLASSES", ()):
                errors.append(Error(
                    f"REST_FRAMEWORK['DEFAULT_RENDERER_CLASSES'] must include {ENVELOPE_RENDERER}",
                    id="core.E002",
                ))
            return errors
