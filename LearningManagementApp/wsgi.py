"""WSGI entry point.

``create_application`` builds a fresh handler; ``application`` is the
instance used by WSGI servers.
"""
import os

from django.core.handlers.wsgi import WSGIHandler
from django.core.wsgi import get_wsgi_application

DEFAULT_SETTINGS_MODULE = "LearningManagementApp.settings"


def create_application(settings_module: str = DEFAULT_SETTINGS_MODULE) -> WSGIHandler:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", settings_module)
    return get_wsgi_application()


application = create_application()
