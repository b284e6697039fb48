"""Validation helpers for submission links and free-text fields."""

from urllib.parse import urlparse
from django.conf import settings
from django.core.exceptions import ValidationError

ALLOWED_LINK_SCHEMES: set[str] = {"http", "https"}

MIN_ACTION_REASON_LENGTH = 10


def validate_submission_link(url: str) -> None:
    """Ensure a submission link is an absolute http(s) URL on an allowed domain.

    ``SUBMISSION_LINK_DOMAINS`` (settings) restricts the host suffix; empty means any host.
    """
    if not url:
        return
    result = urlparse(url)
    if result.scheme not in ALLOWED_LINK_SCHEMES or not result.netloc:
        raise ValidationError("Link must be an absolute http(s) URL.")
    allowed = getattr(settings, "SUBMISSION_LINK_DOMAINS", [])
    if allowed and not any(result.netloc.endswith(d) for d in allowed):
        raise ValidationError("Link domain not allowed.")


def validate_not_blank(value: str) -> None:
    if not (value or "").strip():
        raise ValidationError("This field may not be blank.")


def validate_action_reason(value: str) -> None:
    if len((value or "").strip()) < MIN_ACTION_REASON_LENGTH:
        raise ValidationError(f"Reason must be at least {MIN_ACTION_REASON_LENGTH} characters.")
