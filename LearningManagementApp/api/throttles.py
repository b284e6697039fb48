"""API throttling classes."""

from rest_framework.throttling import UserRateThrottle


class SubmissionRateThrottle(UserRateThrottle):
    """Throttle limiting submission create requests per user (rate from ``LMS_SUBMISSION_RATE``)."""
    scope = "submission_create"

    def allow_request(self, request, view):
        if request.method != "POST":
            return True
        return super().allow_request(request, view)
