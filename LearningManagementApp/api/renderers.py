"""JSON renderer that wraps successful payloads in the response envelope."""

from rest_framework.renderers import JSONRenderer


class EnvelopeJSONRenderer(JSONRenderer):
    """Render ``{"ok": true, "data": ...}`` for every success status.

    Error responses are already enveloped by the exception handler and are
    passed through untouched; any other error body is wrapped as a generic
    error.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = (renderer_context or {}).get("response")
        if response is None or response.status_code < 400:
            body = {"ok": True, "data": data}
        elif isinstance(data, dict) and data.get("ok") is False:
            body = data
        else:
            body = {"ok": False, "error": {"code": "error", "message": str(data)}}
        return super().render(body, accepted_media_type, renderer_context)
