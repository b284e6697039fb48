import json
import logging

from django.core.checks import run_checks
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response

from LearningManagementApp.api.exceptions import envelope_exception_handler
from LearningManagementApp.api.renderers import EnvelopeJSONRenderer
from LearningManagementApp.core.errors import Conflict, ErrorCode, Forbidden


def render(data, status_code=200):
    return json.loads(EnvelopeJSONRenderer().render(data, renderer_context={"response": Response(status=status_code)}))


def test_success_payload_is_wrapped():
    assert render({"id": 1}) == {"ok": True, "data": {"id": 1}}
    assert render([1, 2]) == {"ok": True, "data": [1, 2]}


def test_enveloped_payload_passes_through():
    body = {"ok": False, "error": {"code": "x", "message": "y"}}
    assert render(body, 400) == body


def test_success_payload_with_ok_key_is_still_wrapped():
    assert render({"ok": True, "id": 3}) == {"ok": True, "data": {"ok": True, "id": 3}}
    assert render({"ok": False}, 201) == {"ok": True, "data": {"ok": False}}


def test_domain_error_carries_code_and_details():
    response = envelope_exception_handler(Conflict("dup", code=ErrorCode.DUPLICATE_NAME, details={"name": "x"}), {})
    assert response.status_code == 409
    assert response.data == {
        "ok": False,
        "error": {"code": "duplicate_name", "message": "dup", "details": {"name": "x"}},
    }


def test_forbidden_defaults():
    response = envelope_exception_handler(Forbidden(), {})
    assert response.status_code == 403
    assert response.data["error"]["code"] == ErrorCode.FORBIDDEN


def test_http404_maps_to_not_found():
    response = envelope_exception_handler(Http404(), {})
    assert response.status_code == 404
    assert response.data["error"]["code"] == ErrorCode.NOT_FOUND


def test_validation_error_details():
    response = envelope_exception_handler(exceptions.ValidationError({"title": ["required"]}), {})
    assert response.status_code == 400
    assert response.data["error"]["code"] == ErrorCode.VALIDATION_ERROR
    assert response.data["error"]["details"] == {"title": ["required"]}


def test_unexpected_error_is_logged_and_hidden(caplog):
    with caplog.at_level(logging.ERROR, logger="LearningManagementApp.api.exceptions"):
        response = envelope_exception_handler(RuntimeError("db password leaked"), {})
    assert response.status_code == 500
    assert response.data == {"ok": False, "error": {"code": "internal_error", "message": "Internal server error"}}
    assert "Unhandled error" in caplog.text


def test_envelope_system_check_passes():
    assert [e for e in run_checks() if e.id and e.id.startswith("core.")] == []
