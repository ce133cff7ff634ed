# backend/bh_core/common/tests/test_error_envelope.py
import pytest
from rest_framework.test import APIRequestFactory

from bh_core.common.api.exceptions import ConflictError, api_exception_handler, build_error_envelope


def test_envelope_shape():
    req = APIRequestFactory().get("/")
    body = build_error_envelope(request=req, code="conflict", message="Nope.", details={"a": 1})
    assert set(body["error"]) == {"code", "message", "details", "request_id"}
    assert body["error"]["request_id"] == req.request_id


def test_handler_maps_conflict():
    req = APIRequestFactory().post("/")
    req.request_id = "abc123"
    resp = api_exception_handler(ConflictError("Record already has a decision."), {"request": req})
    assert resp.status_code == 409
    assert resp.data == {
        "error": {
            "code": "conflict",
            "message": "Record already has a decision.",
            "details": None,
            "request_id": "abc123",
        }
    }


def test_handler_turns_unexpected_errors_into_500():
    req = APIRequestFactory().get("/")
    resp = api_exception_handler(RuntimeError("boom"), {"request": req})
    assert resp.status_code == 500
    assert resp.data["error"]["code"] == "server_error"


@pytest.mark.django_db
def test_request_id_is_echoed(bhp_client, facility):
    resp = bhp_client.get("/api/v1/facilities/999999/", HTTP_X_REQUEST_ID="req-42")
    assert resp.status_code == 404
    assert resp["X-Request-ID"] == "req-42"
    assert resp.json()["error"]["request_id"] == "req-42"


@pytest.mark.django_db
def test_request_id_is_generated(bhp_client):
    resp = bhp_client.get("/api/v1/facilities/")
    assert resp.status_code == 200
    assert len(resp["X-Request-ID"]) == 32
