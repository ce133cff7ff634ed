# backend/bh_core/common/api/exceptions.py
from __future__ import annotations

import uuid
from typing import Any

import structlog
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotAuthenticated, NotFound, PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = structlog.get_logger(__name__)

GENERIC_MESSAGE = "Request failed."


class ConflictError(APIException):
    """
    409: the record exists and the actor may act on it, but its current state forbids the action
    (illegal lifecycle transition, lost decision race, duplicate drill report, inactive facility).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"

    def __init__(self, detail=None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)


# Order matters: NotFound must win over the generic APIException branch.
ERROR_CODES: tuple[tuple[type[Exception] | tuple[type[Exception], ...], str], ...] = (
    (ValidationError, "validation_error"),
    (NotAuthenticated, "not_authenticated"),
    (PermissionDenied, "permission_denied"),
    ((Http404, NotFound), "not_found"),
    (ConflictError, "conflict"),
)


def ensure_request_id(request) -> str:
    """
    Returns request.request_id, generating one if the middleware did not run.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(*, request=None, code: str, message: str, details: Any = None) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "request_id": ensure_request_id(request),
        }
    }


def error_code_for(exc: Exception, http_status: int) -> str:
    for exc_types, code in ERROR_CODES:
        if isinstance(exc, exc_types):
            return code
    if isinstance(exc, APIException):
        return exc.default_code or "api_error"
    return "server_error" if http_status >= 500 else "error"


def split_message(data: Any) -> tuple[str, Any]:
    """
    DRF error payload -> (message, details).

    {"detail": "x"}            -> ("x", None)
    {"detail": "x", "k": ...}  -> ("x", {"k": ...})
    ["x"]                      -> ("x", None)
    {"field": [...]}           -> (GENERIC_MESSAGE, {"field": [...]})
    """
    if isinstance(data, dict) and "detail" in data:
        rest = {k: v for k, v in data.items() if k != "detail"}
        return str(data["detail"]), rest or None
    if isinstance(data, list) and len(data) == 1:
        return str(data[0]), None
    return GENERIC_MESSAGE, data


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    if response is None:
        logger.exception("api.unhandled_error", request_id=ensure_request_id(request))
        envelope = build_error_envelope(request=request, code="server_error", message="Unexpected server error.")
        return Response(envelope, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    code = error_code_for(exc, response.status_code)
    message, details = split_message(response.data)

    log = logger.error if response.status_code >= 500 else logger.info
    log("api.rejected", code=code, status=response.status_code)

    return Response(
        build_error_envelope(request=request, code=code, message=message, details=details),
        status=response.status_code,
        headers=response.headers,
    )
