# backend/bh_core/common/middleware.py
from __future__ import annotations

import structlog

from bh_core.common.api.exceptions import ensure_request_id

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:
    """
    Attaches request.request_id (from X-Request-ID or freshly generated),
    binds it into the structlog context, and echoes it on the response.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming:
            request.request_id = incoming[:64]
        rid = ensure_request_id(request)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=rid)
        try:
            response = self.get_response(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response[REQUEST_ID_HEADER] = rid
        return response
