"""
storefront_admin.observability.middleware

Request context and access logging.

Responsibilities:
- Accept a caller's `x-request-id` or mint one, and echo it on the response.
- Bind request metadata into structlog contextvars for every log line the
  request produces (gate decisions, sign-in events, backend warnings).
- Emit one `http.request` line per request with status and latency.
"""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from storefront_admin.observability.logging import get_logger

REQUEST_ID_HEADER = "x-request-id"

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
            client_ip=request.client.host if request.client else None,
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            # Redirects are the gate's normal answer, not failures.
            log.info(
                "http.request",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                location=response.headers.get("location"),
            )
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Registered outermost in `api.app.create_app` so the route guard's log lines
# already carry request_id/path/method.
