"""API middleware: correlation ID and request logging."""

import json
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from audit_trail.core.context import caller_service_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
SERVICE_NAME_HEADER = "X-Service-Name"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; expose it and the caller service to handlers and log lines."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)
        caller_service_ctx.set(request.headers.get(SERVICE_NAME_HEADER))

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class RequestLogMiddleware(BaseHTTPMiddleware):
    """After response: log one structured line (caller service, path, method, status_code, duration)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        request_event = {
            "event": "request_completed",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "caller": request.headers.get(SERVICE_NAME_HEADER),
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }
        logger.info(json.dumps(request_event))
        return response
