"""Request ID propagation and per-route latency metrics"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from starling_spend.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128
UNMATCHED_ROUTE = "unmatched"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID when sensible, otherwise mint one"""

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def route_label(request: Request) -> str:
    """Matched route template, so query strings and unknown paths don't explode label cardinality"""
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ROUTE)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request latency labelled by route template"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)

        request_duration_histogram.labels(
            method=request.method,
            endpoint=route_label(request),
            status=response.status_code,
        ).observe(time.perf_counter() - start_time)

        return response
