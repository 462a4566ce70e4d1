"""
Happy Thoughts API: Access Log Middleware
=========================================

What:  One access-log line per request.
How:   Times the downstream call, then logs method, path (with query string,
       so list filters like `?heartsMin=5&sortBy=hearts` are visible),
       status, duration, request id and client address.

Levels:
    5xx                    ERROR
    401 / 403              INFO     (routine auth refusals)
    other 4xx              WARNING
    everything else        INFO

Request bodies and the Authorization header are never logged: bodies carry
passwords, the header carries the access token.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from happythoughts.middleware.request_id import request_id_var

logger = logging.getLogger("happythoughts.access")

# Probe endpoints hit every few seconds
QUIET_PATHS = frozenset({"/health"})

_AUTH_REFUSALS = frozenset({401, 403})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status in _AUTH_REFUSALS:
        return logging.INFO
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _target(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        client = request.client.host if request.client else "-"
        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d in %.1fms [%s] %s",
            request.method,
            _target(request),
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            client,
        )
        return response
