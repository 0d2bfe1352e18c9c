"""Middleware that tags each request with an ID for logs and responses."""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...logging_setup import REQUEST_ID_CONTEXT

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Honour an incoming ``X-Request-ID`` or mint one, and echo it back."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = (request.headers.get(REQUEST_ID_HEADER) or "").strip() or uuid.uuid4().hex
        token = REQUEST_ID_CONTEXT.set(request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            REQUEST_ID_CONTEXT.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
