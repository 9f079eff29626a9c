"""HTTP middleware for the plan API."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Awaitable, Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from planscope.core.context import REQUEST_ID_HEADER, request_scope

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, taken from the incoming header or freshly minted."""

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = perf_counter()

        with request_scope(request_id):
            response = await call_next(request)
            logger.debug(
                "%s %s -> %d in %.1f ms",
                request.method,
                request.url.path,
                response.status_code,
                (perf_counter() - started) * 1000,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
