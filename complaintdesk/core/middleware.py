# complaintdesk/core/middleware.py
"""
Core middleware registration for the FastAPI application.

Request IDs are propagated into the logging context so every record
written while serving a request carries the same id.
"""
from __future__ import annotations

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from complaintdesk.core.logging import get_logger, request_id as request_id_context

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to each incoming request.

    The request ID is stored in request.state.request_id, bound to the
    logging context and echoed in the X-Request-ID response header.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = req_id
        token = request_id_context.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_context.reset(token)

        response.headers[self.header_name] = req_id
        return response


class TimingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its processing time and sets X-Process-Time."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request processing failed: {exc}",
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "method": request.method,
                    "url": str(request.url.path),
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "method": request.method,
                "url": str(request.url.path),
                "status_code": response.status_code,
                "process_time": f"{process_time:.4f}s",
                "client_host": request.client.host if request.client else None,
            },
        )
        return response


def register_middlewares(app: FastAPI) -> None:
    """
    Register core middlewares.

    Middlewares run in reverse order of registration, so RequestIDMiddleware
    (added last) runs first.
    """
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
