"""Request Middleware — request id, access log, and the request-level timeout.

Invariants:
    - Every response carries X-Request-ID (echoed from the request or generated),
      including 504s produced by the timeout layer
    - A request that exceeds request_timeout_seconds is cancelled and answered
      with 504 UPSTREAM_TIMEOUT; cancellation propagates into the awaiting
      DB/oracle call
    - One access-log line per request with method, path, status, duration

Design Decisions:
    - Timeout is a pure ASGI middleware: the handler runs in the same task as
      wait_for, so a timeout really cancels it (BaseHTTPMiddleware runs the
      downstream app in a separate task that would keep running)
    - If the response has already started when the timeout fires, the error
      propagates; a second response cannot be sent
"""

import asyncio
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from blood_center.core.errors import UpstreamTimeoutError

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    """Cancel the downstream app after timeout_seconds and answer 504."""

    def __init__(self, app: ASGIApp, timeout_seconds: float):
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_tracking),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            if response_started:
                raise
            error = UpstreamTimeoutError("Request", self.timeout_seconds)
            logger.error(error.message, extra={"path": scope.get("path")})
            response = JSONResponse(
                status_code=error.http_status, content=error.to_response(),
            )
            await response(scope, receive, send)


def register_request_middleware(app: FastAPI, timeout_seconds: float) -> None:
    # added first so request_context (added last) wraps it
    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=timeout_seconds)

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        started = time.perf_counter()
        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return response
