"""CORS, request IDs, rate limiting, and security headers middleware."""

import time
import uuid
from collections import defaultdict, deque
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from thinktank_api.core.config import Settings

_DEFAULT_TRUSTED_HEADERS = ["CF-Connecting-IP", "X-Forwarded-For", "X-Real-IP"]

REQUEST_ID_HEADER = "X-Request-ID"

_WINDOW_SECONDS = 60.0

_DEFAULT_EXEMPT_PATHS = ["/api/v1/health"]


def get_client_ip(request: Request, trusted_headers: list[str] | None = None) -> str:
    """Extract the caller's IP from trusted proxy headers or the socket peer.

    Args:
        request: The incoming request.
        trusted_headers: Header names to check in order. Defaults to
            CF-Connecting-IP, X-Forwarded-For, X-Real-IP.

    Returns:
        The client IP, or "unknown".
    """
    headers = trusted_headers if trusted_headers is not None else _DEFAULT_TRUSTED_HEADERS
    for header in headers:
        value = request.headers.get(header, "").strip()
        if not value:
            continue
        # Leftmost entry is the original client.
        if header.lower() == "x-forwarded-for":
            return value.split(",")[0].strip()
        return value
    return request.client.host if request.client else "unknown"


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS for the site's front-end origins."""
    kwargs: dict[str, Any] = {
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": ["Authorization", "Content-Type", REQUEST_ID_HEADER],
        "expose_headers": [REQUEST_ID_HEADER],
    }
    if settings.cors_origin_list:
        kwargs["allow_origins"] = settings.cors_origin_list
    if settings.cors_origin_regex.strip():
        kwargs["allow_origin_regex"] = settings.cors_origin_regex.strip()
    app.add_middleware(CORSMiddleware, **kwargs)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and emit one structured access log record.

    The ID is taken from ``X-Request-ID`` when the caller sends one, bound to
    every log record written while handling the request, and echoed back.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)
            logger.bind(json_output=True).info(
                "request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add browser hardening headers to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP sliding-window rate limit held in memory.

    Requests whose path exactly matches one of ``exempt_paths`` (the health
    check by default) are never limited.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 200,
        trusted_proxy_headers: list[str] | None = None,
        exempt_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.exempt_paths = frozenset(exempt_paths if exempt_paths is not None else _DEFAULT_EXEMPT_PATHS)
        self.requests_per_minute = requests_per_minute
        self.trusted_proxy_headers = trusted_proxy_headers
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = get_client_ip(request, self.trusted_proxy_headers)
        now = time.monotonic()
        hits = self._hits[client_ip]
        while hits and hits[0] <= now - _WINDOW_SECONDS:
            hits.popleft()

        if len(hits) >= self.requests_per_minute:
            retry_after = max(1, int(_WINDOW_SECONDS - (now - hits[0])))
            logger.warning(f"Rate limit exceeded for {client_ip}")
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded"},
                headers={"Retry-After": str(retry_after)},
            )

        hits.append(now)
        return await call_next(request)
