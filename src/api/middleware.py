"""
HTTP middleware: request logging with credential redaction, and simulated rate limiting.
"""
from __future__ import annotations

import json
import random
import time
from typing import Any, Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.errors import error_body
from src.core.logging import get_logger

logger = get_logger(__name__)

REDACTED_HEADERS = {"authorization": "Bearer ***", "ttd-auth": "***"}
REDACTED_BODY_FIELDS = ("client_secret", "Password", "access_token")

RETRY_AFTER_SECONDS = 60


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    return {k: REDACTED_HEADERS.get(k.lower(), v) for k, v in headers.items()}


def redact_body(body: Any) -> Any:
    if not isinstance(body, dict):
        return body
    return {k: "***" if k in REDACTED_BODY_FIELDS else v for k, v in body.items()}


def _decode_body(raw: bytes) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw.decode("utf-8", errors="replace")


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Log each request line, its redacted headers and body, then status and duration."""

    def __init__(self, app: ASGIApp, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled

    async def dispatch(self, request: Request, call_next: Callable):
        if not self.enabled:
            return await call_next(request)

        start = time.perf_counter()
        method, path = request.method, request.url.path
        logger.info("%s %s", method, path)
        logger.info("Headers: %s", json.dumps(redact_headers(dict(request.headers))))

        body = _decode_body(await request.body())
        if body:
            logger.info("Body: %s", json.dumps(redact_body(body)))

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s %d - %.0fms", method, path, response.status_code, elapsed_ms)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject a random share of requests with 429, the way a throttled API would."""

    def __init__(self, app: ASGIApp, probability: float = 0.1):
        super().__init__(app)
        self.probability = probability

    async def dispatch(self, request: Request, call_next: Callable):
        if random.random() < self.probability:
            logger.warning("Simulated rate limit on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=429,
                content=error_body(429, "RATE_LIMIT_EXCEEDED", "Too many requests. Please try again later."),
                headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
            )
        return await call_next(request)
