"""
FastAPI application entry-point.
"""
from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_exception_handlers
from src.api.middleware import RateLimitMiddleware, RequestLoggerMiddleware
from src.api.routers import search
from src.core.config import get_settings

settings = get_settings()

_STARTED = time.monotonic()

app = FastAPI(
    title="Mock Ads Platform API",
    version="0.1.0",
    description="Google Ads API stand-in with a GAQL search engine over in-memory data",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware, enabled=settings.enable_request_logging)
if settings.simulate_rate_limiting:
    app.add_middleware(RateLimitMiddleware, probability=settings.rate_limit_probability)

register_exception_handlers(app)

app.include_router(search.router, prefix=f"/googleads/{settings.api_version}", tags=["Google Ads"])


@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _STARTED, 3),
        "environment": settings.environment,
    }
