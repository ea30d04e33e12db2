"""
Exception handlers -- every failure leaves the API in the Google-style error envelope.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.gaql.errors import QueryEngineError
from src.core.logging import get_logger

logger = get_logger(__name__)


def error_body(code: int, status: str, message: str) -> dict:
    return {"error": {"code": code, "message": message, "status": status}}


def _describe(errors: list[dict]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request body"


async def query_engine_error_handler(request: Request, exc: QueryEngineError):
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.reason, exc.message)
    return JSONResponse(status_code=exc.code, content=exc.to_response())


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    message = _describe(exc.errors())
    logger.warning("%s %s -> invalid request body: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content=error_body(400, "INVALID_ARGUMENT", message))


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        body = error_body(404, "NOT_FOUND", f"Route {request.method} {request.url.path} not found")
    elif exc.status_code >= 500:
        body = error_body(exc.status_code, "INTERNAL_ERROR", str(exc.detail or "Internal server error"))
    else:
        body = error_body(exc.status_code, "INVALID_ARGUMENT", str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body(500, "INTERNAL_ERROR", "Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QueryEngineError, query_engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
