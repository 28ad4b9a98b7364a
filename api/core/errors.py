"""
Uniform error envelope.

Every failure leaves the API as `{"error": "<message>"}`. Unhandled
exceptions and request validation failures answer HTTP 500; routing errors
raised by the framework (404/405) keep their status code.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = str(err.get("msg") or "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request."


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.info("request_invalid method=%s path=%s error=%s", request.method, request.url.path, message)
    return error_response(message)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(str(exc.detail), status_code=exc.status_code)


async def _catch_unhandled(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("request_failed method=%s path=%s", request.method, request.url.path)
        return error_response(str(exc) or exc.__class__.__name__)


def install(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.middleware("http")(_catch_unhandled)
