"""Exception handlers rendering `{"detail", "request_id"}` error bodies."""

from collections.abc import Mapping
from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.authgate.core.errors import AuthGateError
from src.authgate.core.logging import get_logger

logger = get_logger(__name__)

# 401 responses advertise the bearer scheme (RFC 6750)
_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def error_response(
    status_code: int,
    detail: Any,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """JSON error body tagged with the current request's correlation id."""
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "request_id": correlation_id.get()},
        headers=dict(headers) if headers else None,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthGateError)
    async def auth_gate_error_handler(request: Request, exc: AuthGateError) -> JSONResponse:
        headers = _BEARER_CHALLENGE if exc.status_code == 401 else None
        return error_response(exc.status_code, exc.detail, headers)

    # Also covers fastapi.HTTPException, which subclasses the Starlette one
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, exc.detail, exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
            method=request.method,
        )
        return error_response(500, "Internal server error")
