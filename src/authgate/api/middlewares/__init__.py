"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.authgate.core.config import Settings

from .logging_context import logging_context_middleware

__all__ = ["logging_context_middleware", "setup_middlewares"]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Register middlewares. The last one added runs first on a request."""
    # Logging context - binds request_id and logs request timing
    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-API-Key", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Correlation ID - reads or assigns X-Request-ID; outermost so the id is
    # bound before the logging context middleware runs
    app.add_middleware(CorrelationIdMiddleware)
