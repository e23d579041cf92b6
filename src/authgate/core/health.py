"""Health and metrics endpoints."""

import secrets
import time
from typing import Any

from fastapi import Depends, FastAPI, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from src.authgate.core.config import get_settings
from src.authgate.core.db import get_session
from src.authgate.core.errors import UnauthenticatedError
from src.authgate.core.logging import get_logger

logger = get_logger(__name__)


async def probe_database() -> tuple[bool, float]:
    """Run `SELECT 1`. Returns (ok, elapsed milliseconds)."""
    started = time.perf_counter()
    try:
        async with get_session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Health check database probe failed", error=str(e))
        return False, (time.perf_counter() - started) * 1000
    return True, (time.perf_counter() - started) * 1000


def setup_health_endpoint(app: FastAPI) -> None:
    """Register GET /health. Answers 503 when the database is unreachable."""

    @app.get("/health", tags=["health"])
    async def health() -> JSONResponse:
        ok, elapsed_ms = await probe_database()
        body: dict[str, Any] = {
            "status": "healthy" if ok else "unhealthy",
            "database": "healthy" if ok else "unhealthy",
            "database_latency_ms": round(elapsed_ms, 1),
        }
        return JSONResponse(
            content=body,
            status_code=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        )


def _metrics_key_guard(expected: str):
    header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(provided: str | None = Depends(header)) -> None:
        if provided is None or not secrets.compare_digest(provided, expected):
            raise UnauthenticatedError("Invalid or missing metrics API key")

    return verify_metrics_key


def setup_metrics(app: FastAPI) -> None:
    """Instrument the app and expose /metrics, key-protected when METRICS_API_KEY is set."""
    settings = get_settings()
    instrumentator = Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app)

    dependencies = []
    if settings.metrics_api_key:
        dependencies.append(Depends(_metrics_key_guard(settings.metrics_api_key)))
    instrumentator.expose(
        app,
        endpoint="/metrics",
        include_in_schema=False,
        dependencies=dependencies,
    )
