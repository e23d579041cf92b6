from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.authgate.api.middlewares import setup_middlewares
from src.authgate.api.v1.router import api_router
from src.authgate.core.config import get_settings
from src.authgate.core.db import create_tables, dispose_engine
from src.authgate.core.exceptions import setup_exception_handlers
from src.authgate.core.health import setup_health_endpoint, setup_metrics
from src.authgate.core.logging import get_logger, setup_logging
from src.authgate.services.api_key_service import drain_background_tasks

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Startup: logging and optional table creation. Shutdown: flush pending writes."""
    settings = get_settings()
    setup_logging(settings.debug, service=settings.app_name)
    logger.info("Starting service", env=settings.app_env)

    if settings.database_auto_create:
        await create_tables()
        logger.info("Database tables ensured")

    yield

    await drain_background_tasks()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Sign-up, sign-in, tokens, sessions and password reset"},
    {"name": "users", "description": "User profiles and administration"},
    {"name": "api-keys", "description": "Long-lived API keys"},
    {"name": "health", "description": "Liveness and database connectivity"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Session and token authentication API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)
    setup_health_endpoint(app)
    setup_metrics(app)

    return app


app = create_app()
