"""Structured logging with structlog.

Request-scoped fields (request id, authenticated principal) are stored in
contextvars and merged into every event logged while the request runs.
"""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg", "uvicorn.access")


def _build_processors(debug: bool, service: str | None) -> list[structlog.typing.Processor]:
    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if service:
        processors.insert(1, _add_service(service))

    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())
    return processors


def _add_service(service: str) -> structlog.typing.Processor:
    def processor(_logger, _method: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def setup_logging(debug: bool = False, service: str | None = None) -> None:
    """Configure structlog on top of the stdlib root logger.

    Args:
        debug: Colored console output at DEBUG level. Otherwise JSON at INFO.
        service: Name attached to every event as `service`.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=_build_processors(debug, service),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Attach the correlation id of the current request to log events."""
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_principal_context(
    user_id: UUID,
    role: str,
    auth_method: str,
    email: str | None = None,
) -> None:
    """Attach the authenticated principal to log events.

    Args:
        user_id: The authenticated user's ID.
        role: The user's role at authentication time.
        auth_method: "token" or "api_key".
        email: Logged only when settings.log_user_emails is True.
    """
    from src.authgate.core.config import get_settings

    bind_contextvars(user_id=str(user_id), role=role, auth_method=auth_method)
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def clear_request_context() -> None:
    clear_contextvars()
