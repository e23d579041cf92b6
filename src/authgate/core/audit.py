"""Audit events - security-relevant actions recorded through structlog.

Emitting an audit record never raises into the audited operation.
"""

import contextlib
from typing import Any
from uuid import UUID

from src.authgate.core.logging import get_logger

logger = get_logger("authgate.audit")


def audit_event(event: str, **fields: Any) -> None:
    """Record an audit event.

    Args:
        event: Dotted event name, e.g. "user.signed_in" or "session.revoked"
        **fields: Event attributes (ids are stringified)
    """
    with contextlib.suppress(Exception):
        payload = {
            key: str(value) if isinstance(value, UUID) else value for key, value in fields.items()
        }
        logger.info(event, audit=True, **payload)
