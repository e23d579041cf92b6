"""Database utilities - engine and session."""

from src.authgate.core.db.engine import create_tables, dispose_engine, get_engine
from src.authgate.core.db.session import get_session, get_session_factory

__all__ = [
    # Engine
    "create_tables",
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    "get_session_factory",
]
