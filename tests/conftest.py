"""Root test fixtures shared across all test types.

This conftest sets the environment every test relies on. Database fixtures
are in tests/integration/conftest.py.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./authgate-test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-authgate-suite-0123456789")
# Cheap hashing keeps the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from src.authgate.core.config import get_settings
from src.authgate.core.security import get_password_hasher

# Clear caches to ensure test environment variables are picked up
get_settings.cache_clear()
get_password_hasher.cache_clear()
