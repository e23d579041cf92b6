"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, UserSessionFactory, ...
"""

from tests.factories.auth import ApiKeyFactory, PasswordResetTokenFactory, UserSessionFactory
from tests.factories.base import BaseFactory, generate_token_hash, generate_uuid7, utc_now
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_token_hash",
    "generate_uuid7",
    "utc_now",
    # User
    "DEFAULT_TEST_PASSWORD",
    "UserFactory",
    # Auth
    "ApiKeyFactory",
    "PasswordResetTokenFactory",
    "UserSessionFactory",
]
