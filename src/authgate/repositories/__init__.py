"""Repository layer - data access abstraction."""

from src.authgate.repositories.api_key_repository import ApiKeyRepository
from src.authgate.repositories.base import BaseRepository
from src.authgate.repositories.password_reset_repository import PasswordResetTokenRepository
from src.authgate.repositories.session_repository import SessionRepository
from src.authgate.repositories.user_repository import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Entities
    "ApiKeyRepository",
    "PasswordResetTokenRepository",
    "SessionRepository",
    "UserRepository",
]
