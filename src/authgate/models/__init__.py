"""Model exports.

Import from here: `from src.authgate.models import User, UserSession`
"""

from src.authgate.models.auth import ApiKey, PasswordResetToken, UserSession
from src.authgate.models.enums import UserRole
from src.authgate.models.user import User

__all__ = [
    # Enums
    "UserRole",
    # Models
    "ApiKey",
    "PasswordResetToken",
    "User",
    "UserSession",
]
