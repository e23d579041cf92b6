"""Security utilities - password hashing, bearer tokens, opaque secrets.

Re-exports all security-related helpers for convenience.
"""

from src.authgate.core.security.crypto import (
    generate_api_key,
    generate_reset_token,
    hash_token,
    token_hashes_match,
)
from src.authgate.core.security.passwords import PasswordHasher, get_password_hasher
from src.authgate.core.security.tokens import (
    TokenClaims,
    TokenCodec,
    TokenExpiredError,
    TokenSignatureError,
    TokenType,
    TokenVerificationError,
)

__all__ = [
    # Crypto
    "generate_api_key",
    "generate_reset_token",
    "hash_token",
    "token_hashes_match",
    # Passwords
    "PasswordHasher",
    "get_password_hasher",
    # Tokens
    "TokenClaims",
    "TokenCodec",
    "TokenExpiredError",
    "TokenSignatureError",
    "TokenType",
    "TokenVerificationError",
]
