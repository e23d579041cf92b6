"""Cryptographic helpers - opaque secret generation and one-way token hashing."""

import hmac
import secrets
from hashlib import sha256


def hash_token(token: str) -> str:
    """Hash a token using SHA256 for secure storage."""
    return sha256(token.encode()).hexdigest()


def token_hashes_match(expected_hash: str, token: str) -> bool:
    """Constant-time check that `token` hashes to `expected_hash`."""
    return hmac.compare_digest(expected_hash, hash_token(token))


def generate_reset_token() -> str:
    """Generate a high-entropy password reset token (64 hex chars)."""
    return secrets.token_hex(32)


def generate_api_key(prefix: str) -> str:
    """Generate a raw API key: prefix followed by 32 random bytes, url-safe encoded."""
    return f"{prefix}{secrets.token_urlsafe(32)}"
