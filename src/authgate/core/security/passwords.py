"""Password hashing - Argon2id with an explicit per-password salt."""

import asyncio
import secrets
from functools import lru_cache

import argon2

from src.authgate.core.config import get_settings

SALT_BYTES = 16


class PasswordHasher:
    """Salted adaptive password hashing.

    `hash` returns the salt alongside the encoded digest so the salt can be
    stored in its own column; the digest also embeds it, so `verify` only
    needs the digest.

    Hashing is CPU-bound. Request handlers must use the `*_async` variants,
    which run in a worker thread and keep the event loop free.
    """

    def __init__(self, time_cost: int, memory_cost: int, parallelism: int):
        self._hasher = argon2.PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        # Verified against when an account does not exist, so "unknown user"
        # costs the same as "wrong password".
        self._dummy_digest = self._hasher.hash(secrets.token_urlsafe(16))

    def hash(self, plaintext: str) -> tuple[str, str]:
        """Hash a password. Returns (salt as hex, encoded digest)."""
        salt = secrets.token_bytes(SALT_BYTES)
        digest = self._hasher.hash(plaintext, salt=salt)
        return salt.hex(), digest

    def verify(self, plaintext: str, digest: str) -> bool:
        """Verify password against digest. Returns False on any error."""
        try:
            return self._hasher.verify(digest, plaintext)
        except argon2.exceptions.VerificationError:
            return False
        except argon2.exceptions.InvalidHashError:
            return False

    def verify_dummy(self, plaintext: str) -> bool:
        """Burn the same CPU as a real verification. Always returns False."""
        self.verify(plaintext, self._dummy_digest)
        return False

    async def hash_async(self, plaintext: str) -> tuple[str, str]:
        return await asyncio.to_thread(self.hash, plaintext)

    async def verify_async(self, plaintext: str, digest: str | None) -> bool:
        if digest is None:
            return await asyncio.to_thread(self.verify_dummy, plaintext)
        return await asyncio.to_thread(self.verify, plaintext, digest)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Process-wide hasher built from settings."""
    settings = get_settings()
    return PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )
