"""Bearer token codec - signed, expiring JWTs carrying the session claim set."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import UUID, uuid7

from jose import ExpiredSignatureError, JWTError, jwt

from src.authgate.core.config import Settings


class TokenType(str, Enum):
    """Bearer token kinds. Never interchangeable."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenVerificationError(Exception):
    """Token could not be verified."""


class TokenExpiredError(TokenVerificationError):
    """Token signature is valid but its expiry has passed."""


class TokenSignatureError(TokenVerificationError):
    """Token is malformed, tampered with, or signed with another key."""


@dataclass(frozen=True)
class TokenClaims:
    """Claim set embedded in every bearer token."""

    user_id: UUID
    username: str
    email: str
    role: str
    session_id: UUID
    token_type: TokenType
    expires_at: datetime | None = None
    token_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "sub": str(self.user_id),
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "sid": str(self.session_id),
            "type": self.token_type.value,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TokenClaims":
        """Build claims from a decoded payload. Raises ValueError/KeyError if malformed."""
        exp = payload.get("exp")
        return cls(
            user_id=UUID(payload["sub"]),
            username=payload["username"],
            email=payload["email"],
            role=payload["role"],
            session_id=UUID(payload["sid"]),
            token_type=TokenType(payload["type"]),
            expires_at=datetime.fromtimestamp(exp, UTC) if exp is not None else None,
            token_id=payload.get("jti"),
        )


class TokenCodec:
    """Signs and verifies bearer tokens with one shared secret.

    Constructed explicitly (see `from_settings`) and injected where needed;
    the secret is held by the instance, never by module state.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self._secret_key = secret_key
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(settings.jwt_secret_key, settings.jwt_algorithm)

    def sign(self, claims: TokenClaims, ttl: timedelta) -> str:
        """Create a signed token expiring `ttl` from now.

        Includes a unique JWT ID (jti) so two tokens minted in the same second
        for the same session never collide.
        """
        to_encode = claims.to_payload()
        to_encode["exp"] = datetime.now(UTC) + ttl
        to_encode["jti"] = str(uuid7())
        return jwt.encode(  # type: ignore[no-any-return]
            to_encode,
            self._secret_key,
            algorithm=self._algorithm,
        )

    def verify(self, token: str) -> TokenClaims:
        """Verify signature and expiry and return the claims.

        Raises:
            TokenExpiredError: the token's exp has passed
            TokenSignatureError: bad signature, bad encoding or malformed claims
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTError as e:
            raise TokenSignatureError("Token signature is invalid") from e

        try:
            return TokenClaims.from_payload(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise TokenSignatureError("Token claims are malformed") from e

    def read_unverified(self, token: str) -> TokenClaims | None:
        """Decode claims WITHOUT verifying signature or expiry.

        Only for operations where acting on a forged token is harmless, such as
        revoking a session that must also belong to the authenticated caller.
        """
        try:
            return TokenClaims.from_payload(jwt.get_unverified_claims(token))
        except (JWTError, KeyError, TypeError, ValueError):
            return None
