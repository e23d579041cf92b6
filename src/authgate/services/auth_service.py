"""Authentication service - sign-up, sign-in, token refresh, sessions, password reset."""

from dataclasses import dataclass
from uuid import UUID, uuid7

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.authgate.core.audit import audit_event
from src.authgate.core.config import Settings
from src.authgate.core.errors import (
    DuplicateCredentialError,
    InvalidCredentialsError,
    InvalidOrExpiredResetTokenError,
    InvalidOrExpiredTokenError,
    NotFoundError,
)
from src.authgate.core.logging import get_logger
from src.authgate.core.security import (
    PasswordHasher,
    TokenClaims,
    TokenCodec,
    TokenType,
    TokenVerificationError,
    generate_reset_token,
    hash_token,
    token_hashes_match,
)
from src.authgate.models import PasswordResetToken, User, UserSession
from src.authgate.models.base import utc_now
from src.authgate.models.enums import UserRole
from src.authgate.repositories import (
    PasswordResetTokenRepository,
    SessionRepository,
    UserRepository,
)
from src.authgate.services.principal import Principal
from src.authgate.services.session_registry import DeviceInfo, SessionRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AuthResult:
    """Outcome of sign-up and sign-in: the user plus a token pair bound to a new session."""

    user: User
    access_token: str
    refresh_token: str
    session_id: UUID


class AuthService:
    """Authentication service - turns credentials into sessions and back.

    Session states: ACTIVE (refresh keeps it ACTIVE under the same id),
    REVOKED and EXPIRED (both terminal). Expiry is detected at lookup time.

    Every write path commits once and rolls back on any exception.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        session_repo: SessionRepository,
        reset_repo: PasswordResetTokenRepository,
        session: AsyncSession,
        codec: TokenCodec,
        hasher: PasswordHasher,
        settings: Settings,
    ):
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.reset_repo = reset_repo
        self.session = session
        self.codec = codec
        self.hasher = hasher
        self.settings = settings
        self.registry = SessionRegistry(session_repo, settings.refresh_token_lifetime)

    def _mint_pair(self, user: User, session_id: UUID) -> TokenPair:
        """Sign an access and a refresh token bound to `session_id`."""
        claims = TokenClaims(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            session_id=session_id,
            token_type=TokenType.ACCESS,
        )
        access_token = self.codec.sign(claims, self.settings.access_token_lifetime)
        refresh_claims = TokenClaims(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            session_id=session_id,
            token_type=TokenType.REFRESH,
        )
        refresh_token = self.codec.sign(refresh_claims, self.settings.refresh_token_lifetime)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)

    def _open_session(self, user: User, device: DeviceInfo) -> AuthResult:
        """Stage a new session for `user` and mint its token pair (no commit)."""
        session_id = uuid7()
        pair = self._mint_pair(user, session_id)
        self.registry.create(
            user.id,
            device,
            hash_token(pair.refresh_token),
            session_id=session_id,
        )
        return AuthResult(
            user=user,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            session_id=session_id,
        )

    async def _ensure_unique(self, email: str, username: str) -> None:
        """Raise DuplicateCredentialError if email or username is taken (email first)."""
        if await self.user_repo.exists_by_email(email):
            raise DuplicateCredentialError("email")
        if await self.user_repo.exists_by_username(username):
            raise DuplicateCredentialError("username")

    async def _duplicate_field_after_conflict(self, email: str) -> str:
        """Work out which unique constraint a failed insert hit."""
        return "email" if await self.user_repo.exists_by_email(email) else "username"

    async def sign_up(
        self,
        name: str,
        username: str,
        email: str,
        password: str,
        device: DeviceInfo | None = None,
    ) -> AuthResult:
        """Register a user and open their first session in one transaction.

        Raises:
            DuplicateCredentialError: email or username already taken
        """
        await self._ensure_unique(email, username)
        salt, digest = await self.hasher.hash_async(password)

        try:
            user = User(
                name=name,
                username=username,
                email=email,
                hashed_password=digest,
                password_salt=salt,
                role=UserRole.USER.value,
            )
            self.user_repo.add(user)
            # Insert the user before its session so the FK is satisfied
            await self.session.flush()
            result = self._open_session(user, device or DeviceInfo())
            await self.session.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent sign-up with the same credentials
            await self.session.rollback()
            field = await self._duplicate_field_after_conflict(email)
            raise DuplicateCredentialError(field) from e
        except Exception:
            await self.session.rollback()
            raise

        audit_event("user.signed_up", user_id=user.id, session_id=result.session_id)
        return result

    async def sign_in(
        self,
        login: str,
        password: str,
        device: DeviceInfo | None = None,
    ) -> AuthResult:
        """Authenticate by username or email and open a new session.

        Unknown accounts and wrong passwords raise the same error, and both
        run a full password verification.

        Raises:
            InvalidCredentialsError: unknown login or wrong password
        """
        user = await self.user_repo.get_by_login(login)
        password_valid = await self.hasher.verify_async(
            password, user.hashed_password if user else None
        )
        if user is None or not password_valid:
            audit_event("user.sign_in_failed")
            raise InvalidCredentialsError()

        try:
            result = self._open_session(user, device or DeviceInfo())
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("user.signed_in", user_id=user.id, session_id=result.session_id)
        return result

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair on the same session.

        The session row is locked for the duration of the transaction. The
        presented token must be the one currently bound to the session, so a
        superseded refresh token is rejected.

        Raises:
            InvalidOrExpiredTokenError: for every failure cause
        """
        try:
            claims = self.codec.verify(refresh_token)
        except TokenVerificationError as e:
            raise InvalidOrExpiredTokenError() from e
        if claims.token_type != TokenType.REFRESH:
            raise InvalidOrExpiredTokenError()

        try:
            user_session = await self.registry.find_valid(claims.session_id, for_update=True)
            if (
                user_session is None
                or user_session.user_id != claims.user_id
                or not token_hashes_match(user_session.refresh_token_hash, refresh_token)
            ):
                raise InvalidOrExpiredTokenError()

            user = await self.user_repo.get_by_id(claims.user_id)
            if user is None:
                raise InvalidOrExpiredTokenError()

            pair = self._mint_pair(user, user_session.id)
            self.registry.rotate(user_session, hash_token(pair.refresh_token))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("session.refreshed", user_id=user.id, session_id=user_session.id)
        return pair

    async def sign_out(self, access_token: str, user_id: UUID) -> None:
        """Revoke the session named by the token's `sid` claim.

        The token is read without verification; the session must also belong
        to `user_id`. Unknown, foreign or unreadable sessions are a no-op.
        """
        claims = self.codec.read_unverified(access_token)
        if claims is None or claims.user_id != user_id:
            return

        try:
            await self.registry.revoke(claims.session_id, user_id)
            await self.session.commit()
        except NotFoundError:
            await self.session.rollback()
            return
        except Exception:
            await self.session.rollback()
            raise

        audit_event("user.signed_out", user_id=user_id, session_id=claims.session_id)

    async def list_sessions(self, user_id: UUID) -> list[UserSession]:
        return await self.registry.list_for_user(user_id)

    async def revoke_session(self, session_id: UUID, user_id: UUID) -> None:
        """Revoke one of the user's sessions.

        Raises:
            NotFoundError: no live session with that id belongs to the user
        """
        try:
            await self.registry.revoke(session_id, user_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("session.revoked", user_id=user_id, session_id=session_id)

    async def revoke_all_sessions(self, user_id: UUID) -> int:
        """Revoke every live session of a user. Other users are unaffected."""
        try:
            count = await self.registry.revoke_all(user_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("sessions.revoked_all", user_id=user_id, count=count)
        return count

    async def request_password_reset(self, email: str) -> str | None:
        """Issue a one-time reset token for the account with this email.

        Returns the raw token, or None when no account matches. Callers must
        respond identically in both cases. Earlier outstanding tokens of the
        user are discarded.
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return None

        raw_token = generate_reset_token()
        try:
            await self.reset_repo.delete_for_user(user.id)
            self.reset_repo.add(
                PasswordResetToken(
                    user_id=user.id,
                    token_hash=hash_token(raw_token),
                    expires_at=utc_now() + self.settings.password_reset_lifetime,
                )
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("password_reset.requested", user_id=user.id)
        return raw_token

    async def confirm_password_reset(self, token: str, new_password: str) -> None:
        """Set a new password using a reset token.

        In one transaction: update the password, consume the user's reset
        tokens and revoke every session of the user.

        Raises:
            InvalidOrExpiredResetTokenError: unknown, expired or already used token
        """
        record = await self.reset_repo.get_valid_by_hash(hash_token(token))
        if record is None:
            raise InvalidOrExpiredResetTokenError()

        user = await self.user_repo.get_by_id(record.user_id)
        if user is None:
            raise InvalidOrExpiredResetTokenError()

        salt, digest = await self.hasher.hash_async(new_password)
        try:
            if not await self.reset_repo.consume(record.id):
                raise InvalidOrExpiredResetTokenError()
            user.hashed_password = digest
            user.password_salt = salt
            user.updated_at = utc_now()
            await self.reset_repo.delete_for_user(user.id)
            revoked = await self.registry.revoke_all(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        audit_event("password_reset.completed", user_id=user.id, sessions_revoked=revoked)

    async def authenticate_access_token(self, access_token: str) -> Principal:
        """Resolve an access token to a principal.

        Requires a valid signature, an unexpired token of type access, a live
        session and an existing user. The role is read from the user row.

        Raises:
            InvalidOrExpiredTokenError: for every failure cause
        """
        try:
            claims = self.codec.verify(access_token)
        except TokenVerificationError as e:
            raise InvalidOrExpiredTokenError() from e
        if claims.token_type != TokenType.ACCESS:
            raise InvalidOrExpiredTokenError()

        row = await self.registry.find_valid_with_user(claims.session_id)
        if row is None:
            raise InvalidOrExpiredTokenError()
        user_session, user = row
        if user.id != claims.user_id:
            raise InvalidOrExpiredTokenError()

        return Principal(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            auth_method="token",
            session_id=user_session.id,
        )
