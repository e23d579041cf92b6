"""Authentication endpoints - sign-up/in/out, refresh, sessions, password reset."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Header, status

from src.authgate.api.dependencies import (
    AuthServiceDep,
    BearerToken,
    CurrentPrincipal,
    SettingsDep,
)
from src.authgate.schemas.auth import (
    AuthResponse,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignUpRequest,
)
from src.authgate.schemas.session import SessionRead
from src.authgate.schemas.user import UserRead
from src.authgate.services import AuthResult, DeviceInfo

router = APIRouter(prefix="/auth", tags=["auth"])

_TOKEN_EXAMPLE = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        user=UserRead.model_validate(result.user),
        access_token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "User created and signed in"},
        409: {"description": "Email or username already exists"},
        422: {"description": "Validation error (including weak password)"},
    },
)
async def sign_up(
    data: SignUpRequest,
    service: AuthServiceDep,
    user_agent: Annotated[str | None, Header()] = None,
) -> AuthResponse:
    """Register a new account and open its first session."""
    result = await service.sign_up(
        data.name,
        data.username,
        data.email,
        data.password,
        DeviceInfo(device_id=data.device_id, user_agent=user_agent),
    )
    return _auth_response(result)


@router.post(
    "/signin",
    response_model=AuthResponse,
    responses={
        200: {
            "description": "Successful authentication",
            "content": {
                "application/json": {
                    "example": {
                        "user": {
                            "id": "0192f5e4-7c3a-7b1e-9d2f-3a4b5c6d7e8f",
                            "name": "Jane Doe",
                            "username": "jane_doe",
                            "email": "jane@example.com",
                            "role": "USER",
                            "created_at": "2026-01-15T10:30:00Z",
                            "updated_at": "2026-01-15T10:30:00Z",
                        },
                        "access_token": _TOKEN_EXAMPLE,
                        "refresh_token": _TOKEN_EXAMPLE,
                        "token_type": "bearer",
                    }
                }
            },
        },
        401: {"description": "Invalid credentials"},
    },
)
async def sign_in(
    data: SignInRequest,
    service: AuthServiceDep,
    user_agent: Annotated[str | None, Header()] = None,
) -> AuthResponse:
    """Sign in with username or email. Each sign-in opens a new session."""
    result = await service.sign_in(
        data.login,
        data.password,
        DeviceInfo(device_id=data.device_id, user_agent=user_agent),
    )
    return _auth_response(result)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    responses={
        200: {
            "description": "New token pair for the same session",
            "content": {
                "application/json": {
                    "example": {
                        "access_token": _TOKEN_EXAMPLE,
                        "refresh_token": _TOKEN_EXAMPLE,
                        "token_type": "bearer",
                    }
                }
            },
        },
        401: {"description": "Invalid or expired token"},
    },
)
async def refresh(data: RefreshRequest, service: AuthServiceDep) -> RefreshResponse:
    """Exchange a refresh token for a new pair.

    The session keeps its id. The refresh token presented here stops working
    once the new pair is issued.
    """
    pair = await service.refresh(data.refresh_token)
    return RefreshResponse(access_token=pair.access_token, refresh_token=pair.refresh_token)


@router.post(
    "/signout",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"description": "Not authenticated"}},
)
async def sign_out(
    principal: CurrentPrincipal,
    token: BearerToken,
    service: AuthServiceDep,
) -> None:
    """Revoke the session the access token belongs to."""
    await service.sign_out(token, principal.user_id)


@router.get(
    "/sessions",
    response_model=list[SessionRead],
    responses={401: {"description": "Not authenticated"}},
)
async def list_sessions(principal: CurrentPrincipal, service: AuthServiceDep) -> list[SessionRead]:
    """List the caller's live sessions, newest first."""
    sessions = await service.list_sessions(principal.user_id)
    return [SessionRead.model_validate(s) for s in sessions]


@router.post(
    "/sessions/invalidate-all",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"description": "Not authenticated"}},
)
async def invalidate_all_sessions(principal: CurrentPrincipal, service: AuthServiceDep) -> None:
    """Revoke every session of the caller, including the current one."""
    await service.revoke_all_sessions(principal.user_id)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Session not found"},
    },
)
async def revoke_session(
    session_id: UUID,
    principal: CurrentPrincipal,
    service: AuthServiceDep,
) -> None:
    """Revoke one of the caller's sessions."""
    await service.revoke_session(session_id, principal.user_id)


@router.post(
    "/password-reset/request",
    response_model=PasswordResetRequestResponse,
    response_model_exclude_none=True,
)
async def request_password_reset(
    data: PasswordResetRequest,
    service: AuthServiceDep,
    settings: SettingsDep,
) -> PasswordResetRequestResponse:
    """Request a password reset token.

    The response is the same whether or not the email belongs to an account.
    Outside production the raw token is included for testing, since no email
    is sent.
    """
    token = await service.request_password_reset(data.email)
    if token is not None and settings.should_expose_reset_token:
        return PasswordResetRequestResponse(token=token)
    return PasswordResetRequestResponse()


@router.post(
    "/password-reset/confirm",
    response_model=MessageResponse,
    responses={400: {"description": "Invalid or expired reset token"}},
)
async def confirm_password_reset(
    data: PasswordResetConfirm,
    service: AuthServiceDep,
) -> MessageResponse:
    """Set a new password with a reset token. Signs the user out everywhere."""
    await service.confirm_password_reset(data.token, data.password)
    return MessageResponse(message="Password has been reset successfully")
