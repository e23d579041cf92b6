"""Typed failures raised by the service layer.

Each error carries the HTTP status and the outward detail message; the
exception handlers in core.exceptions turn them into JSON responses.
Messages are deliberately generic where distinguishing causes would leak
information (sign-in, token checks, reset tokens).
"""


class AuthGateError(Exception):
    """Base class for service-layer failures mapped to HTTP responses."""

    status_code: int = 400
    detail: str = "Bad request"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class DuplicateCredentialError(AuthGateError):
    """Username or email already belongs to another account."""

    status_code = 409

    def __init__(self, field: str) -> None:
        self.field = field
        label = "Email" if field == "email" else "Username"
        super().__init__(f"{label} already exists")


class InvalidCredentialsError(AuthGateError):
    status_code = 401
    detail = "Invalid credentials"


class InvalidOrExpiredTokenError(AuthGateError):
    status_code = 401
    detail = "Invalid or expired token"


class InvalidOrExpiredResetTokenError(AuthGateError):
    status_code = 400
    detail = "Invalid or expired reset token"


class UnauthenticatedError(AuthGateError):
    status_code = 401
    detail = "Authentication required"


class ForbiddenError(AuthGateError):
    status_code = 403
    detail = "Access denied"


class NotFoundError(AuthGateError):
    status_code = 404
    detail = "Not found"


class InvalidOperationError(AuthGateError):
    status_code = 400
    detail = "Invalid operation"
