import re
from typing import Annotated

from pydantic import AfterValidator, EmailStr, StringConstraints, TypeAdapter, ValidationError
from zxcvbn import zxcvbn

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{3,30}$")
_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def validate_password_strength(password: str) -> str:
    """Validate password strength using zxcvbn entropy estimation."""
    result = zxcvbn(password)
    score = result["score"]  # 0-4 scale

    if score < MIN_PASSWORD_SCORE:
        # Get helpful feedback from zxcvbn
        feedback = result.get("feedback", {})
        warning = feedback.get("warning", "")
        suggestions = feedback.get("suggestions", [])

        if warning:
            raise ValueError(f"Weak password: {warning}")
        elif suggestions:
            raise ValueError(f"Weak password: {suggestions[0]}")
        else:
            raise ValueError(
                "Password is too weak. Use a longer password with a mix of characters."
            )

    return password


def validate_username(username: str) -> str:
    if not _USERNAME_PATTERN.match(username):
        raise ValueError(
            "Username must be 3-30 characters and contain only letters, numbers and underscores"
        )
    return username


def validate_email_address(email: str) -> str:
    """Check the address with EmailStr rules but return it exactly as given.

    EmailStr normalizes (e.g. lowercases the domain); stored emails must stay
    byte-identical to what the user types at sign-in.
    """
    try:
        _EMAIL_ADAPTER.validate_python(email)
    except ValidationError as e:
        raise ValueError("value is not a valid email address") from e
    return email


EmailAddress = Annotated[
    str, StringConstraints(max_length=255), AfterValidator(validate_email_address)
]
