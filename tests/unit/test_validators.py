"""Tests for request schema validation."""

import pytest
from pydantic import ValidationError

from src.authgate.core.validators import (
    validate_email_address,
    validate_password_strength,
    validate_username,
)
from src.authgate.schemas.auth import PasswordResetConfirm, SignUpRequest
from src.authgate.schemas.user import UserSelfUpdate, UserUpdate

pytestmark = pytest.mark.unit

STRONG_PASSWORD = "correct-horse-battery-staple"


class TestPasswordStrength:
    def test_strong_password_accepted(self) -> None:
        assert validate_password_strength(STRONG_PASSWORD) == STRONG_PASSWORD

    @pytest.mark.parametrize("password", ["password", "12345678", "qwertyuiop", "aaaaaaaa"])
    def test_weak_password_rejected(self, password: str) -> None:
        with pytest.raises(ValueError, match="(?i)password|weak"):
            validate_password_strength(password)


class TestUsername:
    @pytest.mark.parametrize("username", ["abc", "jane_doe", "User_123", "a" * 30])
    def test_valid(self, username: str) -> None:
        assert validate_username(username) == username

    @pytest.mark.parametrize("username", ["ab", "a" * 31, "jane-doe", "jane doe", "jané"])
    def test_invalid(self, username: str) -> None:
        with pytest.raises(ValueError):
            validate_username(username)


class TestSchemas:
    def test_signup_request(self) -> None:
        data = SignUpRequest(
            name="Jane Doe",
            username="jane_doe",
            email="jane@example.com",
            password=STRONG_PASSWORD,
        )
        assert data.device_id is None

    def test_signup_rejects_weak_password(self) -> None:
        with pytest.raises(ValidationError):
            SignUpRequest(
                name="Jane Doe",
                username="jane_doe",
                email="jane@example.com",
                password="password1",
            )

    def test_signup_rejects_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            SignUpRequest(
                name="Jane Doe",
                username="jane_doe",
                email="not-an-email",
                password=STRONG_PASSWORD,
            )

    def test_reset_confirm_rejects_weak_password(self) -> None:
        with pytest.raises(ValidationError):
            PasswordResetConfirm(token="abc", password="password1")

    def test_update_tracks_only_sent_fields(self) -> None:
        data = UserUpdate(name="New Name")
        assert data.model_dump(exclude_unset=True) == {"name": "New Name"}


class TestEmailAddress:
    @pytest.mark.parametrize("email", ["Jane@Example.COM", "jane.doe+tag@example.org"])
    def test_kept_exactly_as_given(self, email: str) -> None:
        assert validate_email_address(email) == email
        data = SignUpRequest(
            name="Jane Doe", username="jane_doe", email=email, password=STRONG_PASSWORD
        )
        assert data.email == email

    @pytest.mark.parametrize("email", ["not-an-email", "jane@", "@example.com"])
    def test_invalid_rejected(self, email: str) -> None:
        with pytest.raises(ValueError):
            validate_email_address(email)

    def test_self_update_keeps_case(self) -> None:
        assert UserSelfUpdate(email="Jane@Example.COM").email == "Jane@Example.COM"
