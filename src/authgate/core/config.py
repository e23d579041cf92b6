import re
from datetime import timedelta
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TTL_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd])\s*$")
_TTL_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_ttl(value: str) -> timedelta:
    """Parse a duration string such as "15m" or "7d" into a timedelta.

    Supported units: s (seconds), m (minutes), h (hours), d (days).
    """
    match = _TTL_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration '{value}'. Use e.g. '30s', '15m', '12h' or '7d'.")
    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Duration must be positive, got '{value}'")
    return timedelta(**{_TTL_UNITS[match.group(2)]: amount})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "AuthGate"
    app_env: str = "development"  # development, testing, production
    debug: bool = False

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance
    # Return the raw password reset token in the API response (never in production)
    expose_reset_token: bool | None = None

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_auto_create: bool = False  # create tables on startup (dev/test only)

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_ttl: str = "15m"
    refresh_token_ttl: str = "7d"
    password_reset_ttl: str = "1h"
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # Seed
    seed_admin_password: str | None = None  # bootstrap admin password for authgate-seed

    # API keys
    api_key_prefix: str = "sk_"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("access_token_ttl", "refresh_token_ttl", "password_reset_ttl")
    @classmethod
    def validate_ttl(cls, v: str) -> str:
        parse_ttl(v)
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def should_expose_reset_token(self) -> bool:
        if self.expose_reset_token is None:
            return not self.is_production
        return self.expose_reset_token and not self.is_production

    @property
    def access_token_lifetime(self) -> timedelta:
        return parse_ttl(self.access_token_ttl)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return parse_ttl(self.refresh_token_ttl)

    @property
    def password_reset_lifetime(self) -> timedelta:
        return parse_ttl(self.password_reset_ttl)


@lru_cache
def get_settings() -> Settings:
    return Settings()
