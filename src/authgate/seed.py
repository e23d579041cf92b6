"""
Database seed - creates or updates bootstrap accounts.

Sign-up only ever creates USER accounts, so the first ADMIN comes from here.

Run with:
    authgate-seed                                  # admin@example.com / admin
    authgate-seed --email ops@corp.io --username ops --password '<passphrase>'

Without --password, SEED_ADMIN_PASSWORD is used; failing that a random
password is generated and logged once.
"""

import argparse
import asyncio
import secrets
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.authgate.core.audit import audit_event
from src.authgate.core.config import get_settings
from src.authgate.core.db import create_tables, dispose_engine, get_session
from src.authgate.core.logging import get_logger, setup_logging
from src.authgate.core.security import PasswordHasher, get_password_hasher
from src.authgate.core.validators import (
    validate_email_address,
    validate_password_strength,
    validate_username,
)
from src.authgate.models import User
from src.authgate.models.base import utc_now
from src.authgate.models.enums import UserRole
from src.authgate.repositories import UserRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class SeedUser:
    name: str
    username: str
    email: str
    password: str
    role: UserRole = UserRole.USER


async def seed_users(
    session: AsyncSession,
    hasher: PasswordHasher,
    users: Sequence[SeedUser],
) -> list[User]:
    """Upsert users by email, one transaction each.

    An existing row keeps its id and email; name, username, password and role
    are overwritten. A failing entry is rolled back and logged, and the rest
    are still seeded.

    Returns:
        The users that were written
    """
    repo = UserRepository(session)
    seeded: list[User] = []
    logger.info("Seeding users", count=len(users))

    for entry in users:
        salt, digest = await hasher.hash_async(entry.password)
        try:
            user = await repo.get_by_email(entry.email)
            created = user is None
            if user is None:
                user = User(
                    name=entry.name,
                    username=entry.username,
                    email=entry.email,
                    hashed_password=digest,
                    password_salt=salt,
                    role=entry.role.value,
                )
                repo.add(user)
            else:
                user.name = entry.name
                user.username = entry.username
                user.hashed_password = digest
                user.password_salt = salt
                user.role = entry.role.value
                user.updated_at = utc_now()
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Failed to seed user", username=entry.username)
            continue

        audit_event("user.seeded", user_id=user.id, role=user.role, created=created)
        seeded.append(user)

    return seeded


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update the bootstrap admin account")
    parser.add_argument("--name", default="Admin User")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default=None, help="Defaults to SEED_ADMIN_PASSWORD")
    parser.add_argument(
        "--no-create-tables",
        dest="create_tables",
        action="store_false",
        help="Assume the schema already exists",
    )
    return parser.parse_args(argv)


def admin_from_args(args: argparse.Namespace, default_password: str | None) -> SeedUser:
    """Build the admin seed entry, validating it like a sign-up request."""
    password = args.password or default_password
    if password is None:
        password = secrets.token_urlsafe(18)
        logger.warning("Generated admin password", username=args.username, password=password)
    return SeedUser(
        name=args.name,
        username=validate_username(args.username),
        email=validate_email_address(args.email),
        password=validate_password_strength(password),
        role=UserRole.ADMIN,
    )


async def run(argv: Sequence[str] | None = None) -> int:
    """Seed the database. Returns the process exit code."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.debug, service=settings.app_name)

    try:
        admin = admin_from_args(args, settings.seed_admin_password)
    except ValueError as e:
        logger.error("Invalid seed user", error=str(e))
        return 2

    try:
        if args.create_tables:
            await create_tables()
        async with get_session() as session:
            seeded = await seed_users(session, get_password_hasher(), [admin])
    finally:
        await dispose_engine()

    logger.info("Database seeding completed", seeded=len(seeded))
    return 0 if len(seeded) == 1 else 1


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
