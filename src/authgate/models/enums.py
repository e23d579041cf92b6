"""Shared enums for models."""

from enum import Enum


class UserRole(str, Enum):
    """Platform-wide user role."""

    USER = "USER"
    ADMIN = "ADMIN"
