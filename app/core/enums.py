"""Shared enums for models and API."""

from enum import Enum


class Role(str, Enum):
    """Access role. Checks are set membership, not a hierarchy."""

    ADMIN = "admin"
    COACH = "coach"
    USER = "user"
