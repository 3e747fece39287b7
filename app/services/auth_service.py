"""Credential service: registration and login."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.enums import Role
from app.core.exceptions import Conflict, InvalidCredentials
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User

logger = logging.getLogger(__name__)

# Verified against when the email is unknown so both failure paths cost one bcrypt check
_DUMMY_HASH = hash_password("not-a-real-password")


async def register(db: AsyncSession, email: str, password: str, role: Role | None = None) -> User:
    """
    Create a user with a hashed password; role defaults to "user".
    Duplicate emails are detected by the unique constraint, not a pre-check.
    """
    hashed = await run_in_threadpool(hash_password, password)
    user = User(email=email, password=hashed, role=role or Role.USER)
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.info("Registration rejected: email already in use")
        raise Conflict("User with that email already exists") from e
    logger.info("Registered user %s with role %s", user.id, user.role.value)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """Return the user for valid credentials; same error for unknown email and wrong password."""
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    hashed = user.password if user else _DUMMY_HASH
    matches = await run_in_threadpool(verify_password, password, hashed)
    if user is None or not matches:
        logger.warning("Login failed for %s", email)
        raise InvalidCredentials()
    return user


async def login(db: AsyncSession, email: str, password: str, settings: Settings) -> str:
    user = await authenticate_user(db, email, password)
    token = create_access_token(
        user.id,
        user.email,
        user.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    logger.info("User %s logged in", user.id)
    return token
