"""Access guard: bearer-token authentication and role-based authorization.

A protected route runs two steps in order: ``authenticate`` turns the
Authorization header into an Identity (stored on ``request.state.identity``),
then ``require_roles(...)`` checks that identity's role against an allow-list.
Either step short-circuits the request with 401 / 403.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.enums import Role
from app.core.exceptions import Forbidden, InvalidToken, Unauthorized
from app.core.security import decode_access_token
from app.db.session import get_db
from app.schemas.auth import Identity

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def identity_from_token(token: str | None, settings: Settings) -> Identity:
    """Verify a bearer token. Missing, bad-signature and expired all surface as the same 401."""
    if not token:
        logger.warning("Authentication failed: no token provided")
        raise Unauthorized()
    try:
        claims = decode_access_token(token, settings.jwt_secret_key, settings.jwt_algorithm)
    except InvalidToken as e:
        logger.warning("Authentication failed: %s", e.message)
        raise Unauthorized() from e
    return Identity(**claims)


def authorize(identity: Identity | None, allowed_roles: Iterable[Role | str]) -> Identity:
    """Set-membership role check; "admin" does not satisfy a list that omits it."""
    if identity is None:
        logger.warning("Authorization failed: no identity on request")
        raise Forbidden("Forbidden: No user information")
    allowed = {Role(r) for r in allowed_roles}
    if identity.role not in allowed:
        logger.warning(
            "Authorization failed for user %s: role %s not in %s",
            identity.id,
            identity.role.value,
            sorted(r.value for r in allowed),
        )
        raise Forbidden()
    return identity


async def authenticate(
    request: Request,
    settings: AppSettings,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity:
    identity = identity_from_token(credentials.credentials if credentials else None, settings)
    request.state.identity = identity
    logger.debug("User %s authenticated", identity.id)
    return identity


async def optional_identity(
    settings: AppSettings,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity | None:
    """Identity when a valid token is sent, else None (for routes open to anonymous callers).

    A bad or expired token is treated like no token at all.
    """
    if credentials is None:
        return None
    try:
        return identity_from_token(credentials.credentials, settings)
    except Unauthorized:
        return None


CurrentIdentity = Annotated[Identity, Depends(authenticate)]


def require_roles(*roles: Role):
    """Dependency factory: authenticate, then allow only the given roles."""

    async def _guard(request: Request, _: CurrentIdentity) -> Identity:
        return authorize(getattr(request.state, "identity", None), roles)

    return _guard
