"""User management endpoints. Responses never include the password hash."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool

from app.api.deps import CurrentIdentity, DbSession, require_roles
from app.core.enums import Role
from app.core.exceptions import Conflict, Forbidden, NotFound
from app.core.security import hash_password
from app.models.user import User
from app.schemas.auth import Identity
from app.schemas.user import MessageResponse, PasswordReset, UserRead, UserUpdate

router = APIRouter()

AdminIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN))]


async def _get_user(db: DbSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user


@router.get("", response_model=list[UserRead])
async def list_users(
    db: DbSession,
    _: AdminIdentity,
    skip: int = 0,
    limit: int = 100,
):
    """List users (admin only)."""
    result = await db.execute(select(User).order_by(User.id).offset(skip).limit(limit))
    return list(result.scalars().all())


@router.get("/me", response_model=UserRead)
async def get_me(db: DbSession, identity: CurrentIdentity):
    """The caller's own record."""
    return await _get_user(db, identity.id)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, db: DbSession, _: CurrentIdentity):
    return await _get_user(db, user_id)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: DbSession,
    identity: CurrentIdentity,
):
    """Partial update of self (or anyone, for admins). Password is re-hashed; role changes are admin-only."""
    is_admin = identity.role == Role.ADMIN
    if identity.id != user_id and not is_admin:
        raise Forbidden("Forbidden: cannot modify another user")
    data = payload.model_dump(exclude_unset=True)
    if "role" in data and not is_admin:
        raise Forbidden("Forbidden: only admins can change roles")

    user = await _get_user(db, user_id)
    if "password" in data:
        data["password"] = await run_in_threadpool(hash_password, data["password"])
    for k, v in data.items():
        setattr(user, k, v)
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict("User with that email already exists") from e
    await db.refresh(user)
    return user


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, db: DbSession, _: AdminIdentity):
    """Delete a user; their workouts, assignments and results cascade."""
    result = await db.execute(delete(User).where(User.id == user_id))
    if result.rowcount == 0:
        raise NotFound("User not found")
    return MessageResponse(message="User deleted successfully")


@router.put("/reset-password/{user_id}", response_model=MessageResponse)
async def reset_password(
    user_id: int,
    payload: PasswordReset,
    db: DbSession,
    _: AdminIdentity,
):
    """Admin sets a new password for any user."""
    user = await _get_user(db, user_id)
    user.password = await run_in_threadpool(hash_password, payload.new_password)
    await db.flush()
    return MessageResponse(message="User password reset successfully")
