"""Registration and login endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import AppSettings, DbSession, authorize, optional_identity
from app.core.enums import Role
from app.schemas.auth import Identity, LoginRequest, RegisterRequest, RegisterResponse, TokenResponse
from app.services import auth_service

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    payload: RegisterRequest,
    db: DbSession,
    settings: AppSettings,
    caller: Annotated[Identity | None, Depends(optional_identity)],
):
    """Create an account. Roles other than "user" need an admin token unless open role registration is on."""
    role = payload.role or Role.USER
    if role != Role.USER and not settings.allow_open_role_registration:
        authorize(caller, [Role.ADMIN])
    user = await auth_service.register(db, payload.email, payload.password, role)
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: DbSession, settings: AppSettings):
    """Exchange email + password for a bearer token (valid one hour)."""
    token = await auth_service.login(db, payload.email, payload.password, settings)
    return TokenResponse(token=token)
