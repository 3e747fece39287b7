"""Registration / login schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.constants import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from app.core.enums import Role


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    role: Role | None = None


class RegisterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "User registered successfully"
    user_id: int = Field(..., serialization_alias="userId")


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"


class Identity(BaseModel):
    """The authenticated caller, derived from a verified token."""

    id: int
    email: str
    role: Role
