"""User schemas. No read schema carries the password hash."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.constants import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from app.core.enums import Role


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    role: Role | None = None

    @field_validator("email", "password", "role")
    @classmethod
    def not_null(cls, v):
        # Optional means "may be omitted", not "may be cleared"
        if v is None:
            raise ValueError("must not be null")
        return v


class PasswordReset(BaseModel):
    new_password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH, alias="newPassword"
    )

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
