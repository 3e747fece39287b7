"""Exercise schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str | None = Field(None, max_length=100)
    muscle_group: str | None = Field(None, max_length=100)
    difficulty: str | None = Field(None, max_length=50)
    equipment: str | None = Field(None, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Exercise name is required")
        return v


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    type: str | None = Field(None, max_length=100)
    muscle_group: str | None = Field(None, max_length=100)
    difficulty: str | None = Field(None, max_length=50)
    equipment: str | None = Field(None, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise ValueError("Exercise name cannot be empty")
        return v.strip()


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime
    updated_at: datetime
