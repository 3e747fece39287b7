"""Workout, WorkoutExercise and WorkoutResult schemas."""

import datetime as dt
from typing import Annotated

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.schemas.exercise import ExerciseRead


class ExerciseAssignment(BaseModel):
    """One exercise in a workout, with its prescription. Accepts camelCase field names too."""

    exercise_id: int = Field(..., gt=0, validation_alias=AliasChoices("exercise_id", "exerciseId"))
    sets: int | None = Field(None, ge=0)
    reps: int | None = Field(None, ge=0)
    duration_seconds: int | None = Field(
        None, ge=0, validation_alias=AliasChoices("duration_seconds", "durationSeconds", "duration")
    )
    notes: str | None = Field(None, max_length=500)


def _unique_exercise_ids(assignments: list[ExerciseAssignment]) -> list[ExerciseAssignment]:
    seen: set[int] = set()
    for a in assignments:
        if a.exercise_id in seen:
            raise ValueError(f"Exercise {a.exercise_id} is listed more than once")
        seen.add(a.exercise_id)
    return assignments


AssignmentList = Annotated[list[ExerciseAssignment], AfterValidator(_unique_exercise_ids)]


class WorkoutCreate(BaseModel):
    user_id: int = Field(..., gt=0, validation_alias=AliasChoices("user_id", "userId"))
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    date: dt.date | None = None
    exercises: AssignmentList = []


class WorkoutUpdate(BaseModel):
    """Partial update. When `exercises` is present it replaces the whole list."""

    user_id: int | None = Field(None, gt=0, validation_alias=AliasChoices("user_id", "userId"))
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    date: dt.date | None = None
    exercises: AssignmentList | None = None

    @field_validator("user_id", "name")
    @classmethod
    def not_null(cls, v):
        # Optional means "may be omitted", not "may be cleared"
        if v is None:
            raise ValueError("must not be null")
        return v


class WorkoutExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    exercise_id: int
    sets: int | None = None
    reps: int | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    exercise: ExerciseRead | None = None


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int
    name: str
    description: str | None = None
    date: dt.date | None = None
    created_at: dt.datetime
    updated_at: dt.datetime
    exercises: list[WorkoutExerciseRead] = []


class WorkoutResultCreate(BaseModel):
    result_value: float | None = Field(None, validation_alias=AliasChoices("result_value", "resultValue"))
    result_unit: str | None = Field(
        None, max_length=50, validation_alias=AliasChoices("result_unit", "resultUnit")
    )
    notes: str | None = None


class WorkoutResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_id: int
    user_id: int
    result_value: float | None = None
    result_unit: str | None = None
    notes: str | None = None
    performed_at: dt.datetime
    updated_at: dt.datetime


class WorkoutResultLogged(BaseModel):
    message: str = "Workout result logged successfully"
    workout_result: WorkoutResultRead


class GeneratedWorkout(BaseModel):
    message: str = "Generated a sample workout"
    exercises: list[ExerciseRead]
