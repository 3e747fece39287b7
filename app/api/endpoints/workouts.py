"""Workout CRUD, sample generation and result logging endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import CurrentIdentity, DbSession, require_roles
from app.core.constants import GENERATED_WORKOUT_SIZE
from app.core.enums import Role
from app.models.workout import Workout
from app.schemas.auth import Identity
from app.schemas.exercise import ExerciseRead
from app.schemas.user import MessageResponse
from app.schemas.workout import (
    GeneratedWorkout,
    WorkoutCreate,
    WorkoutRead,
    WorkoutResultCreate,
    WorkoutResultLogged,
    WorkoutResultRead,
    WorkoutUpdate,
)
from app.services import workout_service

router = APIRouter()

StaffIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN, Role.COACH))]
MemberIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN, Role.COACH, Role.USER))]


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    db: DbSession,
    _: CurrentIdentity,
    user_id: int | None = None,
    skip: int = 0,
    limit: int = 50,
):
    """List workouts with their exercises, optionally only one user's."""
    stmt = workout_service.workout_query()
    if user_id is not None:
        stmt = stmt.where(Workout.user_id == user_id)
    stmt = stmt.order_by(Workout.id).offset(skip).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(payload: WorkoutCreate, db: DbSession, _: StaffIdentity):
    """Create a workout and its exercise assignments in one transaction."""
    return await workout_service.create_workout(db, payload)


@router.get("/generate", response_model=GeneratedWorkout)
async def generate_workout(db: DbSession, _: CurrentIdentity):
    """Sample workout built from the first few catalogue exercises."""
    exercises = await workout_service.generate_workout(db, GENERATED_WORKOUT_SIZE)
    return GeneratedWorkout(exercises=[ExerciseRead.model_validate(e) for e in exercises])


@router.get("/{workout_id}", response_model=WorkoutRead)
async def get_workout(workout_id: int, db: DbSession, _: CurrentIdentity):
    return await workout_service.get_workout(db, workout_id)


@router.put("/{workout_id}", response_model=WorkoutRead)
async def update_workout(
    workout_id: int,
    payload: WorkoutUpdate,
    db: DbSession,
    _: StaffIdentity,
):
    """Partial update; an `exercises` list replaces the existing one entirely."""
    return await workout_service.update_workout(db, workout_id, payload)


@router.delete("/{workout_id}", response_model=MessageResponse)
async def delete_workout(workout_id: int, db: DbSession, _: StaffIdentity):
    await workout_service.delete_workout(db, workout_id)
    return MessageResponse(message="Workout deleted successfully")


@router.post("/{workout_id}/log-result", response_model=WorkoutResultLogged, status_code=201)
async def log_workout_result(
    workout_id: int,
    payload: WorkoutResultCreate,
    db: DbSession,
    identity: MemberIdentity,
):
    """Log the caller's result for one of their own workouts."""
    workout_result = await workout_service.log_result(db, workout_id, identity.id, payload)
    return WorkoutResultLogged(workout_result=WorkoutResultRead.model_validate(workout_result))
