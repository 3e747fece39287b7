"""Exercise CRUD endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import CurrentIdentity, DbSession, require_roles
from app.core.enums import Role
from app.core.exceptions import Conflict, NotFound
from app.models.exercise import Exercise
from app.schemas.auth import Identity
from app.schemas.exercise import ExerciseCreate, ExerciseRead, ExerciseUpdate
from app.schemas.user import MessageResponse

router = APIRouter()

StaffIdentity = Annotated[Identity, Depends(require_roles(Role.ADMIN, Role.COACH))]

DUPLICATE_NAME = "An exercise with this name already exists."


async def _flush_unique(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict(DUPLICATE_NAME) from e


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: DbSession,
    _: CurrentIdentity,
    skip: int = 0,
    limit: int = 100,
):
    """List exercises with optional pagination."""
    result = await db.execute(select(Exercise).order_by(Exercise.name).offset(skip).limit(limit))
    return list(result.scalars().all())


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(payload: ExerciseCreate, db: DbSession, _: StaffIdentity):
    """Create a new exercise; 409 when the name is taken."""
    exercise = Exercise(**payload.model_dump())
    db.add(exercise)
    await _flush_unique(db)
    await db.refresh(exercise)
    return exercise


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(exercise_id: int, db: DbSession, _: CurrentIdentity):
    result = await db.execute(select(Exercise).where(Exercise.id == exercise_id))
    exercise = result.scalar_one_or_none()
    if not exercise:
        raise NotFound("Exercise not found")
    return exercise


@router.put("/{exercise_id}", response_model=ExerciseRead)
async def update_exercise(
    exercise_id: int,
    payload: ExerciseUpdate,
    db: DbSession,
    _: StaffIdentity,
):
    """Update an exercise (partial); renaming onto an existing name is a 409."""
    result = await db.execute(select(Exercise).where(Exercise.id == exercise_id))
    exercise = result.scalar_one_or_none()
    if not exercise:
        raise NotFound("Exercise not found")
    for k, v in payload.model_dump(exclude_unset=True).items():
        setattr(exercise, k, v)
    await _flush_unique(db)
    await db.refresh(exercise)
    return exercise


@router.delete("/{exercise_id}", response_model=MessageResponse)
async def delete_exercise(exercise_id: int, db: DbSession, _: StaffIdentity):
    """Delete an exercise; it is removed from every workout that used it."""
    result = await db.execute(delete(Exercise).where(Exercise.id == exercise_id))
    if result.rowcount == 0:
        raise NotFound("Exercise not found")
    return MessageResponse(message="Exercise deleted successfully")
