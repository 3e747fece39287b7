"""Workout aggregate writes: a workout plus its exercise assignments, and logged results.

All writes go through the request session, so a workout and its assignment rows
commit together (see ``app.db.session.get_db``).
"""

from __future__ import annotations

import datetime as dt
import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import Conflict, NotFound
from app.models.exercise import Exercise
from app.models.user import User
from app.models.workout import Workout, WorkoutExercise, WorkoutResult
from app.schemas.workout import ExerciseAssignment, WorkoutCreate, WorkoutResultCreate, WorkoutUpdate

logger = logging.getLogger(__name__)


def workout_query():
    return select(Workout).options(
        selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise)
    )


async def get_workout(db: AsyncSession, workout_id: int) -> Workout:
    """Load a workout with its assignments and their exercises."""
    result = await db.execute(
        workout_query().where(Workout.id == workout_id).execution_options(populate_existing=True)
    )
    workout = result.scalar_one_or_none()
    if not workout:
        raise NotFound("Workout not found")
    return workout


async def _ensure_user(db: AsyncSession, user_id: int) -> None:
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise NotFound("User not found")


async def _ensure_exercises(db: AsyncSession, assignments: list[ExerciseAssignment]) -> None:
    wanted = {a.exercise_id for a in assignments}
    if not wanted:
        return
    result = await db.execute(select(Exercise.id).where(Exercise.id.in_(wanted)))
    missing = sorted(wanted - set(result.scalars().all()))
    if missing:
        raise NotFound(f"Exercise not found: {', '.join(str(i) for i in missing)}")


def _add_assignments(db: AsyncSession, workout_id: int, assignments: list[ExerciseAssignment]) -> None:
    for a in assignments:
        db.add(WorkoutExercise(workout_id=workout_id, **a.model_dump()))


async def _flush(db: AsyncSession) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        # Constraint raced with a concurrent delete of a referenced row
        raise Conflict("Workout conflicts with existing data") from e


async def create_workout(db: AsyncSession, payload: WorkoutCreate) -> Workout:
    """
    Insert a workout and one WorkoutExercise row per assignment.
    Owner and every referenced exercise must exist, otherwise NotFound and nothing is written.
    """
    await _ensure_user(db, payload.user_id)
    await _ensure_exercises(db, payload.exercises)

    workout = Workout(
        user_id=payload.user_id,
        name=payload.name,
        description=payload.description,
        date=payload.date,
    )
    db.add(workout)
    await _flush(db)
    _add_assignments(db, workout.id, payload.exercises)
    await _flush(db)
    logger.info("Created workout %s with %d exercises", workout.id, len(payload.exercises))
    return await get_workout(db, workout.id)


async def update_workout(db: AsyncSession, workout_id: int, payload: WorkoutUpdate) -> Workout:
    """
    Patch scalar fields; a supplied `exercises` list replaces all existing assignments
    (delete then insert), it is never merged.
    """
    result = await db.execute(select(Workout).where(Workout.id == workout_id))
    workout = result.scalar_one_or_none()
    if not workout:
        raise NotFound("Workout not found")

    data = payload.model_dump(exclude_unset=True, exclude={"exercises"})
    if "user_id" in data:
        await _ensure_user(db, data["user_id"])
    if payload.exercises is not None:
        await _ensure_exercises(db, payload.exercises)

    for k, v in data.items():
        setattr(workout, k, v)

    if payload.exercises is not None:
        await db.execute(delete(WorkoutExercise).where(WorkoutExercise.workout_id == workout.id))
        _add_assignments(db, workout.id, payload.exercises)
        # the workout row itself may be untouched, so onupdate would not fire
        workout.updated_at = dt.datetime.now(dt.timezone.utc)
        logger.info("Replaced exercises of workout %s (%d now)", workout.id, len(payload.exercises))
    await _flush(db)
    return await get_workout(db, workout.id)


async def delete_workout(db: AsyncSession, workout_id: int) -> None:
    """Delete a workout; its assignments and results go with it (ON DELETE CASCADE)."""
    result = await db.execute(delete(Workout).where(Workout.id == workout_id))
    if result.rowcount == 0:
        raise NotFound("Workout not found")


async def generate_workout(db: AsyncSession, size: int) -> list[Exercise]:
    """Sample workout: the first `size` exercises. Placeholder until real generation exists."""
    result = await db.execute(select(Exercise).order_by(Exercise.id).limit(size))
    return list(result.scalars().all())


async def log_result(
    db: AsyncSession,
    workout_id: int,
    requesting_user_id: int,
    payload: WorkoutResultCreate,
) -> WorkoutResult:
    """
    Append a result for the caller's own workout.
    The lookup filters on id AND owner, so someone else's workout is indistinguishable from a missing one.
    """
    await _ensure_user(db, requesting_user_id)
    result = await db.execute(
        select(Workout.id).where(Workout.id == workout_id, Workout.user_id == requesting_user_id)
    )
    if result.scalar_one_or_none() is None:
        raise NotFound("Workout not found or does not belong to the user")

    workout_result = WorkoutResult(
        workout_id=workout_id,
        user_id=requesting_user_id,
        **payload.model_dump(),
    )
    db.add(workout_result)
    await _flush(db)
    await db.refresh(workout_result)
    return workout_result
