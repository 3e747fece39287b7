"""Workout, WorkoutExercise (join with attributes) and WorkoutResult models."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Workout(Base):
    """A planned workout owned by one user, with its exercise assignments."""

    __tablename__ = "workouts"
    __table_args__ = (Index("ix_workouts_user_id", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user: Mapped["User"] = relationship("User", back_populates="workouts")
    exercises: Mapped[list["WorkoutExercise"]] = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkoutExercise.exercise_id",
    )
    results: Mapped[list["WorkoutResult"]] = relationship(
        "WorkoutResult", back_populates="workout", cascade="all, delete-orphan", passive_deletes=True
    )


class WorkoutExercise(Base):
    """One exercise in one workout, with its prescription (sets/reps/duration/notes)."""

    __tablename__ = "workout_exercises"
    __table_args__ = (Index("ix_workout_exercises_exercise_id", "exercise_id"),)

    workout_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workouts.id", ondelete="CASCADE"), primary_key=True
    )
    exercise_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("exercises.id", ondelete="CASCADE"), primary_key=True
    )
    sets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="exercises")
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="workout_entries")


class WorkoutResult(Base):
    """A user's logged outcome for one performance of a workout."""

    __tablename__ = "workout_results"
    __table_args__ = (
        Index("ix_workout_results_workout_id", "workout_id"),
        Index("ix_workout_results_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workout_id: Mapped[int] = mapped_column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    result_value: Mapped[float | None] = mapped_column(Float, nullable=True)  # time, weight, reps...
    result_unit: Mapped[str | None] = mapped_column(String(50), nullable=True)  # "minutes", "kg", "reps"
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    performed_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    workout: Mapped["Workout"] = relationship("Workout", back_populates="results")
    user: Mapped["User"] = relationship("User", back_populates="workout_results")
