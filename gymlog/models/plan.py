"""WorkoutPlan and Exercise models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Float, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.core.clock import utcnow
from gymlog.core.constants import DEFAULT_REPS, DEFAULT_REST_SECONDS, DEFAULT_SETS
from gymlog.core.enums import MuscleGroup
from gymlog.db.base import Base


class WorkoutPlan(Base):
    """Named, reusable list of exercises. Owns its exercises and sessions."""

    __tablename__ = "workout_plans"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    created_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    exercises: Mapped[list["Exercise"]] = relationship(
        "Exercise",
        back_populates="plan",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Exercise.order",
    )
    sessions: Mapped[list["WorkoutSession"]] = relationship(
        "WorkoutSession",
        back_populates="plan",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Exercise(Base):
    """One exercise of a plan with its default target (sets x reps @ load, rest)."""

    __tablename__ = "exercises"
    __table_args__ = (UniqueConstraint("plan_id", "order", name="uq_exercises_plan_order"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    muscle_group: Mapped[MuscleGroup] = mapped_column(Enum(MuscleGroup), nullable=False)
    default_sets: Mapped[int] = mapped_column(Integer, default=DEFAULT_SETS, nullable=False)
    default_reps: Mapped[int] = mapped_column(Integer, default=DEFAULT_REPS, nullable=False)
    default_rest_seconds: Mapped[int] = mapped_column(Integer, default=DEFAULT_REST_SECONDS, nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    load: Mapped[float | None] = mapped_column(Float, nullable=True)  # kg; None = bodyweight

    plan: Mapped["WorkoutPlan"] = relationship("WorkoutPlan", back_populates="exercises")
    sets: Mapped[list["ExerciseSet"]] = relationship(
        "ExerciseSet", back_populates="exercise", passive_deletes=True
    )
