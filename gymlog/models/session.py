"""WorkoutSession and ExerciseSet models."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymlog.core.clock import as_utc, utcnow
from gymlog.core.constants import BRZYCKI_INTERCEPT, BRZYCKI_MAX_REPS, BRZYCKI_SLOPE
from gymlog.core.exceptions import InvalidInput
from gymlog.db.base import Base


class WorkoutSession(Base):
    """One timed execution of a plan. Terminal once ``is_completed``."""

    __tablename__ = "workout_sessions"
    __table_args__ = (
        Index("ix_workout_sessions_start_date", "start_date"),
        # At most one unfinished session per plan
        Index(
            "uq_workout_sessions_active_plan",
            "plan_id",
            unique=True,
            sqlite_where=text("is_completed = 0"),
            postgresql_where=text("NOT is_completed"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    plan: Mapped["WorkoutPlan"] = relationship("WorkoutPlan", back_populates="sessions")
    sets: Mapped[list["ExerciseSet"]] = relationship(
        "ExerciseSet",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ExerciseSet.completed_date",
    )

    def validate(self) -> None:
        """Raise InvalidInput unless completed => end_date and end_date >= start_date."""
        if self.is_completed and self.end_date is None:
            raise InvalidInput("A completed session must have an end date")
        if self.end_date is not None and as_utc(self.end_date) < as_utc(self.start_date):
            raise InvalidInput("End date cannot be before start date")

    @property
    def duration_seconds(self) -> int | None:
        if self.end_date is None:
            return None
        return max(0, int((as_utc(self.end_date) - as_utc(self.start_date)).total_seconds()))


class ExerciseSet(Base):
    """One recorded set: reps at an optional load (None = bodyweight)."""

    __tablename__ = "exercise_sets"
    __table_args__ = (
        UniqueConstraint(
            "session_id", "exercise_id", "set_number", name="uq_exercise_sets_session_exercise_number"
        ),
        Index("ix_exercise_sets_session_id", "session_id"),
        Index("ix_exercise_sets_exercise_id_completed_date", "exercise_id", "completed_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    completed_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    notes: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="sets")
    exercise: Mapped["Exercise | None"] = relationship("Exercise", back_populates="sets")

    @property
    def volume(self) -> float:
        return (self.weight or 0.0) * self.reps

    @property
    def estimated_one_rep_max(self) -> float | None:
        """Brzycki estimate; None for bodyweight sets, the load itself from 37 reps up."""
        if self.weight is None:
            return None
        if self.reps >= BRZYCKI_MAX_REPS:
            return self.weight
        return self.weight / (BRZYCKI_INTERCEPT - BRZYCKI_SLOPE * self.reps)
