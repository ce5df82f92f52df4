"""WorkoutPlan and Exercise schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gymlog.core.constants import (
    DEFAULT_REPS,
    DEFAULT_REST_SECONDS,
    DEFAULT_SETS,
    MAX_DEFAULT_REPS,
    MAX_DEFAULT_SETS,
    MAX_PLAN_NAME_LENGTH,
    MAX_REST_SECONDS,
    MIN_DEFAULT_REPS,
    MIN_DEFAULT_SETS,
)
from gymlog.core.enums import MuscleGroup


class ExerciseBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    muscle_group: MuscleGroup
    default_sets: int = Field(DEFAULT_SETS, ge=MIN_DEFAULT_SETS, le=MAX_DEFAULT_SETS)
    default_reps: int = Field(DEFAULT_REPS, ge=MIN_DEFAULT_REPS, le=MAX_DEFAULT_REPS)
    default_rest_seconds: int = Field(DEFAULT_REST_SECONDS, ge=0, le=MAX_REST_SECONDS)
    load: float | None = Field(None, gt=0)  # kg; omit for bodyweight


class ExerciseCreate(ExerciseBase):
    order: int | None = None  # appended after the last exercise when omitted


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    plan_id: UUID
    order: int


class WorkoutPlanCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_PLAN_NAME_LENGTH)
    description: str = ""
    is_favorite: bool = False
    exercises: list[ExerciseBase] = []


class WorkoutPlanUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_PLAN_NAME_LENGTH)
    description: str | None = None
    is_favorite: bool | None = None


class WorkoutPlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    name: str
    description: str
    created_date: datetime
    is_favorite: bool
    exercises: list[ExerciseRead] = []
