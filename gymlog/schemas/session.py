"""WorkoutSession, ExerciseSet and execution-progress schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, computed_field

from gymlog.core.enums import ExerciseStatus


class WorkoutSessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    plan_id: UUID
    start_date: datetime
    end_date: datetime | None = None
    is_completed: bool
    notes: str
    duration_seconds: int | None = None


class ExerciseSetCreate(BaseModel):
    # Range checks live in SetRecorder so rejections surface as InvalidInput
    reps: int
    load: float | None = None  # kg; omit for bodyweight
    notes: str = ""


class ExerciseSetRead(BaseModel):
    """Immutable snapshot of a persisted set."""

    model_config = ConfigDict(from_attributes=True, frozen=True)
    id: UUID
    session_id: UUID
    exercise_id: UUID | None = None
    set_number: int
    weight: float | None = None
    reps: int
    completed_date: datetime
    notes: str = ""
    volume: float = 0.0
    estimated_one_rep_max: float | None = None


class SetTarget(BaseModel):
    sets: int
    reps: int
    load: float | None = None
    rest_seconds: int


class LastPerformance(BaseModel):
    """What was done for this exercise last time (progressive overload hint)."""

    weight: float | None = None
    reps: int
    date: datetime

    @computed_field
    @property
    def formatted_text(self) -> str:
        weight = f"{self.weight:.1f} kg" if self.weight is not None else "bodyweight"
        return f"Last: {weight} × {self.reps} reps"


class SetRecorderRead(BaseModel):
    exercise_id: UUID
    session_id: UUID
    current_set_number: int
    sets_remaining: int
    is_last_set: bool
    progress_text: str
    target: SetTarget
    completed_sets: list[ExerciseSetRead] = []
    last_performance: LastPerformance | None = None


class ExerciseProgressRead(BaseModel):
    exercise_id: UUID
    name: str
    order: int
    status: ExerciseStatus


class SessionProgressRead(BaseModel):
    session: WorkoutSessionRead | None = None
    completed_count: int
    total_count: int
    percentage: float
    progress_text: str
    exercises: list[ExerciseProgressRead] = []


class SessionConflictRead(BaseModel):
    detail: str
    existing_session: WorkoutSessionRead


class SessionSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    session_id: UUID
    duration_seconds: int
    formatted_duration: str
    completed_exercises: int
    total_sets: int
    total_reps: int
    total_volume: float


class WorkoutSessionDetailRead(WorkoutSessionRead):
    sets: list[ExerciseSetRead] = []
    summary: SessionSummaryRead
