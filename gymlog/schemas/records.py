"""Personal record and per-exercise history schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PersonalRecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    weight: float
    reps: int
    date: datetime
    formatted_record: str


class ExerciseStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    exercise_id: UUID | None = None
    exercise_name: str
    last_execution_date: datetime
    total_sets_executed: int
    personal_record: PersonalRecordRead | None = None
    best_estimated_one_rep_max: float | None = None
