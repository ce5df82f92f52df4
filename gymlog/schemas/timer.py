"""Rest timer schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gymlog.core.enums import TimerState


class RestTimerStart(BaseModel):
    # Falls back to the exercise's default rest when omitted
    duration_seconds: int | None = Field(None, gt=0)
    exercise_id: UUID | None = None


class RestTimerForeground(BaseModel):
    in_foreground: bool


class RestTimerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    state: TimerState
    label: str
    total_time: int
    remaining_time: int
    progress: float
    formatted_time: str
    in_foreground: bool
