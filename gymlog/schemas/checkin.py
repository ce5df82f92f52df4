"""CheckIn and streak schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CheckInCreate(BaseModel):
    notes: str = ""
    session_id: UUID | None = None


class CheckInRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    timestamp: datetime
    notes: str
    session_id: UUID | None = None


class MonthlyStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    total_check_ins: int
    total_days_in_month: int
    percentage: float
    formatted_percentage: str


class StreakRead(BaseModel):
    current_streak: int
    longest_streak: int
    last_check_in_date: date | None = None
    checked_in_today: bool = False
    monthly: MonthlyStatsRead
