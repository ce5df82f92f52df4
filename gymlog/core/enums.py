"""Shared enums for models and API."""

from enum import Enum


class MuscleGroup(str, Enum):
    """Primary muscle group an exercise trains."""

    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    ABS = "abs"
    CARDIO = "cardio"


class ExerciseStatus(str, Enum):
    """Derived progress of one exercise inside the current session."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"  # At least one set recorded, not marked done
    COMPLETED = "completed"  # Explicitly marked done


class TimerState(str, Enum):
    """Rest timer states."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
