"""ORM models - import all so Base.metadata is complete for migrations."""

from gymlog.models.checkin import CheckIn
from gymlog.models.plan import Exercise, WorkoutPlan
from gymlog.models.session import ExerciseSet, WorkoutSession

__all__ = [
    "CheckIn",
    "Exercise",
    "ExerciseSet",
    "WorkoutPlan",
    "WorkoutSession",
]
