"""Personal records and per-exercise history.

A personal record is the heaviest set for an exercise, tie-broken by the most
reps at that weight. Bodyweight-only histories have no record.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import selectinload

from gymlog.core.clock import as_utc
from gymlog.db.store import DataStore
from gymlog.models.session import ExerciseSet


@dataclass(frozen=True)
class PersonalRecord:
    weight: float
    reps: int
    date: datetime

    @property
    def formatted_record(self) -> str:
        return f"{self.weight:.1f}kg × {self.reps}"


@dataclass(frozen=True)
class ExerciseStats:
    exercise_id: uuid.UUID | None
    exercise_name: str
    last_execution_date: datetime
    total_sets_executed: int
    personal_record: PersonalRecord | None
    best_estimated_one_rep_max: float | None


def personal_record(sets: Iterable[ExerciseSet]) -> PersonalRecord | None:
    weighted = [s for s in sets if s.weight is not None]
    if not weighted:
        return None
    max_weight = max(s.weight for s in weighted)
    best = max((s for s in weighted if s.weight == max_weight), key=lambda s: s.reps)
    return PersonalRecord(weight=max_weight, reps=best.reps, date=as_utc(best.completed_date))


def exercise_stats(sets: Iterable[ExerciseSet], name: str) -> ExerciseStats:
    sets = sorted(sets, key=lambda s: as_utc(s.completed_date), reverse=True)
    one_rms = [s.estimated_one_rep_max for s in sets if s.estimated_one_rep_max is not None]
    return ExerciseStats(
        exercise_id=sets[0].exercise_id,
        exercise_name=name,
        last_execution_date=as_utc(sets[0].completed_date),
        total_sets_executed=len(sets),
        personal_record=personal_record(sets),
        best_estimated_one_rep_max=round(max(one_rms), 1) if one_rms else None,
    )


def exercise_history(sets: Iterable[ExerciseSet]) -> list[ExerciseStats]:
    """Stats per executed exercise, most recently executed first. Sets need ``exercise`` loaded."""
    grouped: dict[uuid.UUID, list[ExerciseSet]] = {}
    names: dict[uuid.UUID, str] = {}
    for s in sets:
        if s.exercise_id is None or s.exercise is None:
            continue
        grouped.setdefault(s.exercise_id, []).append(s)
        names[s.exercise_id] = s.exercise.name
    stats = [exercise_stats(group, names[ex_id]) for ex_id, group in grouped.items()]
    return sorted(stats, key=lambda st: st.last_execution_date, reverse=True)


async def load_exercise_history(store: DataStore, exercise_id: uuid.UUID | None = None) -> list[ExerciseStats]:
    criteria = [ExerciseSet.exercise_id.isnot(None)]
    if exercise_id is not None:
        criteria.append(ExerciseSet.exercise_id == exercise_id)
    sets = await store.fetch(
        ExerciseSet,
        *criteria,
        order_by=[ExerciseSet.completed_date.desc()],
        options=[selectinload(ExerciseSet.exercise)],
    )
    return exercise_history(sets)
