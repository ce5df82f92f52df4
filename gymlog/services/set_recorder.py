"""Set recording for one exercise inside one workout session."""

from __future__ import annotations

import logging
import math
import uuid
from collections.abc import Iterable

from sqlalchemy import and_
from sqlalchemy.orm import selectinload

from gymlog.core.clock import as_utc, utcnow
from gymlog.core.exceptions import InvalidInput, PersistenceError
from gymlog.db.store import DataStore
from gymlog.models.plan import Exercise
from gymlog.models.session import ExerciseSet, WorkoutSession
from gymlog.schemas.session import ExerciseSetRead, LastPerformance, SetRecorderRead, SetTarget

logger = logging.getLogger(__name__)


def validate_set_input(load: float | None, reps: int) -> None:
    """Reject non-positive reps or load before anything is written."""
    if isinstance(reps, bool) or not isinstance(reps, int) or reps <= 0:
        raise InvalidInput("Reps must be a whole number greater than zero")
    if load is None:
        return
    if isinstance(load, bool) or not isinstance(load, (int, float)) or not math.isfinite(load) or load <= 0:
        raise InvalidInput("Load must be greater than zero (omit it for bodyweight)")


class SetRecorder:
    """
    Sequences and persists the sets of one (exercise, session) pair.

    Built with :meth:`open`, which picks up sets already recorded for the pair so
    numbering continues after a restart. Completed sets are kept as immutable
    snapshots; ``current_set_number`` only advances after a successful save.
    """

    def __init__(
        self,
        store: DataStore,
        session: WorkoutSession,
        exercise: Exercise,
        existing: Iterable[ExerciseSet] = (),
    ):
        self.store = store
        self.session_id = session.id
        self.plan_id = session.plan_id
        self.session_completed = session.is_completed
        self.exercise_id = exercise.id
        self.exercise_name = exercise.name
        self.target = SetTarget(
            sets=exercise.default_sets,
            reps=exercise.default_reps,
            load=exercise.load,
            rest_seconds=exercise.default_rest_seconds,
        )
        self.completed_sets: list[ExerciseSetRead] = [
            ExerciseSetRead.model_validate(s) for s in sorted(existing, key=lambda s: s.set_number)
        ]
        self.current_set_number = self.completed_sets[-1].set_number + 1 if self.completed_sets else 1
        self.last_performance: LastPerformance | None = None

    @classmethod
    async def open(cls, store: DataStore, session: WorkoutSession, exercise: Exercise) -> SetRecorder:
        """Load the pair's existing sets and the last-time reference."""
        if exercise.plan_id != session.plan_id:
            raise InvalidInput("Exercise does not belong to this session's plan")
        existing = await store.fetch(
            ExerciseSet,
            ExerciseSet.session_id == session.id,
            ExerciseSet.exercise_id == exercise.id,
            order_by=[ExerciseSet.set_number],
        )
        recorder = cls(store, session, exercise, existing)
        await recorder.fetch_last_performance()
        return recorder

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    @property
    def is_last_set(self) -> bool:
        """True once the upcoming set number is past the default set count."""
        return self.current_set_number > self.target.sets

    @property
    def sets_remaining(self) -> int:
        return max(self.target.sets - len(self.completed_sets), 0)

    @property
    def progress_text(self) -> str:
        return f"Set {self.current_set_number} of {self.target.sets}"

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    async def record_set(self, load: float | None, reps: int, notes: str = "") -> ExerciseSetRead:
        """Persist the next set. The set number is only consumed on success."""
        validate_set_input(load, reps)
        if self.session_completed:
            raise InvalidInput("Session is already completed")

        set_ = ExerciseSet(
            id=uuid.uuid4(),
            session_id=self.session_id,
            exercise_id=self.exercise_id,
            set_number=self.current_set_number,
            weight=float(load) if load is not None else None,
            reps=reps,
            completed_date=utcnow(),
            notes=notes,
        )
        self.store.insert(set_)
        await self.store.save()

        snapshot = ExerciseSetRead.model_validate(set_)
        self.completed_sets.append(snapshot)
        self.current_set_number += 1
        logger.info(
            "Recorded set %s of %s (%s x %s) in session %s",
            snapshot.set_number,
            self.exercise_name,
            snapshot.weight if snapshot.weight is not None else "bodyweight",
            snapshot.reps,
            self.session_id,
        )
        return snapshot

    async def fetch_last_performance(self) -> LastPerformance | None:
        """
        Most recent set of this exercise in an earlier completed session of the plan.
        Best effort: failures are logged and reported as "no prior data".
        """
        try:
            rows = await self.store.fetch(
                ExerciseSet,
                ExerciseSet.exercise_id == self.exercise_id,
                ExerciseSet.session_id != self.session_id,
                ExerciseSet.session.has(
                    and_(WorkoutSession.plan_id == self.plan_id, WorkoutSession.is_completed.is_(True))
                ),
                order_by=[ExerciseSet.completed_date.desc()],
                limit=1,
                options=[selectinload(ExerciseSet.session)],
            )
        except PersistenceError as e:
            logger.warning("Last performance lookup failed for %s: %s", self.exercise_id, e)
            self.last_performance = None
            return None

        if not rows:
            self.last_performance = None
            return None
        last = rows[0]
        past = last.session
        when = past.end_date or past.start_date
        self.last_performance = LastPerformance(weight=last.weight, reps=last.reps, date=as_utc(when))
        return self.last_performance

    def snapshot(self) -> SetRecorderRead:
        return SetRecorderRead(
            exercise_id=self.exercise_id,
            session_id=self.session_id,
            current_set_number=self.current_set_number,
            sets_remaining=self.sets_remaining,
            is_last_set=self.is_last_set,
            progress_text=self.progress_text,
            target=self.target,
            completed_sets=list(self.completed_sets),
            last_performance=self.last_performance,
        )
