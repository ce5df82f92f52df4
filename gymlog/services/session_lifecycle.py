"""Workout session lifecycle: start, resume, abandon, finalize and exercise progress.

Per plan the session moves NoSession -> Active -> Completed. At most one
unfinished session exists per plan; a second start reports a SessionConflict
carrying the existing session and lets the caller pick resume or abandon.
"""

from __future__ import annotations

import logging
import uuid
from typing import NamedTuple

from sqlalchemy.orm import selectinload

from gymlog.core.clock import as_utc, utcnow
from gymlog.core.enums import ExerciseStatus
from gymlog.core.exceptions import ConstraintViolation, InvalidInput, MissingSession, NotFound, SessionConflict
from gymlog.db.store import DataStore
from gymlog.models.plan import Exercise, WorkoutPlan
from gymlog.models.session import ExerciseSet, WorkoutSession
from gymlog.schemas.session import ExerciseProgressRead, SessionProgressRead, WorkoutSessionRead
from gymlog.services.execution import ExecutionState

logger = logging.getLogger(__name__)


class PlanExercise(NamedTuple):
    id: uuid.UUID
    name: str
    order: int


def _exercise_id(exercise: Exercise | PlanExercise | uuid.UUID) -> uuid.UUID:
    return exercise if isinstance(exercise, uuid.UUID) else exercise.id


class SessionLifecycleManager:
    """
    Owns the session state machine for one plan.

    The manager keeps only plain values (plan exercise list, adopted session id,
    completion marks in ``state``); session rows are re-read from the store when
    needed, and in-memory state changes only after a save succeeds.
    """

    def __init__(self, plan: WorkoutPlan, store: DataStore, state: ExecutionState | None = None):
        self.store = store
        self.plan_id = plan.id
        self.plan_name = plan.name
        self.exercises = [
            PlanExercise(e.id, e.name, e.order) for e in sorted(plan.exercises, key=lambda e: e.order)
        ]
        self.state = state or ExecutionState(plan_id=plan.id)
        if self.state.plan_id != plan.id:
            raise ValueError("Execution state belongs to another plan")

    @classmethod
    async def for_plan(
        cls, store: DataStore, plan_id: uuid.UUID, state: ExecutionState | None = None
    ) -> SessionLifecycleManager:
        plan = await store.get(WorkoutPlan, plan_id, options=[selectinload(WorkoutPlan.exercises)])
        if plan is None:
            raise NotFound("Workout plan not found")
        return cls(plan, store, state)

    @property
    def session_id(self) -> uuid.UUID | None:
        return self.state.session_id

    @property
    def has_active_session(self) -> bool:
        return self.state.session_id is not None

    async def current_session(self) -> WorkoutSession | None:
        if self.state.session_id is None:
            return None
        return await self.store.get(WorkoutSession, self.state.session_id)

    async def find_active_session(self) -> WorkoutSession | None:
        """The plan's unfinished session, newest first, if any."""
        rows = await self.store.fetch(
            WorkoutSession,
            WorkoutSession.plan_id == self.plan_id,
            WorkoutSession.is_completed.is_(False),
            order_by=[WorkoutSession.start_date.desc()],
            limit=1,
        )
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def start_session(self) -> WorkoutSession:
        """Create and adopt a new session, or raise SessionConflict with the open one."""
        existing = await self.find_active_session()
        if existing is not None:
            raise SessionConflict(existing)

        session = WorkoutSession(
            id=uuid.uuid4(),
            plan_id=self.plan_id,
            start_date=utcnow(),
            is_completed=False,
            notes="",
        )
        self.store.insert(session)
        try:
            await self.store.save()
        except ConstraintViolation:
            # Lost a race with another start: the unique index kept one session
            existing = await self.find_active_session()
            if existing is not None:
                raise SessionConflict(existing) from None
            raise

        self.state.adopt(session.id)
        logger.info("Started session %s for plan %s", session.id, self.plan_id)
        return session

    async def resume_session(self, existing: WorkoutSession) -> WorkoutSession:
        """
        Adopt an unfinished session. Exercises with recorded sets count as completed,
        since marks from an earlier run are not persisted.
        """
        self._check_owned(existing)
        if existing.is_completed:
            raise InvalidInput("Cannot resume a completed session")

        completed = await self._exercise_ids_with_sets(existing.id)
        if self.state.session_id == existing.id:
            completed |= self.state.completed_exercise_ids
        self.state.adopt(existing.id, completed)
        logger.info("Resumed session %s for plan %s", existing.id, self.plan_id)
        return existing

    async def abandon_session(self, existing: WorkoutSession) -> WorkoutSession:
        """Force-close a session regardless of how many exercises were done."""
        self._check_owned(existing)
        if existing.is_completed:
            return existing

        existing.end_date = max(utcnow(), as_utc(existing.start_date))
        existing.is_completed = True
        await self.store.save()

        if self.state.session_id == existing.id:
            self.state.clear()
        logger.info("Abandoned session %s for plan %s", existing.id, self.plan_id)
        return existing

    async def finalize_session(self) -> WorkoutSession:
        """Complete the current session. The only terminal transition."""
        if self.state.session_id is None:
            raise MissingSession()
        session = await self.current_session()
        if session is None:
            self.state.clear()
            raise MissingSession("The active session no longer exists")
        if session.is_completed:
            self.state.clear()
            raise MissingSession("The active session was already closed")

        end_date = utcnow()
        if end_date < as_utc(session.start_date):
            raise InvalidInput("End date cannot be before start date")
        session.end_date = end_date
        session.is_completed = True
        session.validate()
        await self.store.save()

        self.state.clear()
        logger.info("Finalized session %s for plan %s", session.id, self.plan_id)
        return session

    # ------------------------------------------------------------------
    # Exercise progress
    # ------------------------------------------------------------------

    def mark_exercise_complete(self, exercise: Exercise | PlanExercise | uuid.UUID) -> None:
        if self.state.session_id is None:
            raise MissingSession()
        ex_id = _exercise_id(exercise)
        if ex_id not in {e.id for e in self.exercises}:
            raise InvalidInput("Exercise does not belong to this plan")
        self.state.completed_exercise_ids.add(ex_id)

    def is_exercise_complete(self, exercise: Exercise | PlanExercise | uuid.UUID) -> bool:
        return _exercise_id(exercise) in self.state.completed_exercise_ids

    async def exercise_status(self, exercise: Exercise | PlanExercise | uuid.UUID) -> ExerciseStatus:
        """completed if marked, in_progress if it has sets, else pending. Never stored."""
        if self.state.session_id is None:
            return ExerciseStatus.PENDING
        ex_id = _exercise_id(exercise)
        if ex_id in self.state.completed_exercise_ids:
            return ExerciseStatus.COMPLETED
        with_sets = await self._exercise_ids_with_sets(self.state.session_id)
        return ExerciseStatus.IN_PROGRESS if ex_id in with_sets else ExerciseStatus.PENDING

    async def progress(self) -> SessionProgressRead:
        """Progress projection for the current session (plan order)."""
        session = await self.current_session()
        with_sets = await self._exercise_ids_with_sets(session.id) if session is not None else set()
        rows = []
        for ex in self.exercises:
            if session is None:
                status = ExerciseStatus.PENDING
            elif ex.id in self.state.completed_exercise_ids:
                status = ExerciseStatus.COMPLETED
            elif ex.id in with_sets:
                status = ExerciseStatus.IN_PROGRESS
            else:
                status = ExerciseStatus.PENDING
            rows.append(ExerciseProgressRead(exercise_id=ex.id, name=ex.name, order=ex.order, status=status))

        total = len(self.exercises)
        completed = sum(1 for r in rows if r.status == ExerciseStatus.COMPLETED)
        return SessionProgressRead(
            session=WorkoutSessionRead.model_validate(session) if session is not None else None,
            completed_count=completed,
            total_count=total,
            percentage=completed / total if total else 0.0,
            progress_text=f"{completed}/{total} exercises complete",
            exercises=rows,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_owned(self, session: WorkoutSession) -> None:
        if session.plan_id != self.plan_id:
            raise InvalidInput("Session belongs to another plan")

    async def _exercise_ids_with_sets(self, session_id: uuid.UUID) -> set[uuid.UUID]:
        sets = await self.store.fetch(ExerciseSet, ExerciseSet.session_id == session_id)
        return {s.exercise_id for s in sets if s.exercise_id is not None}
