"""Tests for the session lifecycle manager."""

import uuid
from datetime import timedelta

import pytest

from gymlog.core.clock import utcnow
from gymlog.core.enums import ExerciseStatus
from gymlog.core.exceptions import InvalidInput, MissingSession, NotFound, PersistenceError, SessionConflict
from gymlog.models import ExerciseSet, WorkoutPlan, WorkoutSession
from gymlog.services.execution import ExecutionState
from gymlog.services.session_lifecycle import SessionLifecycleManager


async def open_sessions(store, plan_id):
    return await store.fetch(
        WorkoutSession, WorkoutSession.plan_id == plan_id, WorkoutSession.is_completed.is_(False)
    )


class TestStart:
    async def test_start_creates_and_adopts_session(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)

        session = await manager.start_session()

        assert manager.has_active_session
        assert manager.session_id == session.id
        assert session.is_completed is False
        assert session.end_date is None
        assert session.notes == ""

    async def test_second_start_conflicts_with_existing(self, store, plan):
        first = await (await SessionLifecycleManager.for_plan(store, plan.id)).start_session()
        other = await SessionLifecycleManager.for_plan(store, plan.id)

        with pytest.raises(SessionConflict) as exc_info:
            await other.start_session()

        assert exc_info.value.existing.id == first.id
        assert exc_info.value.snapshot.id == first.id
        assert not other.has_active_session
        assert len(await open_sessions(store, plan.id)) == 1

    async def test_unique_index_catches_racing_start(self, store, plan):
        winner = await (await SessionLifecycleManager.for_plan(store, plan.id)).start_session()
        winner_id = winner.id
        loser = await SessionLifecycleManager.for_plan(store, plan.id)

        real_find = loser.find_active_session
        calls = []

        async def stale_find():
            calls.append(1)
            return None if len(calls) == 1 else await real_find()

        loser.find_active_session = stale_find

        with pytest.raises(SessionConflict) as exc_info:
            await loser.start_session()

        assert exc_info.value.existing.id == winner_id
        assert len(await open_sessions(store, plan.id)) == 1

    async def test_unknown_plan(self, store):
        with pytest.raises(NotFound):
            await SessionLifecycleManager.for_plan(store, uuid.uuid4())

    async def test_state_of_other_plan_rejected(self, plan):
        with pytest.raises(ValueError):
            SessionLifecycleManager(plan, store=None, state=ExecutionState(plan_id=uuid.uuid4()))


class TestResumeAndAbandon:
    async def test_resume_adopts_session_and_counts_exercises_with_sets(self, store, db_session, plan):
        session = await (await SessionLifecycleManager.for_plan(store, plan.id)).start_session()
        bench = plan.exercises[0]
        db_session.add(
            ExerciseSet(
                id=uuid.uuid4(), session_id=session.id, exercise_id=bench.id, set_number=1, weight=80.0, reps=8
            )
        )
        await db_session.commit()

        # Fresh process: nothing in memory
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        assert not manager.has_active_session

        await manager.resume_session(session)

        assert manager.session_id == session.id
        assert manager.is_exercise_complete(bench)
        assert not manager.is_exercise_complete(plan.exercises[1])

    async def test_resume_completed_session_rejected(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        session = await manager.start_session()
        await manager.finalize_session()

        with pytest.raises(InvalidInput):
            await manager.resume_session(session)

    async def test_abandon_closes_session_and_clears_state(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        session = await manager.start_session()

        await manager.abandon_session(session)

        assert session.is_completed
        assert session.end_date is not None
        assert not manager.has_active_session
        # A new session can now be started
        assert (await manager.start_session()).id != session.id

    async def test_abandon_other_plans_session_rejected(self, store, db_session, plan):
        other_plan = WorkoutPlan(id=uuid.uuid4(), name="Leg Day")
        db_session.add(other_plan)
        await db_session.commit()
        other = await (await SessionLifecycleManager.for_plan(store, other_plan.id)).start_session()
        manager = await SessionLifecycleManager.for_plan(store, plan.id)

        with pytest.raises(InvalidInput):
            await manager.abandon_session(other)


class TestFinalize:
    async def test_finalize_without_session_writes_nothing(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)

        with pytest.raises(MissingSession):
            await manager.finalize_session()

        assert await store.fetch(WorkoutSession) == []

    async def test_finalize_completes_session(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        session = await manager.start_session()

        finalized = await manager.finalize_session()

        assert finalized.id == session.id
        assert finalized.is_completed
        assert finalized.end_date >= finalized.start_date
        assert not manager.has_active_session
        assert finalized.duration_seconds is not None

    async def test_finalize_twice_raises(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        await manager.start_session()
        await manager.finalize_session()

        with pytest.raises(MissingSession):
            await manager.finalize_session()

    async def test_finalize_rejects_start_in_future(self, store, db_session, plan):
        state = ExecutionState(plan_id=plan.id)
        manager = await SessionLifecycleManager.for_plan(store, plan.id, state)
        session = await manager.start_session()
        session.start_date = utcnow() + timedelta(hours=1)
        await db_session.commit()

        with pytest.raises(InvalidInput):
            await manager.finalize_session()

        assert session.is_completed is False
        assert state.session_id == session.id


class TestExerciseProgress:
    async def test_statuses(self, store, db_session, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        bench, pushup = plan.exercises

        assert await manager.exercise_status(bench) == ExerciseStatus.PENDING

        session = await manager.start_session()
        db_session.add(
            ExerciseSet(
                id=uuid.uuid4(), session_id=session.id, exercise_id=bench.id, set_number=1, weight=80.0, reps=8
            )
        )
        await db_session.commit()

        assert await manager.exercise_status(bench) == ExerciseStatus.IN_PROGRESS
        assert await manager.exercise_status(pushup) == ExerciseStatus.PENDING

        manager.mark_exercise_complete(bench)
        assert await manager.exercise_status(bench) == ExerciseStatus.COMPLETED

    async def test_mark_complete_requires_session(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)

        with pytest.raises(MissingSession):
            manager.mark_exercise_complete(plan.exercises[0])

    async def test_mark_complete_rejects_foreign_exercise(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        await manager.start_session()

        with pytest.raises(InvalidInput):
            manager.mark_exercise_complete(uuid.uuid4())

    async def test_progress_projection(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        await manager.start_session()
        manager.mark_exercise_complete(plan.exercises[1].id)

        progress = await manager.progress()

        assert progress.completed_count == 1
        assert progress.total_count == 2
        assert progress.percentage == 0.5
        assert progress.progress_text == "1/2 exercises complete"
        assert [e.name for e in progress.exercises] == ["Bench Press", "Push-up"]
        assert progress.exercises[1].status == ExerciseStatus.COMPLETED

    async def test_progress_without_session(self, store, plan):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)

        progress = await manager.progress()

        assert progress.session is None
        assert progress.completed_count == 0
        assert all(e.status == ExerciseStatus.PENDING for e in progress.exercises)


@pytest.fixture
def failing_saves(store, monkeypatch):
    """Make the next saves fail the way a lost database connection does."""

    def install():
        async def failing_save():
            await store.session.rollback()
            raise PersistenceError("Could not save changes")

        monkeypatch.setattr(store, "save", failing_save)

    return install


class TestFailedSaves:
    async def test_start_leaves_no_active_session(self, store, plan, failing_saves):
        plan_id = plan.id
        state = ExecutionState(plan_id=plan_id)
        manager = await SessionLifecycleManager.for_plan(store, plan_id, state)
        failing_saves()

        with pytest.raises(PersistenceError):
            await manager.start_session()

        assert state.session_id is None
        assert not manager.has_active_session
        assert await open_sessions(store, plan_id) == []

    async def test_finalize_keeps_session_active(self, store, plan, failing_saves):
        plan_id = plan.id
        state = ExecutionState(plan_id=plan_id)
        manager = await SessionLifecycleManager.for_plan(store, plan_id, state)
        session_id = (await manager.start_session()).id
        bench_id = plan.exercises[0].id
        manager.mark_exercise_complete(bench_id)
        failing_saves()

        with pytest.raises(PersistenceError):
            await manager.finalize_session()

        assert state.session_id == session_id
        assert state.completed_exercise_ids == {bench_id}
        assert [s.id for s in await open_sessions(store, plan_id)] == [session_id]

    async def test_abandon_keeps_session_active(self, store, plan, failing_saves):
        plan_id = plan.id
        state = ExecutionState(plan_id=plan_id)
        manager = await SessionLifecycleManager.for_plan(store, plan_id, state)
        session = await manager.start_session()
        session_id = session.id
        failing_saves()

        with pytest.raises(PersistenceError):
            await manager.abandon_session(session)

        assert state.session_id == session_id
        assert [s.id for s in await open_sessions(store, plan_id)] == [session_id]
