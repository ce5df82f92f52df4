"""Tests for set recording and last-performance lookup."""

import uuid
from datetime import timedelta

import pytest

from gymlog.core.clock import utcnow
from gymlog.core.enums import MuscleGroup
from gymlog.core.exceptions import ConstraintViolation, InvalidInput, PersistenceError
from gymlog.models import Exercise, ExerciseSet, WorkoutPlan, WorkoutSession
from gymlog.schemas.session import LastPerformance
from gymlog.services.session_lifecycle import SessionLifecycleManager
from gymlog.services.set_recorder import SetRecorder, validate_set_input


@pytest.fixture
async def active_session(store, plan) -> WorkoutSession:
    manager = await SessionLifecycleManager.for_plan(store, plan.id)
    return await manager.start_session()


@pytest.fixture
def bench(plan):
    return plan.exercises[0]


class TestValidation:
    @pytest.mark.parametrize("reps", [0, -3])
    def test_non_positive_reps_rejected(self, reps):
        with pytest.raises(InvalidInput):
            validate_set_input(60.0, reps)

    @pytest.mark.parametrize("load", [0, -20.0, float("nan")])
    def test_non_positive_load_rejected(self, load):
        with pytest.raises(InvalidInput):
            validate_set_input(load, 5)

    def test_bodyweight_accepted(self):
        validate_set_input(None, 12)


class TestRecording:
    async def test_first_set_is_number_one(self, store, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)

        assert recorder.current_set_number == 1
        assert recorder.progress_text == "Set 1 of 3"
        assert recorder.target.load == 80.0
        assert recorder.last_performance is None

    async def test_record_set_persists_and_advances(self, store, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)

        recorded = await recorder.record_set(80.0, 8)

        assert recorded.set_number == 1
        assert recorded.volume == 640.0
        assert recorder.current_set_number == 2
        assert recorder.sets_remaining == 2
        rows = await store.fetch(ExerciseSet, ExerciseSet.session_id == active_session.id)
        assert [(r.set_number, r.weight, r.reps) for r in rows] == [(1, 80.0, 8)]

    async def test_zero_reps_rejected_without_write(self, store, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)

        with pytest.raises(InvalidInput):
            await recorder.record_set(80.0, 0)

        assert recorder.current_set_number == 1
        assert recorder.completed_sets == []
        assert await store.fetch(ExerciseSet) == []

    async def test_last_set_flag(self, store, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)
        for _ in range(3):
            await recorder.record_set(80.0, 8)

        assert recorder.is_last_set
        assert recorder.sets_remaining == 0
        assert recorder.progress_text == "Set 4 of 3"

    async def test_numbering_continues_after_reopen(self, store, active_session, bench):
        first = await SetRecorder.open(store, active_session, bench)
        await first.record_set(80.0, 8)
        await first.record_set(80.0, 7)

        reopened = await SetRecorder.open(store, active_session, bench)

        assert reopened.current_set_number == 3
        assert [s.reps for s in reopened.completed_sets] == [8, 7]

    async def test_failed_save_keeps_set_number(self, store, db_session, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)
        session_id = active_session.id
        # Another writer takes set 1 behind the recorder's back
        db_session.add(
            ExerciseSet(id=uuid.uuid4(), session_id=session_id, exercise_id=bench.id, set_number=1, reps=5)
        )
        await db_session.commit()

        with pytest.raises(ConstraintViolation):
            await recorder.record_set(100.0, 3)

        assert recorder.current_set_number == 1
        assert recorder.completed_sets == []
        rows = await store.fetch(ExerciseSet, ExerciseSet.session_id == session_id)
        assert len(rows) == 1

    async def test_completed_session_rejects_sets(self, store, plan, bench):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        await manager.start_session()
        session = await manager.finalize_session()
        recorder = await SetRecorder.open(store, session, bench)

        with pytest.raises(InvalidInput):
            await recorder.record_set(80.0, 8)

    async def test_exercise_from_other_plan_rejected(self, store, db_session, active_session):
        other = WorkoutPlan(id=uuid.uuid4(), name="Leg Day")
        squat = Exercise(id=uuid.uuid4(), plan_id=other.id, name="Squat", muscle_group=MuscleGroup.LEGS, order=0)
        db_session.add_all([other, squat])
        await db_session.commit()

        with pytest.raises(InvalidInput):
            await SetRecorder.open(store, active_session, squat)


class TestLastPerformance:
    async def test_uses_latest_completed_session_of_plan(self, store, db_session, plan, bench):
        now = utcnow()
        older = WorkoutSession(
            id=uuid.uuid4(), plan_id=plan.id, start_date=now - timedelta(days=7),
            end_date=now - timedelta(days=7) + timedelta(hours=1), is_completed=True,
        )
        newer = WorkoutSession(
            id=uuid.uuid4(), plan_id=plan.id, start_date=now - timedelta(days=2),
            end_date=now - timedelta(days=2) + timedelta(hours=1), is_completed=True,
        )
        db_session.add_all([older, newer])
        db_session.add_all(
            [
                ExerciseSet(
                    id=uuid.uuid4(), session_id=older.id, exercise_id=bench.id, set_number=1,
                    weight=75.0, reps=8, completed_date=older.start_date,
                ),
                ExerciseSet(
                    id=uuid.uuid4(), session_id=newer.id, exercise_id=bench.id, set_number=1,
                    weight=80.0, reps=6, completed_date=newer.start_date,
                ),
            ]
        )
        await db_session.commit()

        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        current = await manager.start_session()
        recorder = await SetRecorder.open(store, current, bench)

        assert recorder.last_performance is not None
        assert recorder.last_performance.weight == 80.0
        assert recorder.last_performance.reps == 6
        assert recorder.last_performance.formatted_text == "Last: 80.0 kg × 6 reps"

    async def test_ignores_current_and_unfinished_sessions(self, store, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)
        await recorder.record_set(80.0, 8)

        assert await recorder.fetch_last_performance() is None

    async def test_bodyweight_text(self):
        last = LastPerformance(weight=None, reps=12, date=utcnow())

        assert last.formatted_text == "Last: bodyweight × 12 reps"

    async def test_snapshot(self, store, active_session, bench):
        recorder = await SetRecorder.open(store, active_session, bench)
        await recorder.record_set(None, 10)

        snap = recorder.snapshot()

        assert snap.current_set_number == 2
        assert snap.completed_sets[0].weight is None
        assert snap.completed_sets[0].estimated_one_rep_max is None

    async def test_lookup_failure_reads_as_no_prior_data(self, store, plan, bench, monkeypatch):
        manager = await SessionLifecycleManager.for_plan(store, plan.id)
        first = await manager.start_session()
        await (await SetRecorder.open(store, first, bench)).record_set(80.0, 8)
        await manager.finalize_session()
        recorder = await SetRecorder.open(store, await manager.start_session(), bench)
        assert recorder.last_performance is not None

        async def failing_fetch(*args, **kwargs):
            raise PersistenceError("Database unavailable")

        monkeypatch.setattr(store, "fetch", failing_fetch)

        assert await recorder.fetch_last_performance() is None
        assert recorder.last_performance is None
