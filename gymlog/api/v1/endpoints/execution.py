"""Live workout execution for a plan: start, progress, sets and finalize."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from gymlog.api.v1.deps import get_manager, get_registry
from gymlog.core.exceptions import MissingSession, NotFound
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.models.plan import Exercise
from gymlog.models.session import ExerciseSet
from gymlog.schemas.session import (
    ExerciseSetCreate,
    SessionProgressRead,
    SetRecorderRead,
    WorkoutSessionDetailRead,
    WorkoutSessionRead,
)
from gymlog.services.execution import ExecutionRegistry
from gymlog.services.session_lifecycle import SessionLifecycleManager
from gymlog.services.set_recorder import SetRecorder
from gymlog.services.summary import session_detail

router = APIRouter()


async def open_recorder(
    store: DataStore, manager: SessionLifecycleManager, exercise_id: uuid.UUID
) -> SetRecorder:
    session = await manager.current_session()
    if session is None:
        raise MissingSession()
    exercise = await store.get(Exercise, exercise_id)
    if exercise is None or exercise.plan_id != manager.plan_id:
        raise NotFound("Exercise not found in this plan")
    return await SetRecorder.open(store, session, exercise)


@router.get("/{plan_id}/session", response_model=SessionProgressRead)
async def get_progress(manager: SessionLifecycleManager = Depends(get_manager)):
    """Current session (if any) with per-exercise status in plan order."""
    return await manager.progress()


@router.post("/{plan_id}/session", response_model=WorkoutSessionRead, status_code=201)
async def start_session(manager: SessionLifecycleManager = Depends(get_manager)):
    """
    Start a session for the plan. If one is still open, responds 409 with the
    existing session so the client can resume or abandon it.
    """
    return await manager.start_session()


@router.post("/{plan_id}/session/finalize", response_model=WorkoutSessionDetailRead)
async def finalize_session(
    plan_id: uuid.UUID,
    manager: SessionLifecycleManager = Depends(get_manager),
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
):
    """Complete the active session and return it with its summary."""
    session = await manager.finalize_session()
    registry.timer_for(plan_id).stop()
    sets = await store.fetch(
        ExerciseSet,
        ExerciseSet.session_id == session.id,
        order_by=[ExerciseSet.completed_date],
    )
    return session_detail(session, sets)


@router.post("/{plan_id}/session/exercises/{exercise_id}/complete", response_model=SessionProgressRead)
async def complete_exercise(
    exercise_id: uuid.UUID,
    manager: SessionLifecycleManager = Depends(get_manager),
):
    manager.mark_exercise_complete(exercise_id)
    return await manager.progress()


@router.get("/{plan_id}/session/exercises/{exercise_id}/sets", response_model=SetRecorderRead)
async def get_exercise_sets(
    exercise_id: uuid.UUID,
    manager: SessionLifecycleManager = Depends(get_manager),
    store: DataStore = Depends(get_store),
):
    """Sets recorded so far, the target and what was done last time."""
    recorder = await open_recorder(store, manager, exercise_id)
    return recorder.snapshot()


@router.post(
    "/{plan_id}/session/exercises/{exercise_id}/sets",
    response_model=SetRecorderRead,
    status_code=201,
)
async def record_set(
    exercise_id: uuid.UUID,
    payload: ExerciseSetCreate,
    manager: SessionLifecycleManager = Depends(get_manager),
    store: DataStore = Depends(get_store),
):
    """Record the next set for the exercise in the active session."""
    recorder = await open_recorder(store, manager, exercise_id)
    await recorder.record_set(payload.load, payload.reps, payload.notes)
    return recorder.snapshot()
