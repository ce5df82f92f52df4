"""Workout session history plus resume/abandon of unfinished sessions."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from gymlog.api.v1.deps import get_registry
from gymlog.core.config import get_settings
from gymlog.core.exceptions import NotFound
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.models.session import ExerciseSet, WorkoutSession
from gymlog.schemas.session import SessionProgressRead, WorkoutSessionDetailRead, WorkoutSessionRead
from gymlog.services.execution import ExecutionRegistry
from gymlog.services.session_lifecycle import SessionLifecycleManager
from gymlog.services.summary import session_detail

router = APIRouter()


async def load_session(store: DataStore, session_id: uuid.UUID) -> WorkoutSession:
    session = await store.get(WorkoutSession, session_id)
    if session is None:
        raise NotFound("Workout session not found")
    return session


async def manager_for(
    store: DataStore, registry: ExecutionRegistry, session: WorkoutSession
) -> SessionLifecycleManager:
    return await SessionLifecycleManager.for_plan(store, session.plan_id, registry.state_for(session.plan_id))


@router.get("", response_model=list[WorkoutSessionRead])
async def list_sessions(
    store: DataStore = Depends(get_store),
    plan_id: uuid.UUID | None = None,
    include_open: bool = False,
    limit: int | None = None,
):
    """Session history, newest first. Only completed sessions unless include_open."""
    criteria = []
    if plan_id is not None:
        criteria.append(WorkoutSession.plan_id == plan_id)
    if not include_open:
        criteria.append(WorkoutSession.is_completed.is_(True))
    return await store.fetch(
        WorkoutSession,
        *criteria,
        order_by=[WorkoutSession.start_date.desc()],
        limit=limit or get_settings().history_limit,
    )


@router.get("/{session_id}", response_model=WorkoutSessionDetailRead)
async def get_session(
    session_id: uuid.UUID,
    store: DataStore = Depends(get_store),
):
    session = await load_session(store, session_id)
    sets = await store.fetch(
        ExerciseSet,
        ExerciseSet.session_id == session.id,
        order_by=[ExerciseSet.completed_date],
    )
    return session_detail(session, sets)


@router.post("/{session_id}/resume", response_model=SessionProgressRead)
async def resume_session(
    session_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
):
    """Adopt an unfinished session as the plan's active one."""
    session = await load_session(store, session_id)
    manager = await manager_for(store, registry, session)
    await manager.resume_session(session)
    return await manager.progress()


@router.post("/{session_id}/abandon", response_model=WorkoutSessionRead)
async def abandon_session(
    session_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
):
    """Close an unfinished session without finishing its exercises."""
    session = await load_session(store, session_id)
    manager = await manager_for(store, registry, session)
    was_active = manager.session_id == session.id
    await manager.abandon_session(session)
    if was_active:
        registry.timer_for(session.plan_id).stop()
    return session


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
):
    """Delete a session and its sets. Check-ins keep their day but lose the link."""
    session = await load_session(store, session_id)
    plan_id = session.plan_id
    await store.delete(session)
    await store.save()
    state = registry.state_for(plan_id)
    if state.session_id == session_id:
        state.clear()
        registry.timer_for(plan_id).stop()
    return None
