"""Rest timer controls. One timer per plan, kept in memory."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends

from gymlog.api.v1.deps import get_registry
from gymlog.core.exceptions import InvalidInput, NotFound
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.models.plan import Exercise, WorkoutPlan
from gymlog.schemas.timer import RestTimerForeground, RestTimerRead, RestTimerStart
from gymlog.services.execution import ExecutionRegistry
from gymlog.services.rest_timer import RestTimer

router = APIRouter()


async def plan_timer(
    plan_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
) -> RestTimer:
    if await store.get(WorkoutPlan, plan_id) is None:
        raise NotFound("Workout plan not found")
    return registry.timer_for(plan_id)


@router.get("/{plan_id}/timer", response_model=RestTimerRead)
async def get_timer(timer: RestTimer = Depends(plan_timer)):
    return timer


@router.post("/{plan_id}/timer/start", response_model=RestTimerRead)
async def start_timer(
    plan_id: uuid.UUID,
    payload: RestTimerStart,
    timer: RestTimer = Depends(plan_timer),
    store: DataStore = Depends(get_store),
):
    """
    Start (or restart) the rest countdown. Without duration_seconds the
    exercise's default rest is used; an active countdown is replaced.
    """
    duration = payload.duration_seconds
    label = None
    if payload.exercise_id is not None:
        exercise = await store.get(Exercise, payload.exercise_id)
        if exercise is None or exercise.plan_id != plan_id:
            raise NotFound("Exercise not found in this plan")
        label = exercise.name
        if duration is None:
            duration = exercise.default_rest_seconds
    if duration is None:
        raise InvalidInput("Give duration_seconds or an exercise_id")
    timer.start(duration, label=label)
    return timer


@router.post("/{plan_id}/timer/pause", response_model=RestTimerRead)
async def pause_timer(timer: RestTimer = Depends(plan_timer)):
    timer.pause()
    return timer


@router.post("/{plan_id}/timer/resume", response_model=RestTimerRead)
async def resume_timer(timer: RestTimer = Depends(plan_timer)):
    timer.resume()
    return timer


@router.post("/{plan_id}/timer/skip", response_model=RestTimerRead)
async def skip_timer(timer: RestTimer = Depends(plan_timer)):
    timer.skip()
    return timer


@router.post("/{plan_id}/timer/stop", response_model=RestTimerRead)
async def stop_timer(timer: RestTimer = Depends(plan_timer)):
    timer.stop()
    return timer


@router.put("/{plan_id}/timer/foreground", response_model=RestTimerRead)
async def set_foreground(
    payload: RestTimerForeground,
    timer: RestTimer = Depends(plan_timer),
):
    """Report whether the client is visible; completion while hidden schedules a notification."""
    timer.set_foreground(payload.in_foreground)
    return timer
