"""Workout plan CRUD endpoints."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import selectinload

from gymlog.api.v1.deps import get_registry
from gymlog.core.exceptions import NotFound
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.models.plan import Exercise, WorkoutPlan
from gymlog.schemas.plan import ExerciseCreate, ExerciseRead, WorkoutPlanCreate, WorkoutPlanRead, WorkoutPlanUpdate
from gymlog.services.execution import ExecutionRegistry

router = APIRouter()


async def load_plan(store: DataStore, plan_id: uuid.UUID) -> WorkoutPlan:
    plan = await store.get(WorkoutPlan, plan_id, options=[selectinload(WorkoutPlan.exercises)])
    if plan is None:
        raise NotFound("Workout plan not found")
    return plan


@router.get("", response_model=list[WorkoutPlanRead])
async def list_plans(
    store: DataStore = Depends(get_store),
    favorites_only: bool = False,
):
    """List plans (favorites first, then newest)."""
    criteria = [WorkoutPlan.is_favorite.is_(True)] if favorites_only else []
    return await store.fetch(
        WorkoutPlan,
        *criteria,
        order_by=[WorkoutPlan.is_favorite.desc(), WorkoutPlan.created_date.desc()],
        options=[selectinload(WorkoutPlan.exercises)],
    )


@router.post("", response_model=WorkoutPlanRead, status_code=201)
async def create_plan(
    payload: WorkoutPlanCreate,
    store: DataStore = Depends(get_store),
):
    """Create a plan; exercises keep the order they are given in."""
    plan = WorkoutPlan(
        id=uuid.uuid4(),
        name=payload.name.strip(),
        description=payload.description,
        is_favorite=payload.is_favorite,
    )
    store.insert(plan)
    for position, ex in enumerate(payload.exercises):
        store.insert(Exercise(id=uuid.uuid4(), plan_id=plan.id, order=position, **ex.model_dump()))
    await store.save()
    return await load_plan(store, plan.id)


@router.get("/{plan_id}", response_model=WorkoutPlanRead)
async def get_plan(
    plan_id: uuid.UUID,
    store: DataStore = Depends(get_store),
):
    return await load_plan(store, plan_id)


@router.patch("/{plan_id}", response_model=WorkoutPlanRead)
async def update_plan(
    plan_id: uuid.UUID,
    payload: WorkoutPlanUpdate,
    store: DataStore = Depends(get_store),
):
    """Rename, edit the description or toggle favorite."""
    plan = await load_plan(store, plan_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is not None:
            setattr(plan, k, v)
    await store.save()
    return plan


@router.delete("/{plan_id}", status_code=204)
async def delete_plan(
    plan_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
):
    """Delete a plan with its exercises, sessions and sets."""
    plan = await load_plan(store, plan_id)
    await store.delete(plan)
    await store.save()
    registry.discard(plan_id)
    return None


@router.post("/{plan_id}/exercises", response_model=ExerciseRead, status_code=201)
async def add_exercise(
    plan_id: uuid.UUID,
    payload: ExerciseCreate,
    store: DataStore = Depends(get_store),
):
    """Append an exercise (or place it at a free ``order``)."""
    plan = await load_plan(store, plan_id)
    data = payload.model_dump(exclude={"order"})
    order = payload.order
    if order is None:
        order = max((e.order for e in plan.exercises), default=-1) + 1
    exercise = Exercise(id=uuid.uuid4(), plan_id=plan.id, order=order, **data)
    store.insert(exercise)
    await store.save()
    return exercise
