"""Per-exercise history and personal records."""

import uuid

from fastapi import APIRouter, Depends

from gymlog.core.exceptions import NotFound
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.schemas.records import ExerciseStatsRead
from gymlog.services.records import load_exercise_history

router = APIRouter()


@router.get("/exercises", response_model=list[ExerciseStatsRead])
async def list_exercise_records(store: DataStore = Depends(get_store)):
    """Every executed exercise, most recently executed first."""
    return await load_exercise_history(store)


@router.get("/exercises/{exercise_id}", response_model=ExerciseStatsRead)
async def get_exercise_record(
    exercise_id: uuid.UUID,
    store: DataStore = Depends(get_store),
):
    history = await load_exercise_history(store, exercise_id)
    if not history:
        raise NotFound("No sets recorded for this exercise")
    return history[0]
