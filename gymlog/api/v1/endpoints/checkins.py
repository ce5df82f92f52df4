"""Daily check-ins and streak endpoints."""

from __future__ import annotations

from datetime import tzinfo

from fastapi import APIRouter, Depends

from gymlog.api.v1.deps import get_tz
from gymlog.core.config import get_settings
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.schemas.checkin import CheckInCreate, CheckInRead, StreakRead
from gymlog.services.checkins import check_in, recent_check_ins, streak_overview

router = APIRouter()


@router.get("", response_model=list[CheckInRead])
async def list_check_ins(
    store: DataStore = Depends(get_store),
    limit: int | None = None,
):
    """Most recent check-ins first."""
    return await recent_check_ins(store, limit or get_settings().checkin_lookback_limit)


@router.post("", response_model=CheckInRead, status_code=201)
async def create_check_in(
    payload: CheckInCreate,
    store: DataStore = Depends(get_store),
    tz: tzinfo = Depends(get_tz),
):
    """Check in for today (at most once per calendar day)."""
    return await check_in(store, tz, notes=payload.notes, session_id=payload.session_id)


@router.get("/streak", response_model=StreakRead)
async def get_streak(
    store: DataStore = Depends(get_store),
    tz: tzinfo = Depends(get_tz),
):
    """
    Current streak (consecutive days ending today or yesterday), longest
    streak, last check-in day and this month's check-in rate.
    """
    return await streak_overview(store, tz)
