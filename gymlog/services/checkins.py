"""Daily check-ins and the streak overview built on them."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from gymlog.core.clock import local_day, utcnow
from gymlog.core.exceptions import InvalidInput, NotFound
from gymlog.db.store import DataStore
from gymlog.models.checkin import CheckIn
from gymlog.models.session import WorkoutSession
from gymlog.schemas.checkin import MonthlyStatsRead, StreakRead
from gymlog.services.streak import current_streak, longest_streak, monthly_stats

logger = logging.getLogger(__name__)

# Limit the streak scan to the last ~14 months so the query stays small
STREAK_LOOKBACK_DAYS = 430


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """UTC [start, end) of a calendar day in ``tz``."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), (start + timedelta(days=1)).astimezone(timezone.utc)


async def todays_check_in(store: DataStore, tz: tzinfo, now: datetime | None = None) -> CheckIn | None:
    start, end = day_bounds(local_day(now or utcnow(), tz), tz)
    rows = await store.fetch(CheckIn, CheckIn.timestamp >= start, CheckIn.timestamp < end, limit=1)
    return rows[0] if rows else None


async def check_in(
    store: DataStore,
    tz: tzinfo,
    notes: str = "",
    session_id: uuid.UUID | None = None,
    now: datetime | None = None,
) -> CheckIn:
    """Record today's check-in. Only one per calendar day."""
    now = now or utcnow()
    if await todays_check_in(store, tz, now) is not None:
        raise InvalidInput("Already checked in today")
    if session_id is not None and await store.get(WorkoutSession, session_id) is None:
        raise NotFound("Workout session not found")

    entry = CheckIn(id=uuid.uuid4(), timestamp=now, notes=notes, session_id=session_id)
    store.insert(entry)
    await store.save()
    logger.info("Checked in at %s", now.isoformat())
    return entry


async def recent_check_ins(store: DataStore, limit: int) -> list[CheckIn]:
    return await store.fetch(CheckIn, order_by=[CheckIn.timestamp.desc()], limit=limit)


async def streak_overview(store: DataStore, tz: tzinfo, today: date | None = None) -> StreakRead:
    today = today or local_day(utcnow(), tz)
    cutoff, _ = day_bounds(today - timedelta(days=STREAK_LOOKBACK_DAYS), tz)
    rows = await store.fetch(CheckIn, CheckIn.timestamp >= cutoff, order_by=[CheckIn.timestamp.desc()])
    stamps = [c.timestamp for c in rows]
    days = [local_day(ts, tz) for ts in stamps]
    return StreakRead(
        current_streak=current_streak(stamps, today=today, tz=tz),
        longest_streak=longest_streak(stamps, tz=tz),
        last_check_in_date=max(days) if days else None,
        checked_in_today=today in days,
        monthly=MonthlyStatsRead.model_validate(monthly_stats(stamps, today=today, tz=tz)),
    )
