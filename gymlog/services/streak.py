"""Check-in streaks: consecutive calendar days with at least one check-in.

Pure functions. Input is any iterable of datetimes (or dates), unordered and
possibly duplicated; every value is reduced to its calendar day in ``tz`` first.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo

from gymlog.core.clock import local_day, utcnow

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class MonthlyStats:
    total_check_ins: int
    total_days_in_month: int

    @property
    def percentage(self) -> float:
        if self.total_days_in_month <= 0:
            return 0.0
        return self.total_check_ins / self.total_days_in_month * 100

    @property
    def formatted_percentage(self) -> str:
        return f"{self.percentage:.0f}%"


def calendar_days(timestamps: Iterable[datetime | date], tz: tzinfo = timezone.utc) -> set[date]:
    """Unique calendar days covered by ``timestamps``."""
    return {local_day(ts, tz) for ts in timestamps}


def _today(today: date | None, tz: tzinfo) -> date:
    return today if today is not None else local_day(utcnow(), tz)


def current_streak(
    timestamps: Iterable[datetime | date],
    today: date | None = None,
    tz: tzinfo = timezone.utc,
) -> int:
    """
    Length of the run ending on the most recent check-in day.

    The run counts only while it is still alive: the most recent day must be
    today or yesterday. Days after ``today`` are ignored.
    """
    today = _today(today, tz)
    days = {d for d in calendar_days(timestamps, tz) if d <= today}
    if not days:
        return 0

    most_recent = max(days)
    if today - most_recent > ONE_DAY:
        return 0

    streak = 0
    day = most_recent
    while day in days:
        streak += 1
        day -= ONE_DAY
    return streak


def longest_streak(timestamps: Iterable[datetime | date], tz: tzinfo = timezone.utc) -> int:
    """Longest run of consecutive days ever recorded."""
    days = sorted(calendar_days(timestamps, tz), reverse=True)
    if not days:
        return 0

    longest = 1
    run = 1
    for i in range(1, len(days)):
        if days[i] == days[i - 1] - ONE_DAY:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def monthly_stats(
    timestamps: Iterable[datetime | date],
    today: date | None = None,
    tz: tzinfo = timezone.utc,
) -> MonthlyStats:
    """Check-in days in the month containing ``today``."""
    today = _today(today, tz)
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    in_month = {
        d for d in calendar_days(timestamps, tz) if d.year == today.year and d.month == today.month
    }
    return MonthlyStats(total_check_ins=len(in_month), total_days_in_month=days_in_month)
