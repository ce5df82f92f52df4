"""End-of-session summary: duration, completed exercises, sets, reps and volume."""

from __future__ import annotations

from collections.abc import Iterable

from gymlog.models.session import ExerciseSet, WorkoutSession
from gymlog.schemas.session import ExerciseSetRead, SessionSummaryRead, WorkoutSessionDetailRead, WorkoutSessionRead


def format_duration(seconds: int) -> str:
    """1h 5min / 42min / 30s."""
    hours, rest = divmod(max(0, int(seconds)), 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}min"
    if minutes > 0:
        return f"{minutes}min"
    return f"{secs}s"


def session_summary(session: WorkoutSession, sets: Iterable[ExerciseSet]) -> SessionSummaryRead:
    """Totals for one session; an unfinished session reports zero duration."""
    sets = list(sets)
    duration = session.duration_seconds or 0
    return SessionSummaryRead(
        session_id=session.id,
        duration_seconds=duration,
        formatted_duration=format_duration(duration),
        completed_exercises=len({s.exercise_id for s in sets if s.exercise_id is not None}),
        total_sets=len(sets),
        total_reps=sum(s.reps for s in sets),
        total_volume=round(sum(s.volume for s in sets), 2),
    )


def session_detail(session: WorkoutSession, sets: Iterable[ExerciseSet]) -> WorkoutSessionDetailRead:
    sets = list(sets)
    return WorkoutSessionDetailRead(
        **WorkoutSessionRead.model_validate(session).model_dump(),
        sets=[ExerciseSetRead.model_validate(s) for s in sets],
        summary=session_summary(session, sets),
    )
