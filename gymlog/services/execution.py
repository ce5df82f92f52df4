"""In-memory execution contexts, one per plan.

Holds what must outlive a single request but is deliberately not persisted:
the adopted session id, the exercises explicitly marked complete, and the
plan's single rest timer.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from gymlog.core.config import get_settings
from gymlog.services.rest_timer import AsyncioTicker, RestTimer

logger = logging.getLogger(__name__)


@dataclass
class ExecutionState:
    plan_id: uuid.UUID
    session_id: uuid.UUID | None = None
    completed_exercise_ids: set[uuid.UUID] = field(default_factory=set)

    def adopt(self, session_id: uuid.UUID, completed: Iterable[uuid.UUID] = ()) -> None:
        self.session_id = session_id
        self.completed_exercise_ids = set(completed)

    def clear(self) -> None:
        self.session_id = None
        self.completed_exercise_ids = set()


def default_timer_factory() -> RestTimer:
    return RestTimer(ticker=AsyncioTicker(get_settings().rest_timer_tick_seconds))


class ExecutionRegistry:
    """Per-plan execution states and rest timers (exactly one timer per plan)."""

    def __init__(self, timer_factory: Callable[[], RestTimer] | None = None):
        self.timer_factory = timer_factory or default_timer_factory
        self._states: dict[uuid.UUID, ExecutionState] = {}
        self._timers: dict[uuid.UUID, RestTimer] = {}

    def state_for(self, plan_id: uuid.UUID) -> ExecutionState:
        state = self._states.get(plan_id)
        if state is None:
            state = self._states[plan_id] = ExecutionState(plan_id=plan_id)
        return state

    def timer_for(self, plan_id: uuid.UUID) -> RestTimer:
        timer = self._timers.get(plan_id)
        if timer is None:
            timer = self._timers[plan_id] = self.timer_factory()
        return timer

    @property
    def active_timers(self) -> int:
        """Timers currently counting down or paused."""
        return sum(1 for t in self._timers.values() if t.is_running or t.is_paused)

    def discard(self, plan_id: uuid.UUID) -> None:
        """Forget a plan's context (plan deleted); its timer is stopped."""
        timer = self._timers.pop(plan_id, None)
        if timer is not None:
            timer.stop()
        self._states.pop(plan_id, None)

    def shutdown(self) -> None:
        for timer in self._timers.values():
            timer.stop()
        logger.debug("Stopped %d rest timer(s)", len(self._timers))
        self._timers.clear()
        self._states.clear()
