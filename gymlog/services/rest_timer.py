"""Rest timer: a one-second countdown between sets.

States: idle -> running -> (paused <-> running) -> completed. ``stop`` resets to
idle, ``skip`` jumps straight to completed. The timer is single-writer: it is
only touched from the event loop that drives its ticker, never from threads.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

from gymlog.core.constants import REST_NOTIFICATION_DELAY_SECONDS, REST_NOTIFICATION_ID
from gymlog.core.enums import TimerState
from gymlog.services.capabilities import (
    BackgroundKeepAlive,
    CompletionCue,
    NoOpCue,
    NoOpKeepAlive,
    NoOpNotifier,
    Notifier,
)

logger = logging.getLogger(__name__)


class Ticker(Protocol):
    """Calls ``callback`` once per interval until cancelled."""

    def start(self, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class AsyncioTicker:
    """Ticker backed by a task on the running event loop."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable[[], None]) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    async def _run(self, callback: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                callback()
            except Exception:
                logger.exception("Rest timer tick failed; stopping ticker")
                return

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None


CompletionListener = Callable[["RestTimer"], None]


class RestTimer:
    """Countdown with pause/resume/skip/stop and background-safe completion."""

    def __init__(
        self,
        *,
        ticker: Ticker | None = None,
        notifier: Notifier | None = None,
        keep_alive: BackgroundKeepAlive | None = None,
        cue: CompletionCue | None = None,
        label: str = "Rest",
    ):
        self.ticker: Ticker = ticker or AsyncioTicker()
        self.notifier: Notifier = notifier or NoOpNotifier()
        self.keep_alive: BackgroundKeepAlive = keep_alive or NoOpKeepAlive()
        self.cue: CompletionCue = cue or NoOpCue()
        self.label = label

        self.state = TimerState.IDLE
        self.total_time = 0
        self.remaining_time = 0
        self.in_foreground = True

        self._listeners: list[CompletionListener] = []
        self._keep_alive_token: Any = None
        self._keep_alive_held = False
        self._notification_pending = False

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.state == TimerState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.state == TimerState.PAUSED

    @property
    def is_completed(self) -> bool:
        return self.state == TimerState.COMPLETED

    @property
    def progress(self) -> float:
        if self.total_time <= 0:
            return 0.0
        value = (self.total_time - self.remaining_time) / self.total_time
        return min(1.0, max(0.0, value))

    @property
    def formatted_time(self) -> str:
        remaining = max(0, int(self.remaining_time))
        return f"{remaining // 60:02d}:{remaining % 60:02d}"

    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, duration: int, label: str | None = None) -> None:
        """Begin a countdown of ``duration`` seconds. Non-positive durations are ignored."""
        if duration <= 0:
            return
        if self.state in (TimerState.RUNNING, TimerState.PAUSED):
            self.stop()
        elif self._notification_pending:
            self._cancel_notifications()

        if label is not None:
            self.label = label
        self.total_time = int(duration)
        self.remaining_time = int(duration)
        self.state = TimerState.RUNNING
        self._begin_background()
        self.ticker.start(self.tick)
        logger.debug("Rest timer started: %ss (%s)", duration, self.label)

    def pause(self) -> None:
        if self.state != TimerState.RUNNING:
            return
        self.ticker.cancel()
        self.state = TimerState.PAUSED

    def resume(self) -> None:
        if self.state != TimerState.PAUSED:
            return
        self.state = TimerState.RUNNING
        self.ticker.start(self.tick)

    def skip(self) -> None:
        """Finish the rest period now, without the cue or a notification."""
        if self.state == TimerState.IDLE:
            return
        was_completed = self.state == TimerState.COMPLETED
        self._halt()
        self.state = TimerState.COMPLETED
        if not was_completed:
            self._notify_listeners()

    def stop(self) -> None:
        """Cancel the countdown and reset to idle."""
        self._halt()
        self.state = TimerState.IDLE

    def set_foreground(self, in_foreground: bool) -> None:
        self.in_foreground = in_foreground

    def tick(self) -> None:
        """Advance one second. Only meaningful while running."""
        if self.state != TimerState.RUNNING:
            return
        self.remaining_time = max(0, self.remaining_time - 1)
        if self.remaining_time == 0:
            self._complete()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _halt(self) -> None:
        self.ticker.cancel()
        self.remaining_time = 0
        self._end_background()
        self._cancel_notifications()

    def _complete(self) -> None:
        self.ticker.cancel()
        self.state = TimerState.COMPLETED
        self.remaining_time = 0
        try:
            self.cue.play()
        except Exception as e:
            logger.warning("Completion cue failed: %s", e)
        if not self.in_foreground:
            self._schedule_notification()
        self._end_background()
        logger.debug("Rest timer completed (%s)", self.label)
        self._notify_listeners()

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Rest timer completion listener failed")

    def _schedule_notification(self) -> None:
        try:
            self.notifier.schedule_one_shot(
                "Rest complete",
                f"{self.label}: time for your next set",
                REST_NOTIFICATION_DELAY_SECONDS,
                REST_NOTIFICATION_ID,
            )
            self._notification_pending = True
        except Exception as e:
            logger.warning("Could not schedule rest notification: %s", e)

    def _cancel_notifications(self) -> None:
        try:
            self.notifier.cancel_all()
        except Exception as e:
            logger.warning("Could not cancel rest notifications: %s", e)
        self._notification_pending = False

    def _begin_background(self) -> None:
        self._end_background()
        try:
            self._keep_alive_token = self.keep_alive.begin("rest-timer", self._end_background)
            self._keep_alive_held = True
        except Exception as e:
            logger.warning("Background keep-alive unavailable: %s", e)

    def _end_background(self) -> None:
        if not self._keep_alive_held:
            return
        token, self._keep_alive_token = self._keep_alive_token, None
        self._keep_alive_held = False
        try:
            self.keep_alive.end(token)
        except Exception as e:
            logger.warning("Could not release background keep-alive: %s", e)
