"""Platform capabilities used by the rest timer.

Hosts that can keep work alive in the background, post local notifications or
play a completion cue plug in their own implementations. The no-op versions
only log, for hosts without such primitives (and for the HTTP server).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def schedule_one_shot(self, title: str, body: str, delay_seconds: float, identifier: str) -> None: ...

    def cancel_all(self) -> None: ...


class BackgroundKeepAlive(Protocol):
    def begin(self, name: str, on_expire: Callable[[], None]) -> Any:
        """Ask the host for a grace period; returns a token for ``end``."""
        ...

    def end(self, token: Any) -> None: ...


class CompletionCue(Protocol):
    def play(self) -> None:
        """Haptic and/or audio feedback when a rest period finishes."""
        ...


class NoOpNotifier:
    def schedule_one_shot(self, title: str, body: str, delay_seconds: float, identifier: str) -> None:
        logger.debug("Notification skipped (no notifier): %s - %s", title, body)

    def cancel_all(self) -> None:
        pass


class NoOpKeepAlive:
    def begin(self, name: str, on_expire: Callable[[], None]) -> Any:
        return None

    def end(self, token: Any) -> None:
        pass


class NoOpCue:
    def play(self) -> None:
        logger.debug("Completion cue skipped (no cue device)")
