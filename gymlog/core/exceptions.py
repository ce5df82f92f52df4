"""Domain errors raised by the session engine and mapped to HTTP responses in main."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gymlog.schemas.session import WorkoutSessionRead

if TYPE_CHECKING:
    from gymlog.models.session import WorkoutSession


class GymlogError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class SessionConflict(GymlogError):
    """An unfinished session already exists for the plan.

    Recoverable: the caller decides to resume it, abandon it or cancel.
    """

    status_code = 409

    def __init__(self, existing: WorkoutSession):
        super().__init__("An unfinished session already exists for this plan")
        self.existing = existing
        # Taken now: a rollback before the error is rendered expires ORM state
        self.snapshot = WorkoutSessionRead.model_validate(existing)


class PersistenceError(GymlogError):
    """A store read or write failed. The transaction was rolled back."""

    status_code = 503


class ConstraintViolation(PersistenceError):
    """The write was rejected by a uniqueness or foreign key constraint."""

    status_code = 409


class InvalidInput(GymlogError):
    """Rejected before any write (non-positive reps/load, bad state, ...)."""

    status_code = 400


class MissingSession(GymlogError):
    """An operation needing a current session was called without one."""

    status_code = 409

    def __init__(self, detail: str = "No active session. Start or resume one first."):
        super().__init__(detail)


class NotFound(GymlogError):
    status_code = 404
