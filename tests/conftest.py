"""Pytest configuration and fixtures for backend tests."""

import uuid
from collections.abc import Callable
from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gymlog.core.enums import MuscleGroup
from gymlog.db.base import Base
from gymlog.db.session import build_engine, get_db
from gymlog.db.store import DataStore
from gymlog.main import app as main_app
from gymlog.models import Exercise, WorkoutPlan
from gymlog.services.execution import ExecutionRegistry
from gymlog.services.rest_timer import RestTimer


# -------------------------------------------------------------------------
# Timer doubles
# -------------------------------------------------------------------------


class ManualTicker:
    """Ticker driven by the test instead of the event loop."""

    def __init__(self):
        self.callback: Callable[[], None] | None = None
        self.starts = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self.callback = None

    def advance(self, seconds: int = 1) -> None:
        for _ in range(seconds):
            if self.callback is None:
                return
            self.callback()


class RecordingNotifier:
    def __init__(self):
        self.scheduled: list[dict] = []
        self.cancelled = 0

    def schedule_one_shot(self, title: str, body: str, delay_seconds: float, identifier: str) -> None:
        self.scheduled.append(
            {"title": title, "body": body, "delay_seconds": delay_seconds, "identifier": identifier}
        )

    def cancel_all(self) -> None:
        self.cancelled += 1


class RecordingKeepAlive:
    def __init__(self):
        self.begun = 0
        self.ended = 0

    def begin(self, name, on_expire):
        self.begun += 1
        return f"token-{self.begun}"

    def end(self, token):
        self.ended += 1


class CountingCue:
    def __init__(self):
        self.plays = 0

    def play(self) -> None:
        self.plays += 1


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def keep_alive() -> RecordingKeepAlive:
    return RecordingKeepAlive()


@pytest.fixture
def cue() -> CountingCue:
    return CountingCue()


@pytest.fixture
def timer(ticker, notifier, keep_alive, cue) -> RestTimer:
    return RestTimer(ticker=ticker, notifier=notifier, keep_alive=keep_alive, cue=cue)


@pytest.fixture
def registry() -> ExecutionRegistry:
    """Registry whose timers never touch the event loop."""
    return ExecutionRegistry(timer_factory=lambda: RestTimer(ticker=ManualTicker()))


# -------------------------------------------------------------------------
# Database Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
async def async_engine():
    """Create an async in-memory SQLite engine (foreign keys on) for testing."""
    engine = build_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(db_session: AsyncSession) -> DataStore:
    return DataStore(db_session)


@pytest.fixture
async def plan(db_session: AsyncSession) -> WorkoutPlan:
    """Push day: bench (3x8 @ 80kg, 90s rest) then push-ups (bodyweight)."""
    plan = WorkoutPlan(id=uuid.uuid4(), name="Push Day", description="")
    db_session.add(plan)
    db_session.add_all(
        [
            Exercise(
                id=uuid.uuid4(),
                plan_id=plan.id,
                name="Bench Press",
                muscle_group=MuscleGroup.CHEST,
                default_sets=3,
                default_reps=8,
                default_rest_seconds=90,
                order=0,
                load=80.0,
            ),
            Exercise(
                id=uuid.uuid4(),
                plan_id=plan.id,
                name="Push-up",
                muscle_group=MuscleGroup.CHEST,
                default_sets=2,
                default_reps=15,
                default_rest_seconds=60,
                order=1,
            ),
        ]
    )
    await db_session.commit()
    await db_session.refresh(plan, ["exercises"])
    return plan


# -------------------------------------------------------------------------
# API Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def app(db_session: AsyncSession, registry: ExecutionRegistry) -> FastAPI:
    """The application bound to the test database and a manual-tick registry."""

    async def override_get_db():
        yield db_session

    original_registry = main_app.state.registry
    main_app.dependency_overrides[get_db] = override_get_db
    main_app.state.registry = registry
    yield main_app
    main_app.dependency_overrides.clear()
    main_app.state.registry = original_registry


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
