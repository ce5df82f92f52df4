"""Shared endpoint dependencies."""

from __future__ import annotations

import uuid
from datetime import tzinfo

from fastapi import Depends, Request

from gymlog.core.clock import resolve_tz
from gymlog.core.config import get_settings
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.services.execution import ExecutionRegistry
from gymlog.services.session_lifecycle import SessionLifecycleManager


def get_registry(request: Request) -> ExecutionRegistry:
    return request.app.state.registry


def get_tz() -> tzinfo:
    return resolve_tz(get_settings().timezone)


async def get_manager(
    plan_id: uuid.UUID,
    store: DataStore = Depends(get_store),
    registry: ExecutionRegistry = Depends(get_registry),
) -> SessionLifecycleManager:
    """Lifecycle manager for ``plan_id`` bound to the plan's in-memory execution state."""
    return await SessionLifecycleManager.for_plan(store, plan_id, registry.state_for(plan_id))
