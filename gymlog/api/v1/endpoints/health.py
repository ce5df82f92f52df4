"""Health check endpoints for monitoring."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from gymlog.api.v1.deps import get_registry
from gymlog.core.config import get_settings
from gymlog.core.exceptions import PersistenceError
from gymlog.db.session import get_store
from gymlog.db.store import DataStore
from gymlog.models.plan import WorkoutPlan
from gymlog.services.execution import ExecutionRegistry

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health(registry: ExecutionRegistry = Depends(get_registry)):
    """Liveness plus the number of rest timers in flight. Includes built_at if GYMLOG_BUILT_AT is set."""
    settings = get_settings()
    payload: dict = {
        "status": "ok",
        "app": settings.app_name,
        "environment": settings.environment,
        "active_timers": registry.active_timers,
    }
    built_at = os.environ.get("GYMLOG_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(store: DataStore = Depends(get_store)):
    """Readiness: the store answers a query."""
    try:
        await store.fetch(WorkoutPlan, limit=1)
    except PersistenceError as e:
        logger.warning("Readiness check failed: %s", e.detail)
        return JSONResponse(status_code=503, content={"status": "error", "database": e.detail})
    return {"status": "ok", "database": "connected"}
