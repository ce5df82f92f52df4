"""API v1 router aggregation."""

from fastapi import APIRouter

from gymlog.api.v1.endpoints import (
    checkins,
    execution,
    health,
    plans,
    records,
    sessions,
    timers,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(execution.router, prefix="/plans", tags=["execution"])
api_router.include_router(timers.router, prefix="/plans", tags=["rest-timer"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(checkins.router, prefix="/checkins", tags=["checkins"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
