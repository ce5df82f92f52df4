"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gymlog.api.v1 import api_router
from gymlog.core.config import get_settings
from gymlog.core.exceptions import GymlogError, SessionConflict
from gymlog.db.session import engine
from gymlog.schemas.session import SessionConflictRead
from gymlog.services.execution import ExecutionRegistry

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: nothing to warm up (use Alembic for the schema); shutdown: stop timers, dispose engine."""
    logger.info("Starting %s (%s)", settings.app_name, settings.environment)
    yield
    app.state.registry.shutdown()
    await engine.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SessionConflict)
    async def session_conflict_handler(request: Request, exc: SessionConflict):
        body = SessionConflictRead(detail=exc.detail, existing_session=exc.snapshot)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))

    @app.exception_handler(GymlogError)
    async def gymlog_error_handler(request: Request, exc: GymlogError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_application(registry: ExecutionRegistry | None = None) -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # Execution contexts and rest timers live for the whole process
    app.state.registry = registry or ExecutionRegistry()

    # CORS: allow everything in debug, localhost in development, CORS_ORIGINS otherwise
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "gymlog API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
