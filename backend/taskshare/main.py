"""TaskShare API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskShareError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskshare.api.error_handlers import register_error_handlers
from taskshare.api.routes import auth, billing, health, invites, shares, tasks
from taskshare.config import get_settings
from taskshare.infrastructure import database
from taskshare.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("TaskShare API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("TaskShare API shutting down")


app = FastAPI(
    title="TaskShare API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(invites.router)
app.include_router(tasks.router)
app.include_router(shares.router)
app.include_router(billing.router)

register_error_handlers(app)
