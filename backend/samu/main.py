"""SAMU Meme Contest API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SamuError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - The contest scheduler runs only while the app is up, and only when enabled

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Local uploads served from /uploads; with R2 configured the files live on the
      bucket's public URL and the mount simply serves nothing
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from samu.api.error_handlers import register_error_handlers
from samu.api.routes import (
    contests, goods, health, memes, nfts, partners, revenue, rewards, uploads,
    users, votes, wallet, webhooks,
)
from samu.config import get_settings
from samu.infrastructure import database
from samu.infrastructure.observability import setup_logging
from samu.scheduler import ContestScheduler

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
    os.makedirs(settings.upload_dir, exist_ok=True)

    scheduler = None
    if settings.contest_scheduler_enabled:
        scheduler = ContestScheduler(settings.contest_scheduler_interval_seconds)
        scheduler.start()
    logger.info("SAMU API started")
    yield
    logger.info("SAMU API shutting down")
    if scheduler:
        await scheduler.stop()
    if database.db_manager:
        await database.db_manager.dispose()


app = FastAPI(
    title="SAMU Meme Contest API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(memes.router)
app.include_router(votes.router)
app.include_router(users.router)
app.include_router(wallet.router)
app.include_router(contests.admin_router)
app.include_router(contests.router)
app.include_router(goods.router)
app.include_router(revenue.router)
app.include_router(rewards.router)
app.include_router(uploads.router)
app.include_router(nfts.router)
app.include_router(partners.router)
app.include_router(webhooks.router)

app.mount(
    "/uploads",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)
