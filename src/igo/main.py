"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from igo.activities.router import router as activities_router
from igo.activities.seed import seed_activities
from igo.challenge.router import router as challenge_router
from igo.challenge.seed import seed_quotes
from igo.config import get_settings
from igo.dashboard.router import router as dashboard_router
from igo.database import close_db, init_db, session_scope
from igo.health.router import router as health_router
from igo.middleware import setup_middleware
from igo.redis_client import close_redis, init_redis
from igo.topics.router import router as topics_router

logger = logging.getLogger(__name__)


async def run_seeds() -> None:
    """Idempotent reference data: the quote pool and the Focus Hour activity."""
    async with session_scope() as db:
        await seed_quotes(db)
        await seed_activities(db)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    if settings.seed_on_startup:
        try:
            await run_seeds()
        except Exception:
            logger.warning("Seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="IG Obsessed API",
        description="Topics, activities, timer sessions and the 64-day focus challenge",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(topics_router)
    app.include_router(activities_router)
    app.include_router(challenge_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
