"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from socialquest.auth.router import router as auth_router
from socialquest.challenges.router import router as challenges_router
from socialquest.config import get_settings
from socialquest.database import close_db, init_db
from socialquest.gamification.router import router as gamification_router
from socialquest.health.router import router as health_router
from socialquest.middleware import setup_middleware
from socialquest.redis_client import close_redis, init_redis
from socialquest.social.router import router as social_router
from socialquest.users.router import router as users_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SocialQuest API",
        description="Backend API for SocialQuest, a gamified social feed",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(social_router)
    app.include_router(challenges_router)
    app.include_router(gamification_router)

    return app
