"""scoped-ids — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from scoped_ids.adapters.persistence.database import engine
from scoped_ids.infrastructure.api.routes_health import router as health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="scoped-ids",
        description="Per-project gapless internal id allocation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(health_router, prefix="/api")

    return app


app = create_app()
