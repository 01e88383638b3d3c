"""Health check endpoint."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scoped_ids.adapters.persistence.database import get_session
from scoped_ids.adapters.persistence.schema_version import AlembicSchemaVersion
from scoped_ids.application.use_cases.allocate_internal_id import REQUIRED_SCHEMA_VERSION
from scoped_ids.domain.errors import StorageFailure
from scoped_ids.infrastructure.api.dependencies import get_schema_version

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    session: AsyncSession = Depends(get_session),
    schema: AlembicSchemaVersion = Depends(get_schema_version),
):
    """Check database connectivity and whether counter tracking is available."""
    schema_version = None
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        schema_version = await schema.current_version()
        db_status = "connected"
    except (SQLAlchemyError, StorageFailure) as e:
        logger.warning("Health check failed: %s", e)
        db_status = f"error: {e}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "schema_version": schema_version,
        "required_schema_version": REQUIRED_SCHEMA_VERSION,
        "internal_ids_available": (
            schema_version is not None and schema_version >= REQUIRED_SCHEMA_VERSION
        ),
        "service": "scoped-ids",
    }
