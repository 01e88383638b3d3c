"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scoped_ids.adapters.persistence.database import get_session
from scoped_ids.adapters.persistence.repositories import SqlInternalIdRepository
from scoped_ids.adapters.persistence.schema_version import AlembicSchemaVersion
from scoped_ids.application.use_cases.allocate_internal_id import InternalIdAllocator


def get_schema_version(session: AsyncSession = Depends(get_session)) -> AlembicSchemaVersion:
    return AlembicSchemaVersion(session)


def build_allocator(session: AsyncSession) -> InternalIdAllocator:
    """Allocator bound to one session; also used outside request handling."""
    return InternalIdAllocator(
        internal_ids=SqlInternalIdRepository(session),
        schema=AlembicSchemaVersion(session),
    )
