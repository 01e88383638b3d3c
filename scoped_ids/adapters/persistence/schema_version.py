"""Alembic-backed schema version adapter — implements SchemaVersionPort."""

from __future__ import annotations

import logging

from alembic.runtime.migration import MigrationContext
from sqlalchemy import Connection
from sqlalchemy.ext.asyncio import AsyncSession

from scoped_ids.application.ports.schema_version_port import SchemaVersionPort
from scoped_ids.domain.errors import StorageFailure

logger = logging.getLogger(__name__)


def _current_revision(connection: Connection) -> str | None:
    return MigrationContext.configure(connection).get_current_revision()


class AlembicSchemaVersion(SchemaVersionPort):
    """Reads the revision stamped in alembic_version on the caller's connection.

    Revision ids are zero-padded integers ("001", "002", ...), so the stamped
    revision doubles as an ordered schema version. An unstamped database is
    version 0.
    """

    def __init__(self, session: AsyncSession):
        self._s = session

    async def current_version(self) -> int:
        conn = await self._s.connection()
        revision = await conn.run_sync(_current_revision)
        if revision is None:
            logger.debug("Database has no alembic revision stamped")
            return 0
        try:
            return int(revision)
        except ValueError as e:
            raise StorageFailure(
                f"Alembic revision {revision!r} is not a numeric schema version"
            ) from e
