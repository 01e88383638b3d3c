"""InternalIdAllocator — per-project, gapless iid sequences backed by a counter row.

There is no in-process lock. Correctness rests on the store: every write is a
single atomic statement, and the unique constraint on (project_id, usage)
fails all but one of several concurrent first inserts. The losing inserts are
the only failure recovered here, by re-reading the row the winner created.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from scoped_ids.application.ports.internal_id_repo import InternalIdRepository
from scoped_ids.application.ports.schema_version_port import SchemaVersionPort
from scoped_ids.domain.entities.internal_id import InternalId
from scoped_ids.domain.errors import DuplicateKeyConflict, StorageFailure
from scoped_ids.domain.value_objects.enums import Usage

logger = logging.getLogger(__name__)

# Migration 002 introduced the internal_ids table.
REQUIRED_SCHEMA_VERSION = 2

SeedFn = Callable[[Any], Awaitable[int | None]]


class InternalIdAllocator:
    """Hands out iids for a (project, usage) pair."""

    def __init__(self, internal_ids: InternalIdRepository, schema: SchemaVersionPort):
        self._ids = internal_ids
        self._schema = schema

    async def available(self) -> bool:
        """Whether the counter table exists in the schema currently in effect.

        Checked on every call so that nodes keep working while a migration
        rolls out.
        """
        return await self._schema.current_version() >= REQUIRED_SCHEMA_VERSION

    async def generate_next(
        self, context: Any, scope: int, usage: Usage | str, seed_fn: SeedFn
    ) -> int:
        """Return the next iid for *scope*, creating its counter row if needed.

        Args:
            context: the object being numbered; passed to *seed_fn* untouched.
            scope: id of the owning project.
            usage: which sequence within the project.
            seed_fn: awaitable computing the count of items that already exist
                in the scope. Only called when the row has to be created, or
                on the legacy path.

        Returns:
            The new iid. Successive calls for one scope are gapless.
        """
        usage = Usage(usage)
        if not await self.available():
            seed = await seed_fn(context) or 0
            logger.info(
                "internal_ids unavailable, deriving %s iid for project %d from existing data",
                usage.value, scope,
            )
            return seed + 1

        record = await self._lookup_or_create(context, scope, usage, seed_fn)
        return await self._ids.increment_and_save(record)

    async def track_greatest(
        self, context: Any, scope: int, usage: Usage | str, value: int, seed_fn: SeedFn
    ) -> int:
        """Make sure the counter is at least *value* and return where it ends up.

        Used when an item arrives with an iid of its own (e.g. on import), so
        that later generated iids never collide with it.
        """
        usage = Usage(usage)
        if not await self.available():
            return value

        record = await self._lookup_or_create(context, scope, usage, seed_fn)
        return await self._ids.track_greatest_and_save(record, value)

    async def _lookup_or_create(
        self, context: Any, scope: int, usage: Usage, seed_fn: SeedFn
    ) -> InternalId:
        record = await self._ids.find(scope, usage)
        if record is not None:
            return record

        seed = await seed_fn(context) or 0
        try:
            record = await self._ids.create(
                InternalId(id=None, project_id=scope, usage=usage, last_value=seed)
            )
            logger.debug(
                "Created %s counter for project %d at %d", usage.value, scope, seed
            )
            return record
        except DuplicateKeyConflict:
            logger.debug(
                "%s counter for project %d created concurrently, looking it up",
                usage.value, scope,
            )

        # The row that beat us is committed, so this lookup must find it.
        record = await self._ids.find(scope, usage)
        if record is None:
            raise StorageFailure(
                f"{usage.value} counter for project {scope} vanished after a duplicate insert"
            )
        return record
