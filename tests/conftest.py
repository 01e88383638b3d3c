"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from scoped_ids.adapters.persistence.database import Base  # noqa: E402
from scoped_ids.adapters.persistence.repositories import SqlProjectRepository  # noqa: E402
from scoped_ids.domain.entities.project import Project  # noqa: E402

HEAD_REVISION = "002"


def _create_schema(connection: Connection) -> None:
    Base.metadata.create_all(connection)
    connection.execute(
        text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL PRIMARY KEY)")
    )
    connection.execute(
        text("INSERT INTO alembic_version (version_num) VALUES (:rev)"),
        {"rev": HEAD_REVISION},
    )


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite so that concurrent sessions use separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'scoped_ids.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )

    # pysqlite defers BEGIN until the first write and breaks SAVEPOINT;
    # take the write lock up front instead, like SELECT ... FOR UPDATE would.
    # Sessions therefore run one after another; lost inserts need a stale lookup.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(_create_schema)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def project_id(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as s:
        project = await SqlProjectRepository(s).save(Project(id=None, name="gitlab-foss"))
        await s.commit()
        return project.id


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession], project_id: int
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as s:
        yield s


@pytest.fixture
def stamp_revision(session: AsyncSession) -> Callable[[str | None], Awaitable[None]]:
    """Pretend the database is migrated to a given revision (None = never)."""

    async def _stamp(revision: str | None) -> None:
        await session.execute(text("DELETE FROM alembic_version"))
        if revision is not None:
            await session.execute(
                text("INSERT INTO alembic_version (version_num) VALUES (:rev)"),
                {"rev": revision},
            )

    return _stamp
