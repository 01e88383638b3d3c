"""SQLAlchemy repository implementations."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scoped_ids.adapters.persistence.models import (
    InternalIdModel,
    IssueModel,
    MergeRequestModel,
    ProjectModel,
)
from scoped_ids.application.ports.internal_id_repo import InternalIdRepository
from scoped_ids.application.ports.issue_repo import IssueRepository
from scoped_ids.application.ports.merge_request_repo import MergeRequestRepository
from scoped_ids.application.ports.project_repo import ProjectRepository
from scoped_ids.domain.entities.internal_id import InternalId
from scoped_ids.domain.entities.issue import Issue
from scoped_ids.domain.entities.merge_request import MergeRequest
from scoped_ids.domain.entities.project import Project
from scoped_ids.domain.errors import DuplicateKeyConflict, StorageFailure
from scoped_ids.domain.value_objects.enums import Usage

# PostgreSQL SQLSTATE for unique_violation
_UNIQUE_VIOLATION = "23505"

# ─── Mappers ─────────────────────────────────────────────────────────


def _project_to_domain(m: ProjectModel) -> Project:
    return Project(id=m.id, name=m.name)


def _issue_to_domain(m: IssueModel) -> Issue:
    return Issue(id=m.id, project_id=m.project_id, title=m.title, iid=m.iid)


def _merge_request_to_domain(m: MergeRequestModel) -> MergeRequest:
    return MergeRequest(id=m.id, project_id=m.project_id, title=m.title, iid=m.iid)


def _internal_id_to_domain(m: InternalIdModel) -> InternalId:
    return InternalId(
        id=m.id,
        project_id=m.project_id,
        usage=Usage(m.usage),
        last_value=m.last_value,
    )


# ─── Error translation ───────────────────────────────────────────────


def _is_unique_violation(exc: IntegrityError) -> bool:
    """Tell a unique-constraint violation apart from other integrity errors."""
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if code is not None:
        return code == _UNIQUE_VIOLATION
    # sqlite3 carries no SQLSTATE
    return "UNIQUE constraint failed" in str(exc.orig)


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        raise StorageFailure(f"Failed to {action}: {e}") from e


# ─── Repositories ────────────────────────────────────────────────────


class SqlProjectRepository(ProjectRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, project: Project) -> Project:
        m = ProjectModel(name=project.name)
        self._s.add(m)
        await self._s.flush()
        project.id = m.id
        return project

    async def get_by_id(self, project_id: int) -> Project | None:
        m = await self._s.get(ProjectModel, project_id)
        return _project_to_domain(m) if m else None

    async def get_by_name(self, name: str) -> Project | None:
        result = await self._s.execute(select(ProjectModel).where(ProjectModel.name == name))
        m = result.scalar_one_or_none()
        return _project_to_domain(m) if m else None


class SqlIssueRepository(IssueRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, issue: Issue) -> Issue:
        m = IssueModel(project_id=issue.project_id, iid=issue.iid, title=issue.title)
        self._s.add(m)
        await self._s.flush()
        issue.id = m.id
        return issue

    async def get_by_iid(self, project_id: int, iid: int) -> Issue | None:
        result = await self._s.execute(
            select(IssueModel).where(
                IssueModel.project_id == project_id, IssueModel.iid == iid
            )
        )
        m = result.scalar_one_or_none()
        return _issue_to_domain(m) if m else None

    async def count_by_project(self, project_id: int) -> int:
        result = await self._s.execute(
            select(func.count()).select_from(IssueModel).where(
                IssueModel.project_id == project_id
            )
        )
        return result.scalar_one()


class SqlMergeRequestRepository(MergeRequestRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, merge_request: MergeRequest) -> MergeRequest:
        m = MergeRequestModel(
            project_id=merge_request.project_id,
            iid=merge_request.iid,
            title=merge_request.title,
        )
        self._s.add(m)
        await self._s.flush()
        merge_request.id = m.id
        return merge_request

    async def get_by_iid(self, project_id: int, iid: int) -> MergeRequest | None:
        result = await self._s.execute(
            select(MergeRequestModel).where(
                MergeRequestModel.project_id == project_id, MergeRequestModel.iid == iid
            )
        )
        m = result.scalar_one_or_none()
        return _merge_request_to_domain(m) if m else None

    async def count_by_project(self, project_id: int) -> int:
        result = await self._s.execute(
            select(func.count()).select_from(MergeRequestModel).where(
                MergeRequestModel.project_id == project_id
            )
        )
        return result.scalar_one()


class SqlInternalIdRepository(InternalIdRepository):
    """Counter rows. Every write is one atomic UPDATE ... RETURNING statement."""

    def __init__(self, session: AsyncSession):
        self._s = session

    async def find(self, project_id: int, usage: Usage) -> InternalId | None:
        with _storage_errors("look up internal id"):
            result = await self._s.execute(
                select(InternalIdModel)
                .where(
                    InternalIdModel.project_id == project_id,
                    InternalIdModel.usage == Usage(usage).value,
                )
                .execution_options(populate_existing=True)
            )
            m = result.scalar_one_or_none()
        return _internal_id_to_domain(m) if m else None

    async def create(self, record: InternalId) -> InternalId:
        record.validate()
        m = InternalIdModel(
            project_id=record.project_id,
            usage=record.usage.value,
            last_value=record.last_value,
        )
        # Savepoint, so a lost race leaves the caller's transaction usable
        try:
            async with self._s.begin_nested():
                self._s.add(m)
                await self._s.flush()
        except IntegrityError as e:
            if _is_unique_violation(e):
                raise DuplicateKeyConflict(record.project_id, record.usage.value) from e
            raise StorageFailure(f"Failed to create internal id: {e}") from e
        except SQLAlchemyError as e:
            raise StorageFailure(f"Failed to create internal id: {e}") from e
        record.id = m.id
        return record

    async def increment_and_save(self, record: InternalId) -> int:
        stmt = (
            update(InternalIdModel)
            .where(InternalIdModel.id == record.id)
            .values(last_value=func.coalesce(InternalIdModel.last_value, 0) + 1)
            .returning(InternalIdModel.last_value)
            .execution_options(synchronize_session=False)
        )
        with _storage_errors("increment internal id"):
            result = await self._s.execute(stmt)
            record.last_value = result.scalar_one()
        return record.last_value

    async def track_greatest_and_save(self, record: InternalId, value: int) -> int:
        current = func.coalesce(InternalIdModel.last_value, 0)
        stmt = (
            update(InternalIdModel)
            .where(InternalIdModel.id == record.id)
            .values(last_value=case((current < value, value), else_=current))
            .returning(InternalIdModel.last_value)
            .execution_options(synchronize_session=False)
        )
        with _storage_errors("track greatest internal id"):
            result = await self._s.execute(stmt)
            record.last_value = result.scalar_one()
        return record.last_value
