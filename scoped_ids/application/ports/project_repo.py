"""Port interface for project persistence."""

from abc import ABC, abstractmethod

from scoped_ids.domain.entities.project import Project


class ProjectRepository(ABC):
    @abstractmethod
    async def save(self, project: Project) -> Project:
        ...

    @abstractmethod
    async def get_by_id(self, project_id: int) -> Project | None:
        ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Project | None:
        ...
