"""Port interface for issue persistence."""

from abc import ABC, abstractmethod

from scoped_ids.domain.entities.issue import Issue


class IssueRepository(ABC):
    @abstractmethod
    async def save(self, issue: Issue) -> Issue:
        ...

    @abstractmethod
    async def get_by_iid(self, project_id: int, iid: int) -> Issue | None:
        ...

    @abstractmethod
    async def count_by_project(self, project_id: int) -> int:
        ...
