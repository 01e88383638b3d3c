"""Port interface for merge request persistence."""

from abc import ABC, abstractmethod

from scoped_ids.domain.entities.merge_request import MergeRequest


class MergeRequestRepository(ABC):
    @abstractmethod
    async def save(self, merge_request: MergeRequest) -> MergeRequest:
        ...

    @abstractmethod
    async def get_by_iid(self, project_id: int, iid: int) -> MergeRequest | None:
        ...

    @abstractmethod
    async def count_by_project(self, project_id: int) -> int:
        ...
