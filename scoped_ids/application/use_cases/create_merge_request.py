"""CreateMergeRequestUseCase — merge requests get their own iid sequence."""

from __future__ import annotations

import logging

from scoped_ids.application.ports.merge_request_repo import MergeRequestRepository
from scoped_ids.application.use_cases.allocate_internal_id import InternalIdAllocator
from scoped_ids.domain.entities.merge_request import MergeRequest
from scoped_ids.domain.value_objects.enums import Usage

logger = logging.getLogger(__name__)


class CreateMergeRequestUseCase:
    def __init__(
        self, allocator: InternalIdAllocator, merge_request_repo: MergeRequestRepository
    ):
        self._allocator = allocator
        self._merge_requests = merge_request_repo

    async def execute(
        self, project_id: int, title: str, iid: int | None = None
    ) -> MergeRequest:
        mr = MergeRequest(id=None, project_id=project_id, title=title, iid=iid)
        if iid is None:
            mr.iid = await self._allocator.generate_next(
                mr, project_id, Usage.MERGE_REQUESTS, self._count_existing
            )
        else:
            await self._allocator.track_greatest(
                mr, project_id, Usage.MERGE_REQUESTS, iid, self._count_existing
            )

        mr = await self._merge_requests.save(mr)
        logger.info("Project %d: created merge request !%d", project_id, mr.iid)
        return mr

    async def _count_existing(self, mr: MergeRequest) -> int:
        return await self._merge_requests.count_by_project(mr.project_id)
