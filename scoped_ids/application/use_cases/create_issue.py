"""CreateIssueUseCase — persist an issue numbered by its project's iid sequence."""

from __future__ import annotations

import logging

from scoped_ids.application.ports.issue_repo import IssueRepository
from scoped_ids.application.use_cases.allocate_internal_id import InternalIdAllocator
from scoped_ids.domain.entities.issue import Issue
from scoped_ids.domain.value_objects.enums import Usage

logger = logging.getLogger(__name__)


class CreateIssueUseCase:
    def __init__(self, allocator: InternalIdAllocator, issue_repo: IssueRepository):
        self._allocator = allocator
        self._issues = issue_repo

    async def execute(self, project_id: int, title: str, iid: int | None = None) -> Issue:
        """Create an issue.

        Without *iid* the next number in the project is assigned. An explicit
        *iid* is kept as is and the counter is raised to it, so it is never
        handed out again.
        """
        issue = Issue(id=None, project_id=project_id, title=title, iid=iid)
        if iid is None:
            issue.iid = await self._allocator.generate_next(
                issue, project_id, Usage.ISSUES, self._count_existing
            )
        else:
            await self._allocator.track_greatest(
                issue, project_id, Usage.ISSUES, iid, self._count_existing
            )

        issue = await self._issues.save(issue)
        logger.info("Project %d: created issue #%d", project_id, issue.iid)
        return issue

    async def _count_existing(self, issue: Issue) -> int:
        return await self._issues.count_by_project(issue.project_id)
