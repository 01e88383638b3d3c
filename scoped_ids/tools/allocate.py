"""Allocate or track an internal id from the command line.

Usage:
    python -m scoped_ids.tools.allocate --project-id 1 --usage issues
    python -m scoped_ids.tools.allocate --project-id 1 --usage merge_requests --track 9001
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scoped_ids.adapters.persistence.database import async_session_factory
from scoped_ids.adapters.persistence.repositories import (
    SqlIssueRepository,
    SqlMergeRequestRepository,
)
from scoped_ids.application.use_cases.allocate_internal_id import SeedFn
from scoped_ids.config import settings
from scoped_ids.domain.errors import InternalIdError
from scoped_ids.domain.value_objects.enums import Usage
from scoped_ids.infrastructure.api.dependencies import build_allocator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scoped_ids.tools.allocate",
        description="Allocate the next internal id for a project, or raise its counter.",
    )
    parser.add_argument("--project-id", type=int, required=True)
    parser.add_argument(
        "--usage",
        type=Usage,
        choices=list(Usage),
        metavar="{" + ",".join(u.value for u in Usage) + "}",
        default=Usage.ISSUES,
        help="Which sequence to advance (default: issues)",
    )
    parser.add_argument(
        "--track",
        type=int,
        metavar="VALUE",
        help="Raise the counter to at least VALUE instead of generating the next id",
    )
    return parser


def seed_for(usage: Usage, session: AsyncSession) -> SeedFn:
    """Seed function counting the project's existing items of *usage*."""
    if usage is Usage.ISSUES:
        repo = SqlIssueRepository(session)
    else:
        repo = SqlMergeRequestRepository(session)

    async def count_existing(project_id: int) -> int:
        return await repo.count_by_project(project_id)

    return count_existing


async def run(
    args: argparse.Namespace,
    session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
) -> int:
    async with session_factory() as session:
        allocator = build_allocator(session)
        seed_fn = seed_for(args.usage, session)
        if args.track is None:
            value = await allocator.generate_next(
                args.project_id, args.project_id, args.usage, seed_fn
            )
        else:
            value = await allocator.track_greatest(
                args.project_id, args.project_id, args.usage, args.track, seed_fn
            )
        await session.commit()
    logger.info("Project %d %s counter at %d", args.project_id, args.usage.value, value)
    return value


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s | %(message)s")
    args = build_parser().parse_args(argv)
    try:
        value = asyncio.run(run(args))
    except (InternalIdError, SQLAlchemyError) as e:
        logger.error("Allocation failed: %s", e)
        return 1
    print(value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
