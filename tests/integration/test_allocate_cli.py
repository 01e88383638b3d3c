"""Tests for the allocate command-line tool."""

from __future__ import annotations

import pytest

from scoped_ids.domain.value_objects.enums import Usage
from scoped_ids.tools.allocate import build_parser, run


def test_parser_defaults_to_issues():
    args = build_parser().parse_args(["--project-id", "3"])
    assert args.project_id == 3
    assert args.usage is Usage.ISSUES
    assert args.track is None


def test_parser_accepts_usage_and_track():
    args = build_parser().parse_args(
        ["--project-id", "3", "--usage", "merge_requests", "--track", "9001"]
    )
    assert args.usage is Usage.MERGE_REQUESTS
    assert args.track == 9001


def test_parser_rejects_unknown_usage():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--project-id", "3", "--usage", "epics"])


@pytest.mark.asyncio
async def test_run_generates_then_tracks(session_factory, project_id):
    parser = build_parser()
    generate = parser.parse_args(["--project-id", str(project_id)])
    track = parser.parse_args(["--project-id", str(project_id), "--track", "100"])

    assert await run(generate, session_factory) == 1
    assert await run(generate, session_factory) == 2
    assert await run(track, session_factory) == 100
    assert await run(generate, session_factory) == 101


@pytest.mark.asyncio
async def test_run_keeps_usages_apart(session_factory, project_id):
    parser = build_parser()
    issues = parser.parse_args(["--project-id", str(project_id)])
    mrs = parser.parse_args(["--project-id", str(project_id), "--usage", "merge_requests"])

    assert await run(issues, session_factory) == 1
    assert await run(mrs, session_factory) == 1
    assert await run(issues, session_factory) == 2
