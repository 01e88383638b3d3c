"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class Usage(str, Enum):
    """Which internal-id sequence a counter row tracks within a project."""

    ISSUES = "issues"
    MERGE_REQUESTS = "merge_requests"
