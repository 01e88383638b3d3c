"""MergeRequest entity — numbered per project independently of issues."""

from dataclasses import dataclass


@dataclass
class MergeRequest:
    id: int | None
    project_id: int
    title: str
    iid: int | None = None
