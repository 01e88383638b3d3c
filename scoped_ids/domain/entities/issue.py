"""Issue entity — numbered per project by its iid."""

from dataclasses import dataclass


@dataclass
class Issue:
    id: int | None
    project_id: int
    title: str
    iid: int | None = None
