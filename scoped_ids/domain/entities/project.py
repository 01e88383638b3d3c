"""Project entity — the scope that owns its own iid sequences."""

from dataclasses import dataclass


@dataclass
class Project:
    id: int | None
    name: str
