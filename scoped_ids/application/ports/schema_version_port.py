"""Port interface for reading the effective database schema version."""

from abc import ABC, abstractmethod


class SchemaVersionPort(ABC):
    @abstractmethod
    async def current_version(self) -> int:
        """Return the migration version in effect, or 0 if never migrated."""
        ...
