"""Port interface for internal-id counter persistence."""

from abc import ABC, abstractmethod

from scoped_ids.domain.entities.internal_id import InternalId
from scoped_ids.domain.value_objects.enums import Usage


class InternalIdRepository(ABC):
    @abstractmethod
    async def find(self, project_id: int, usage: Usage) -> InternalId | None:
        """Look up the counter row for (project_id, usage), reading fresh state."""
        ...

    @abstractmethod
    async def create(self, record: InternalId) -> InternalId:
        """Insert a new counter row.

        Raises:
            ValidationError: if the record has no usage.
            DuplicateKeyConflict: if a row for (project_id, usage) already exists.
            StorageFailure: for any other persistence error.
        """
        ...

    @abstractmethod
    async def increment_and_save(self, record: InternalId) -> int:
        """Atomically set last_value = (last_value or 0) + 1 and return it."""
        ...

    @abstractmethod
    async def track_greatest_and_save(self, record: InternalId, value: int) -> int:
        """Atomically set last_value = max(last_value or 0, value) and return it."""
        ...
