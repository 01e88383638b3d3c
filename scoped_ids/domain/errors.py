"""Internal-id error taxonomy."""


class InternalIdError(Exception):
    """Base class for all internal-id allocation errors."""


class ValidationError(InternalIdError):
    """A counter record is malformed and was rejected before any write."""


class DuplicateKeyConflict(InternalIdError):
    """Another process created the same (project, usage) counter row first.

    Only raised by the store while creating a row. The allocator recovers
    from it locally, so callers never see it.
    """

    def __init__(self, project_id: int, usage: str):
        super().__init__(f"Counter for project {project_id} / {usage} already exists")
        self.project_id = project_id
        self.usage = usage


class StorageFailure(InternalIdError):
    """Any other persistence error. Propagated as-is, never retried."""
