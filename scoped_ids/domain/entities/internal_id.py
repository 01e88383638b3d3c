"""InternalId entity — the per-project counter behind a sequence of iids."""

from dataclasses import dataclass

from scoped_ids.domain.errors import ValidationError
from scoped_ids.domain.value_objects.enums import Usage


@dataclass
class InternalId:
    """Counter row for one (project, usage) pair.

    ``increment`` and ``track_greatest`` are the reference arithmetic. The SQL
    store evaluates the same expressions inside its UPDATE statements and must
    agree with them; in-memory repositories call them directly.
    """

    id: int | None
    project_id: int
    usage: Usage | None
    last_value: int | None = None

    def validate(self) -> None:
        if self.usage is None:
            raise ValidationError("Internal id usage can't be blank")
        if self.last_value is not None and self.last_value < 0:
            raise ValidationError(
                f"Internal id last_value must be non-negative, got {self.last_value}"
            )

    def increment(self) -> int:
        """Advance by one; a missing last_value counts as zero."""
        self.last_value = (self.last_value or 0) + 1
        return self.last_value

    def track_greatest(self, value: int) -> int:
        """Raise last_value to *value* if it is greater. Never lowers it."""
        self.last_value = max(self.last_value or 0, value)
        return self.last_value
