"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for workflow execution tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)
