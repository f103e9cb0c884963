"""
Base Domain Event.

All domain events inherit from this base class. Events are immutable
records of something that already happened to an aggregate.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
import uuid

from ..clock import utc_now

_METADATA_FIELDS = (
    "event_id",
    "event_type",
    "event_version",
    "aggregate_id",
    "aggregate_type",
    "execution_id",
    "occurred_at",
)


@dataclass
class DomainEvent:
    """
    Base class for all domain events.

    ``event_type`` and ``aggregate_type`` are derived from the class name
    (``OrderPlacedEvent`` -> ``OrderPlacedEvent`` / ``Order``).
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str = field(init=False, default="")
    event_version: int = 1

    aggregate_id: str = field(default="")
    aggregate_type: str = field(init=False, default="")

    execution_id: Optional[str] = None
    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.event_type:
            object.__setattr__(self, "event_type", self.__class__.__name__)
        if not self.aggregate_type:
            object.__setattr__(self, "aggregate_type", self._get_aggregate_type())

    def _get_aggregate_type(self) -> str:
        event_name = self.__class__.__name__
        if event_name.endswith("Event"):
            event_name = event_name[:-5]
        for i, char in enumerate(event_name):
            if i > 0 and char.isupper():
                return event_name[:i]
        return event_name

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to a JSON-friendly dictionary.

        Returns:
            Dictionary with metadata plus the event payload under ``data``
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "event_version": self.event_version,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "execution_id": self.execution_id,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        data = {}
        for key, value in self.__dict__.items():
            if key in _METADATA_FIELDS:
                continue
            data[key] = str(value) if isinstance(value, Decimal) else value
        return data
