"""Domain events."""

from .base import DomainEvent
from .order_events import (
    CourierConsignmentCreatedEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    RenewalOrderCreatedEvent,
)

__all__ = [
    "CourierConsignmentCreatedEvent",
    "DomainEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
    "RenewalOrderCreatedEvent",
]
