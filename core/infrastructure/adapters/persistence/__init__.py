"""Persistence adapters."""

from .in_memory import (
    InMemoryCatalogRepository,
    InMemoryOrderRepository,
    InMemorySubscriptionRepository,
)

__all__ = [
    "InMemoryCatalogRepository",
    "InMemoryOrderRepository",
    "InMemorySubscriptionRepository",
]
