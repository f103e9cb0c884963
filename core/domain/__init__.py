"""Domain layer - pure domain models and interfaces."""

from .entities import Order, OrderItem, Subscription
from .repositories import (
    CatalogRepository,
    OrderRepository,
    StockRepository,
    SubscriptionRepository,
)
from .result import ErrorKind, Outcome
from .value_objects import ExecutionID, OrderNumber

__all__ = [
    "CatalogRepository",
    "ErrorKind",
    "ExecutionID",
    "Order",
    "OrderItem",
    "OrderNumber",
    "OrderRepository",
    "Outcome",
    "StockRepository",
    "Subscription",
    "SubscriptionRepository",
]
