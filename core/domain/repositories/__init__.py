"""Repository interfaces."""

from .catalog_repository import CatalogRepository
from .order_repository import DuplicateOrderError, OrderRepository
from .stock_repository import StockRepository
from .subscription_repository import SubscriptionRepository

__all__ = [
    "CatalogRepository",
    "DuplicateOrderError",
    "OrderRepository",
    "StockRepository",
    "SubscriptionRepository",
]
