"""Data layer - infrastructure persistence and mapping."""

from .mappers import CatalogMapper, OrderItemMapper, OrderMapper, SubscriptionMapper
from .models import Base, OrderItemModel, OrderModel, SubscriptionModel
from .repositories import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyStockRepository,
    SqlAlchemySubscriptionRepository,
)

__all__ = [
    "Base",
    "CatalogMapper",
    "OrderItemMapper",
    "OrderItemModel",
    "OrderMapper",
    "OrderModel",
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyStockRepository",
    "SqlAlchemySubscriptionRepository",
    "SubscriptionMapper",
    "SubscriptionModel",
]
