"""SQLAlchemy repository implementations."""

from .catalog_repository_impl import SqlAlchemyCatalogRepository, SqlAlchemyStockRepository
from .order_repository_impl import SqlAlchemyOrderRepository
from .subscription_repository_impl import SqlAlchemySubscriptionRepository

__all__ = [
    "SqlAlchemyCatalogRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyStockRepository",
    "SqlAlchemySubscriptionRepository",
]
