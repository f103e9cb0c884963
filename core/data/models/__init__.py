"""Database models."""

from .base import Base
from .catalog_model import (
    CategoryModel,
    CustomerModel,
    ProductModel,
    ProductVariationModel,
    VendorModel,
)
from .order_model import OrderItemModel, OrderModel
from .subscription_model import SubscriptionModel

__all__ = [
    "Base",
    "CategoryModel",
    "CustomerModel",
    "OrderItemModel",
    "OrderModel",
    "ProductModel",
    "ProductVariationModel",
    "SubscriptionModel",
    "VendorModel",
]
