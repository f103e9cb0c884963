"""Domain entities."""

from .catalog import (
    Category,
    CustomerAccount,
    Product,
    ProductVariation,
    RecurringPlan,
    Vendor,
)
from .order import (
    Attribution,
    CourierState,
    InventoryAdjustment,
    InventoryState,
    Order,
    OrderItem,
    PaymentDetails,
    ShippingAddress,
    ShippingMeta,
    TimelineEntry,
)
from .subscription import RenewalEvent, Subscription

__all__ = [
    "Attribution",
    "Category",
    "CourierState",
    "CustomerAccount",
    "InventoryAdjustment",
    "InventoryState",
    "Order",
    "OrderItem",
    "PaymentDetails",
    "Product",
    "ProductVariation",
    "RecurringPlan",
    "RenewalEvent",
    "ShippingAddress",
    "ShippingMeta",
    "Subscription",
    "TimelineEntry",
    "Vendor",
]
