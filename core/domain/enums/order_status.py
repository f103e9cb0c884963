"""
Order Status Enums.

Wire-visible status values for orders and their payments.
"""
from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class PaymentStatus(str, Enum):
    """Payment status of an order."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
