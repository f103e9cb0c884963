"""Courier provider status -> order status lookup."""
import re
from typing import Dict, Optional

from ..enums import OrderStatus

COURIER_STATUS_MAP: Dict[str, OrderStatus] = {
    "pending": OrderStatus.PENDING,
    "created": OrderStatus.CONFIRMED,
    "confirmed": OrderStatus.CONFIRMED,
    "assigned": OrderStatus.PROCESSING,
    "processing": OrderStatus.PROCESSING,
    "picked": OrderStatus.PROCESSING,
    "picked_up": OrderStatus.PROCESSING,
    "in_transit": OrderStatus.SHIPPED,
    "shipped": OrderStatus.SHIPPED,
    "out_for_delivery": OrderStatus.SHIPPED,
    "delivered": OrderStatus.DELIVERED,
    "returned": OrderStatus.RETURNED,
    "cancelled": OrderStatus.CANCELLED,
    "failed": OrderStatus.CANCELLED,
}

_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_courier_status(raw: Optional[str]) -> str:
    """``"Out for Delivery"`` -> ``"out_for_delivery"``."""
    return _SEPARATORS.sub("_", str(raw or "").strip().lower())


def map_courier_status(raw: Optional[str]) -> Optional[OrderStatus]:
    """Translate free-text provider status; unknown values map to None."""
    return COURIER_STATUS_MAP.get(normalize_courier_status(raw))
