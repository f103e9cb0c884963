"""Application use cases."""
from .place_order import (
    ADMIN_MANUAL_CHANNEL,
    PlaceOrderRequest,
    PlaceOrderResponse,
    PlaceOrderUseCase,
)

__all__ = [
    "ADMIN_MANUAL_CHANNEL",
    "PlaceOrderRequest",
    "PlaceOrderResponse",
    "PlaceOrderUseCase",
]
