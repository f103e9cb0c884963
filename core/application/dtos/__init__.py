"""Application DTOs."""

from .customer_dto import CustomerRiskDTO, RenewalRunDTO
from .order_dto import (
    CancelOrderDTO,
    CheckoutItemDTO,
    CheckoutRequestDTO,
    CheckoutResponseDTO,
    CourierSyncResponseDTO,
    OrderDTO,
    OrderItemDTO,
    ShippingAddressDTO,
    StatusUpdateDTO,
    StatusUpdateResponseDTO,
)

__all__ = [
    "CancelOrderDTO",
    "CheckoutItemDTO",
    "CheckoutRequestDTO",
    "CheckoutResponseDTO",
    "CourierSyncResponseDTO",
    "CustomerRiskDTO",
    "OrderDTO",
    "OrderItemDTO",
    "RenewalRunDTO",
    "ShippingAddressDTO",
    "StatusUpdateDTO",
    "StatusUpdateResponseDTO",
]
