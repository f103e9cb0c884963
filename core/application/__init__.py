"""Application layer - services, use cases, interfaces, and DTOs."""

from .services import (
    CommissionResolver,
    CustomerRiskService,
    InventoryLedger,
    OrderApplicationService,
    OrderBuilder,
    OrderStatusMachine,
    PricingEngine,
    RenewalBillingService,
    RenewalScheduler,
    SubscriptionService,
)
from .use_cases import PlaceOrderRequest, PlaceOrderResponse, PlaceOrderUseCase

__all__ = [
    # Services
    "CommissionResolver",
    "CustomerRiskService",
    "InventoryLedger",
    "OrderApplicationService",
    "OrderBuilder",
    "OrderStatusMachine",
    "PricingEngine",
    "RenewalBillingService",
    "RenewalScheduler",
    "SubscriptionService",
    # Use Cases
    "PlaceOrderRequest",
    "PlaceOrderResponse",
    "PlaceOrderUseCase",
]
