"""Application services."""
from .commission_resolver import CommissionResolver
from .customer_risk import CustomerRiskProfile, CustomerRiskService
from .inventory_ledger import RESERVE, RESTORE, InventoryLedger
from .notification_handler import OrderNotificationHandler
from .order_builder import BuiltOrder, CheckoutLine, OrderBuilder
from .order_service import CourierSyncResult, OrderApplicationService
from .order_status_machine import OrderStatusMachine, TransitionResult
from .pricing_engine import PricingEngine, PricingResult, compute_total
from .renewal_billing import RenewalBillingService, RenewalRunSummary, clamp_batch_size
from .renewal_scheduler import RenewalScheduler
from .subscription_service import SubscriptionService

__all__ = [
    "BuiltOrder",
    "CheckoutLine",
    "CommissionResolver",
    "CourierSyncResult",
    "CustomerRiskProfile",
    "CustomerRiskService",
    "InventoryLedger",
    "OrderApplicationService",
    "OrderBuilder",
    "OrderNotificationHandler",
    "OrderStatusMachine",
    "PricingEngine",
    "PricingResult",
    "RESERVE",
    "RESTORE",
    "RenewalBillingService",
    "RenewalRunSummary",
    "RenewalScheduler",
    "SubscriptionService",
    "TransitionResult",
    "clamp_batch_size",
    "compute_total",
]
