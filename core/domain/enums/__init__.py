"""Domain enums."""

from .commission import CommissionSource, CommissionType
from .order_status import OrderStatus, PaymentStatus
from .risk import RiskTier
from .subscription import BillingInterval, RenewalStatus, SubscriptionStatus

__all__ = [
    "BillingInterval",
    "CommissionSource",
    "CommissionType",
    "OrderStatus",
    "PaymentStatus",
    "RenewalStatus",
    "RiskTier",
    "SubscriptionStatus",
]
