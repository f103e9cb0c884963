"""
Subscription aggregate.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..clock import ensure_utc
from ..enums import BillingInterval, RenewalStatus, SubscriptionStatus
from ..value_objects import ZERO, round_money
from .order import ShippingAddress


@dataclass(frozen=True)
class RenewalEvent:
    """One entry of a subscription's renewal history."""

    billed_at: datetime
    amount: Decimal
    status: RenewalStatus
    order_number: Optional[str] = None
    note: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "billed_at": self.billed_at.isoformat(),
            "amount": str(self.amount),
            "status": self.status.value,
            "order_number": self.order_number,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenewalEvent":
        return cls(
            billed_at=ensure_utc(datetime.fromisoformat(data["billed_at"])),
            amount=round_money(data.get("amount")),
            status=RenewalStatus(data["status"]),
            order_number=data.get("order_number"),
            note=data.get("note") or "",
        )


@dataclass
class Subscription:
    """
    Recurring purchase created from one checkout line.

    ``source_item_key`` (``<order number>:<line index>``) is unique, so an
    order line yields at most one subscription. The owner is either
    ``user_id`` or ``guest_email``.
    """

    id: str
    subscription_number: str
    product_id: str
    source_order_number: str
    source_item_key: str
    unit_price: Decimal
    interval: BillingInterval
    starts_at: datetime
    user_id: Optional[str] = None
    guest_email: Optional[str] = None
    vendor_id: Optional[str] = None
    variation_id: Optional[str] = None
    variation_label: Optional[str] = None
    product_title: str = ""
    quantity: int = 1
    currency: str = "BDT"
    interval_count: int = 1
    total_cycles: int = 0
    completed_cycles: int = 0
    trial_days: int = 0
    next_billing_at: Optional[datetime] = None
    last_billed_at: Optional[datetime] = None
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    payment_method: str = ""
    shipping_address: Optional[ShippingAddress] = None
    renewal_history: List[RenewalEvent] = field(default_factory=list)

    def __post_init__(self):
        if not self.user_id and not self.guest_email:
            raise ValueError("Subscription requires a user or a guest email")
        self.quantity = max(1, int(self.quantity))
        self.interval_count = max(1, int(self.interval_count))
        self.unit_price = round_money(self.unit_price)

    @property
    def cycle_amount(self) -> Decimal:
        return round_money(self.unit_price * self.quantity)

    @property
    def is_unbounded(self) -> bool:
        return self.total_cycles <= 0

    @property
    def cycle_cap_reached(self) -> bool:
        return not self.is_unbounded and self.completed_cycles >= self.total_cycles

    @property
    def contact_email(self) -> str:
        if self.shipping_address and self.shipping_address.email:
            return self.shipping_address.email
        return self.guest_email or ""

    def complete(self) -> None:
        self.status = SubscriptionStatus.COMPLETED
        self.next_billing_at = None

    def record_renewal(
        self,
        status: RenewalStatus,
        billed_at: datetime,
        amount: Decimal = ZERO,
        order_number: Optional[str] = None,
        note: str = "",
    ) -> RenewalEvent:
        event = RenewalEvent(
            billed_at=billed_at,
            amount=round_money(amount),
            status=status,
            order_number=order_number,
            note=note,
        )
        self.renewal_history.append(event)
        return event
