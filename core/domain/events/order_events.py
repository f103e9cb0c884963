"""
Order Domain Events.

Events raised during checkout, status updates, courier work and
subscription renewals. Consumed by the notification handler.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .base import DomainEvent


@dataclass
class _OrderEvent(DomainEvent):
    """Order-scoped event; ``aggregate_id`` follows ``order_number``."""

    order_number: str = ""

    def __post_init__(self):
        if not self.aggregate_id and self.order_number:
            object.__setattr__(self, "aggregate_id", self.order_number)
        super().__post_init__()


@dataclass
class OrderPlacedEvent(_OrderEvent):
    """
    Order was placed at checkout.

    Trigger: PlaceOrderUseCase after inventory and coupon usage are committed
    Consumers: notification handler
    """

    customer_email: str = ""
    total: Decimal = Decimal("0.00")
    source_channel: str = ""
    item_count: int = 0


@dataclass
class OrderStatusChangedEvent(_OrderEvent):
    """Order moved to a different lifecycle status."""

    customer_email: str = ""
    previous_status: str = ""
    new_status: str = ""
    actor: str = ""
    note: Optional[str] = None


@dataclass
class CourierConsignmentCreatedEvent(_OrderEvent):
    """A consignment (remote or locally generated) was attached to an order."""

    consignment_id: str = ""
    customer_email: str = ""
    tracking_url: Optional[str] = None
    generated_by: str = ""
    warning: Optional[str] = None


@dataclass
class RenewalOrderCreatedEvent(_OrderEvent):
    """The billing sweep created a renewal order for a subscription cycle."""

    subscription_id: str = ""
    subscription_number: str = ""
    customer_email: str = ""
    amount: Decimal = Decimal("0.00")
