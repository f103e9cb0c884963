"""External collaborator interfaces: coupons, payment gateways, notifications."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.domain.entities import CustomerAccount, Order, OrderItem


@dataclass(frozen=True)
class CouponValidation:
    """Result of validating a coupon code against a cart."""

    success: bool
    discount: Decimal = Decimal("0.00")
    code: Optional[str] = None
    coupon_handle: Optional[str] = None
    free_shipping: bool = False
    status: int = 200
    message: str = ""


@dataclass(frozen=True)
class PaymentInitiation:
    """Gateway response for a newly created order."""

    provider_type: str
    gateway_payment_id: Optional[str] = None
    payment_url: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)


class ICouponValidator(ABC):
    """
    Black-box coupon validation.

    Validation is read-only; usage is only counted by ``redeem`` once the
    order and its inventory effects are in place.
    """

    @abstractmethod
    async def validate(
        self, code: str, subtotal: Decimal, items: List[OrderItem]
    ) -> CouponValidation:
        """
        Validate a coupon code.

        Args:
            code: Coupon code as entered
            subtotal: Cart subtotal
            items: Priced order lines

        Returns:
            CouponValidation (success=False carries status and message)
        """
        pass

    @abstractmethod
    async def redeem(self, validation: CouponValidation) -> bool:
        """
        Count one usage of a validated coupon.

        Returns:
            False if the coupon can no longer be used (limit reached meanwhile)
        """
        pass


class IPaymentGateway(ABC):
    """Payment gateway initiator (checkout session creation)."""

    @abstractmethod
    async def initiate(
        self,
        order: Order,
        payment_method: str,
        customer: Optional[CustomerAccount],
    ) -> PaymentInitiation:
        """
        Start a payment for an order.

        Raises:
            Exception: Any transport or provider failure
        """
        pass


class INotificationService(ABC):
    """
    Interface for customer notifications.

    Callers treat every failure as non-fatal.
    """

    @abstractmethod
    async def send_order_placed(self, order_number: str, email: str, total: Decimal) -> None:
        pass

    @abstractmethod
    async def send_order_status(
        self, order_number: str, email: str, previous_status: str, new_status: str
    ) -> None:
        pass

    @abstractmethod
    async def send_renewal_created(
        self, subscription_number: str, order_number: str, email: str, amount: Decimal
    ) -> None:
        pass

    @abstractmethod
    async def send_consignment_created(
        self, order_number: str, email: str, consignment_id: str, tracking_url: Optional[str] = None
    ) -> None:
        pass
