"""Pricing Engine: coupon, shipping and final total."""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from core.application.interfaces import CouponValidation, ICouponValidator
from core.domain.entities import OrderItem
from core.domain.result import ErrorKind, Outcome
from core.domain.value_objects import ZERO, non_negative_money, round_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricingResult:
    """Final monetary breakdown of an order."""

    subtotal: Decimal
    shipping_fee: Decimal
    discount: Decimal
    total: Decimal
    coupon: Optional[CouponValidation] = None

    @property
    def coupon_code(self) -> Optional[str]:
        return self.coupon.code if self.coupon else None


def compute_total(subtotal: Decimal, shipping_fee: Decimal, discount: Decimal) -> Decimal:
    """``max(round(subtotal + shipping_fee - discount, 2), 0)``."""
    return max(round_money(subtotal + shipping_fee - discount), ZERO)


class PricingEngine:
    """Applies coupon and shipping to a subtotal."""

    def __init__(self, coupon_validator: Optional[ICouponValidator] = None) -> None:
        self._coupon_validator = coupon_validator

    async def price(
        self,
        subtotal: Decimal,
        shipping_fee: Decimal,
        items: List[OrderItem],
        coupon_code: Optional[str] = None,
    ) -> Outcome[PricingResult]:
        """
        Compute the order total.

        Args:
            subtotal: Subtotal from the Order Builder
            shipping_fee: Requested shipping fee
            items: Priced order lines (passed to the coupon validator)
            coupon_code: Optional coupon code

        Returns:
            Outcome with PricingResult; coupon failures keep their message and status
        """
        subtotal = non_negative_money(subtotal)
        shipping_fee = non_negative_money(shipping_fee)
        discount = ZERO
        coupon: Optional[CouponValidation] = None

        code = (coupon_code or "").strip()
        if code:
            if self._coupon_validator is None:
                return Outcome.failure(ErrorKind.VALIDATION, "Coupons are not available")

            coupon = await self._coupon_validator.validate(code, subtotal, items)
            if not coupon.success:
                logger.info(f"Coupon {code} rejected: {coupon.message}")
                return Outcome.failure(
                    ErrorKind.VALIDATION,
                    coupon.message or "Invalid coupon",
                    status=coupon.status or 400,
                )

            discount = non_negative_money(coupon.discount)
            if coupon.free_shipping:
                shipping_fee = ZERO

        return Outcome.success(
            PricingResult(
                subtotal=subtotal,
                shipping_fee=shipping_fee,
                discount=discount,
                total=compute_total(subtotal, shipping_fee, discount),
                coupon=coupon,
            )
        )
