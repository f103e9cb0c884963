"""
In-memory coupon validator.

Coupon rules: active flag, expiry, usage limit, optional vendor scope,
minimum purchase, percentage (with optional cap) or flat discount. The
discount never exceeds the eligible subtotal.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from core.application.interfaces import CouponValidation, ICouponValidator
from core.domain.clock import utc_now
from core.domain.entities import OrderItem
from core.domain.value_objects import ZERO, round_money, to_decimal

logger = logging.getLogger(__name__)

PERCENTAGE = "percentage"
FLAT = "flat"


def normalize_coupon_code(code: Optional[str]) -> str:
    return str(code or "").strip().upper()


@dataclass
class Coupon:
    code: str
    discount_type: str = PERCENTAGE
    discount_value: Decimal = ZERO
    max_discount: Optional[Decimal] = None
    min_purchase: Decimal = ZERO
    usage_limit: Optional[int] = None
    used_count: int = 0
    is_active: bool = True
    valid_until: Optional[datetime] = None
    vendor_id: Optional[str] = None
    free_shipping: bool = False

    def __post_init__(self):
        self.code = normalize_coupon_code(self.code)

    def is_expired(self, now: datetime) -> bool:
        return self.valid_until is not None and now > self.valid_until

    @property
    def limit_reached(self) -> bool:
        return self.usage_limit is not None and self.used_count >= self.usage_limit


class InMemoryCouponValidator(ICouponValidator):
    """Validates and redeems coupons kept in a dictionary."""

    def __init__(self, coupons: Iterable[Coupon] = ()):
        self._coupons: Dict[str, Coupon] = {}
        for coupon in coupons:
            self.add(coupon)

    def add(self, coupon: Coupon) -> None:
        self._coupons[coupon.code] = coupon

    def get(self, code: str) -> Optional[Coupon]:
        return self._coupons.get(normalize_coupon_code(code))

    async def validate(self, code: str, subtotal: Decimal, items: List[OrderItem]) -> CouponValidation:
        normalized = normalize_coupon_code(code)
        if not normalized:
            return CouponValidation(success=False, status=400, message="Coupon code is required")

        subtotal = to_decimal(subtotal, default=Decimal("-1"))
        if subtotal < ZERO:
            return CouponValidation(success=False, status=400, message="Valid subtotal is required")

        coupon = self._coupons.get(normalized)
        if coupon is None or not coupon.is_active:
            return CouponValidation(success=False, status=404, message="Invalid or inactive coupon code")
        if coupon.is_expired(utc_now()):
            return CouponValidation(success=False, status=400, message="Coupon has expired")
        if coupon.limit_reached:
            return CouponValidation(success=False, status=400, message="Coupon usage limit reached")

        eligible = subtotal
        if coupon.vendor_id:
            if not items:
                return CouponValidation(
                    success=False, status=400, message="This coupon requires cart item details"
                )
            eligible = round_money(
                sum((item.line_total for item in items if item.vendor_id == coupon.vendor_id), ZERO)
            )
            if eligible <= ZERO:
                return CouponValidation(
                    success=False, status=400, message="Coupon is not applicable to selected cart items"
                )

        if eligible < coupon.min_purchase:
            return CouponValidation(
                success=False, status=400, message=f"Minimum purchase of {coupon.min_purchase} required"
            )

        if coupon.discount_type == PERCENTAGE:
            discount = eligible * coupon.discount_value / Decimal("100")
            if coupon.max_discount is not None and coupon.max_discount > ZERO:
                discount = min(discount, coupon.max_discount)
        else:
            discount = coupon.discount_value

        discount = round_money(min(max(discount, ZERO), eligible))
        return CouponValidation(
            success=True,
            discount=discount,
            code=normalized,
            coupon_handle=normalized,
            free_shipping=coupon.free_shipping,
        )

    async def redeem(self, validation: CouponValidation) -> bool:
        """Count one usage unless the coupon became unusable since validation."""
        coupon = self._coupons.get(validation.coupon_handle or "")
        if coupon is None or not coupon.is_active or coupon.is_expired(utc_now()) or coupon.limit_reached:
            logger.warning(f"❌ Coupon {validation.code} can no longer be redeemed")
            return False
        coupon.used_count += 1
        logger.info(f"✅ Coupon {coupon.code} redeemed ({coupon.used_count} use(s))")
        return True
