"""Coupon adapters."""

from .in_memory_coupon_validator import Coupon, InMemoryCouponValidator, normalize_coupon_code

__all__ = ["Coupon", "InMemoryCouponValidator", "normalize_coupon_code"]
