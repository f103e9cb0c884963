"""Domain value objects."""

from .commission import CommissionRule, CommissionSnapshot, DEFAULT_GLOBAL_COMMISSION
from .money import ZERO, non_negative_money, round_money, to_decimal
from .order_number import (
    CHECKOUT_PREFIX,
    RENEWAL_PREFIX,
    SUBSCRIPTION_PREFIX,
    OrderNumber,
    generate_reference,
)
from .phone import normalize_phone, phone_variants
from .value_objects import ExecutionID

__all__ = [
    "CHECKOUT_PREFIX",
    "CommissionRule",
    "CommissionSnapshot",
    "DEFAULT_GLOBAL_COMMISSION",
    "ExecutionID",
    "OrderNumber",
    "RENEWAL_PREFIX",
    "SUBSCRIPTION_PREFIX",
    "ZERO",
    "generate_reference",
    "non_negative_money",
    "normalize_phone",
    "phone_variants",
    "round_money",
    "to_decimal",
]
