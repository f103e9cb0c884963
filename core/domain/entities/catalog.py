"""
Catalog read models used during settlement.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from ..enums import BillingInterval
from ..value_objects import CommissionRule, ZERO, to_decimal

APPROVED = "approved"

GROUPED = "grouped"
VARIABLE = "variable"

PRICE_TYPE_BEST = "best"
PRICE_TYPE_TBA = "tba"


def _valid_price(value) -> Optional[Decimal]:
    if value is None:
        return None
    price = to_decimal(value, default=Decimal("-1"))
    return price if price >= ZERO else None


@dataclass
class ProductVariation:
    """A purchasable variant of a variable product."""

    id: str
    label: str = ""
    sku: Optional[str] = None
    price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    stock: int = 0
    is_active: bool = True

    def unit_price(self) -> Optional[Decimal]:
        """Sale price when set, otherwise the regular price."""
        if self.sale_price is not None:
            return _valid_price(self.sale_price)
        return _valid_price(self.price)


@dataclass
class RecurringPlan:
    """Billing settings of a recurring product."""

    interval: BillingInterval = BillingInterval.MONTHLY
    interval_count: int = 1
    total_cycles: int = 0
    trial_days: int = 0

    def __post_init__(self):
        if not isinstance(self.interval, BillingInterval):
            self.interval = BillingInterval(self.interval)
        self.interval_count = max(1, int(self.interval_count or 1))
        self.total_cycles = max(0, int(self.total_cycles or 0))
        self.trial_days = max(0, int(self.trial_days or 0))


@dataclass
class Product:
    """Product as seen by checkout, inventory and renewals."""

    id: str
    title: str
    price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    price_type: str = "fixed"
    marketplace_type: str = "simple"
    approval_status: Optional[str] = APPROVED
    is_active: bool = True
    stock: int = 0
    allow_backorder: bool = False
    sku: Optional[str] = None
    vendor_id: Optional[str] = None
    category_id: Optional[str] = None
    commission: CommissionRule = field(default_factory=CommissionRule.inherit)
    variations: List[ProductVariation] = field(default_factory=list)
    recurring: Optional[RecurringPlan] = None

    @property
    def is_available(self) -> bool:
        return self.is_active and self.approval_status in (APPROVED, None)

    @property
    def is_grouped(self) -> bool:
        return self.marketplace_type == GROUPED

    @property
    def is_variable(self) -> bool:
        return self.marketplace_type == VARIABLE

    @property
    def is_tba(self) -> bool:
        return self.price_type == PRICE_TYPE_TBA

    @property
    def is_recurring(self) -> bool:
        return self.recurring is not None

    def find_variation(self, variation_id: Optional[str]) -> Optional[ProductVariation]:
        """Return the active variation matching ``variation_id``."""
        if not variation_id:
            return None
        for variation in self.variations:
            if variation.id == str(variation_id) and variation.is_active:
                return variation
        return None

    def base_price(self) -> Optional[Decimal]:
        """
        Resolve the product-level unit price.

        The sale price only wins when the price type is "best" and the sale
        price is valid. Returns None when no valid price exists.
        """
        regular = _valid_price(self.price)
        if self.price_type == PRICE_TYPE_BEST:
            sale = _valid_price(self.sale_price)
            if sale is not None:
                return sale
        return regular


@dataclass
class Vendor:
    """Vendor store."""

    id: str
    store_name: str
    status: str = APPROVED
    vacation_mode: bool = False
    commission: CommissionRule = field(default_factory=CommissionRule.inherit)

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED


@dataclass
class Category:
    """Product category."""

    id: str
    name: str
    commission: CommissionRule = field(default_factory=CommissionRule.inherit)


@dataclass
class CustomerAccount:
    """Registered customer account."""

    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    is_blacklisted: bool = False
    blacklist_reason: Optional[str] = None
