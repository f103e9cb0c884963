"""
Order Builder.

Turns raw checkout lines into priced, commissioned order items. Fail-fast:
the first violation aborts the whole batch and no partial item list is
returned.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from core.domain.entities import Category, OrderItem, Product, Vendor
from core.domain.repositories import CatalogRepository
from core.domain.result import ErrorKind, Outcome
from core.domain.value_objects import CommissionRule, ZERO, round_money, to_decimal

from .commission_resolver import CommissionResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutLine:
    """
    Raw cart line as sent by the client.

    ``price`` is only a fallback hint, used when the catalog has no usable price.
    """

    product_id: Any
    quantity: Any = 1
    variation_id: Optional[str] = None
    price: Any = None

    @property
    def normalized_product_id(self) -> str:
        return str(self.product_id or "").strip()

    @property
    def normalized_quantity(self) -> int:
        try:
            quantity = int(self.quantity)
        except (TypeError, ValueError):
            return 1
        return max(1, quantity)


@dataclass
class BuiltOrder:
    """Items produced by the builder plus the catalog data they were built from."""

    items: List[OrderItem]
    subtotal: Decimal
    products: Dict[str, Product] = field(default_factory=dict)


def _fail(message: str, kind: ErrorKind = ErrorKind.VALIDATION) -> Outcome[BuiltOrder]:
    return Outcome.failure(kind, message)


class OrderBuilder:
    """
    Validates cart lines and assembles order items.

    Vendor and category lookups are cached for the duration of one
    ``build`` call.
    """

    def __init__(self, catalog: CatalogRepository, commission_resolver: CommissionResolver) -> None:
        self._catalog = catalog
        self._commission_resolver = commission_resolver

    async def build(
        self,
        lines: List[CheckoutLine],
        global_rule: Optional[CommissionRule] = None,
    ) -> Outcome[BuiltOrder]:
        """
        Build order items for a checkout.

        Args:
            lines: Raw cart lines
            global_rule: Preloaded global commission (loaded from the provider if omitted)

        Returns:
            Outcome with BuiltOrder, or the first validation/conflict failure
        """
        if not lines or any(not line.normalized_product_id for line in lines):
            return _fail("Invalid product data found in checkout items")

        if global_rule is None:
            global_rule = await self._commission_resolver.load_global_rule()

        vendor_cache: Dict[str, Optional[Vendor]] = {}
        category_cache: Dict[str, Optional[Category]] = {}
        built = BuiltOrder(items=[], subtotal=ZERO)

        for line in lines:
            product = await self._catalog.get_product(line.normalized_product_id)
            outcome = await self._build_item(
                line, product, global_rule, vendor_cache, category_cache
            )
            if not outcome.ok:
                logger.info(f"Checkout line rejected ({line.normalized_product_id}): {outcome.message}")
                return outcome.cast()
            built.items.append(outcome.value)
            built.products[product.id] = product

        built.subtotal = round_money(sum((item.line_total for item in built.items), ZERO))
        return Outcome.success(built)

    async def _build_item(
        self,
        line: CheckoutLine,
        product: Optional[Product],
        global_rule: CommissionRule,
        vendor_cache: Dict[str, Optional[Vendor]],
        category_cache: Dict[str, Optional[Category]],
    ) -> Outcome[OrderItem]:
        if product is None:
            return _fail("One or more products are no longer available")
        if not product.is_available:
            return _fail("One or more products are not currently available")
        if product.is_grouped:
            return _fail("Grouped products cannot be purchased directly")

        title = product.title or "Product"
        if product.is_tba:
            return _fail(f"{title} is currently marked as TBA and cannot be purchased")

        variation = None
        if product.is_variable:
            variation = product.find_variation(line.variation_id)
            if variation is None:
                return _fail("Please select a valid variation for variable products")

        # ================================================================
        # Unit price: variation -> base price -> client hint -> 0
        # ================================================================
        resolved = variation.unit_price() if variation else product.base_price()
        if resolved is None:
            hint = to_decimal(line.price, default=Decimal("-1"))
            resolved = hint if hint >= ZERO else ZERO
        unit_price = round_money(resolved)

        quantity = line.normalized_quantity
        available = max(variation.stock if variation else product.stock, 0)
        if not product.allow_backorder and quantity > available:
            return _fail(f"{title} has only {available} item(s) in stock", ErrorKind.CONFLICT)

        vendor = None
        if product.vendor_id:
            vendor = await self._cached(vendor_cache, product.vendor_id, self._catalog.get_vendor)
            if vendor is None or not vendor.is_approved:
                return _fail("One or more vendor stores are currently unavailable")
            if vendor.vacation_mode:
                return _fail(f'Store "{vendor.store_name or "Vendor"}" is currently on vacation')

        category = None
        if product.category_id:
            category = await self._cached(
                category_cache, product.category_id, self._catalog.get_category
            )

        item_total = round_money(unit_price * quantity)
        commission = self._commission_resolver.resolve(
            item_total, product, category, vendor, global_rule
        )

        return Outcome.success(
            OrderItem(
                product_id=product.id,
                quantity=quantity,
                unit_price=unit_price,
                commission=commission,
                title=product.title,
                vendor_id=product.vendor_id,
                category_id=product.category_id,
                variation_id=variation.id if variation else None,
                variation_label=variation.label if variation else None,
                sku=(variation.sku if variation else product.sku) or None,
            )
        )

    @staticmethod
    async def _cached(cache: Dict[str, Any], key: str, loader) -> Any:
        if key not in cache:
            cache[key] = await loader(key)
        return cache[key]
