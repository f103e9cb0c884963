"""
In-memory repository implementations.

Used by tests, demos and the ``memory`` database backend. Aggregates are
stored as deep copies so that, like a real database, callers only see
changes after ``save``.
"""
import copy
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain.entities import Category, CustomerAccount, Order, Product, Subscription, Vendor
from core.domain.enums import SubscriptionStatus
from core.domain.repositories import (
    CatalogRepository,
    DuplicateOrderError,
    OrderRepository,
    StockRepository,
    SubscriptionRepository,
)
from core.domain.value_objects import phone_variants

logger = logging.getLogger(__name__)


def _lower(values: Iterable[str]) -> set:
    return {value.strip().lower() for value in values if value and value.strip()}


class InMemoryOrderRepository(OrderRepository):
    """Dictionary-backed order storage keyed by order number."""

    def __init__(self):
        self._storage: Dict[str, Order] = {}
        logger.info("InMemoryOrderRepository initialized (in-memory storage)")

    async def add(self, order: Order) -> None:
        if order.number in self._storage:
            raise DuplicateOrderError(f"Order {order.number} already exists")
        self._store(order)
        logger.info(f"✅ Order added to memory: {order.number}")

    async def save(self, order: Order) -> None:
        self._store(order)
        logger.debug(f"Order saved to memory: {order.number} (status: {order.order_status.value})")

    async def get(self, order_number: str) -> Optional[Order]:
        order = self._storage.get(order_number)
        return copy.deepcopy(order) if order else None

    async def delete(self, order_number: str) -> bool:
        deleted = self._storage.pop(order_number, None) is not None
        if deleted:
            logger.info(f"🗑️ Order deleted from memory: {order_number}")
        return deleted

    async def find_for_customer(
        self,
        user_ids: Iterable[str] = (),
        emails: Iterable[str] = (),
        phones: Iterable[str] = (),
    ) -> List[Order]:
        user_ids = {value for value in user_ids if value}
        emails = _lower(emails)
        phones = {value for value in phones if value}

        matches = []
        for order in self._storage.values():
            address = order.shipping_address
            if (
                (order.user_id and order.user_id in user_ids)
                or (address.email and address.email.strip().lower() in emails)
                or (address.phone and address.phone in phones)
            ):
                matches.append(copy.deepcopy(order))
        return matches

    def all(self) -> List[Order]:
        """Stored orders (for tests)."""
        return [copy.deepcopy(order) for order in self._storage.values()]

    def _store(self, order: Order) -> None:
        stored = copy.deepcopy(order)
        stored.clear_domain_events()
        self._storage[order.number] = stored


class InMemorySubscriptionRepository(SubscriptionRepository):
    """Dictionary-backed subscriptions with a unique source item key."""

    def __init__(self):
        self._storage: Dict[str, Subscription] = {}

    async def save(self, subscription: Subscription) -> None:
        for stored in self._storage.values():
            if stored.source_item_key == subscription.source_item_key and stored.id != subscription.id:
                raise ValueError(
                    f"Subscription for {subscription.source_item_key} already exists"
                )
        self._storage[subscription.id] = copy.deepcopy(subscription)

    async def get(self, subscription_id: str) -> Optional[Subscription]:
        subscription = self._storage.get(subscription_id)
        return copy.deepcopy(subscription) if subscription else None

    async def exists_for_source_item(self, source_item_key: str) -> bool:
        return any(stored.source_item_key == source_item_key for stored in self._storage.values())

    async def find_due(self, now: datetime, limit: int) -> List[Subscription]:
        due = [
            stored
            for stored in self._storage.values()
            if stored.status == SubscriptionStatus.ACTIVE
            and stored.next_billing_at is not None
            and stored.next_billing_at <= now
        ]
        due.sort(key=lambda subscription: subscription.next_billing_at)
        return [copy.deepcopy(subscription) for subscription in due[: max(0, limit)]]

    def all(self) -> List[Subscription]:
        return [copy.deepcopy(subscription) for subscription in self._storage.values()]


class InMemoryCatalogRepository(CatalogRepository, StockRepository):
    """
    Catalog and stock counters held in memory.

    ``try_decrement`` checks and decrements without awaiting in between, so it
    is atomic with respect to other coroutines on the same event loop.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        vendors: Iterable[Vendor] = (),
        categories: Iterable[Category] = (),
        customers: Iterable[CustomerAccount] = (),
    ):
        self._products: Dict[str, Product] = {}
        self._vendors: Dict[str, Vendor] = {}
        self._categories: Dict[str, Category] = {}
        self._customers: Dict[str, CustomerAccount] = {}
        for product in products:
            self.add_product(product)
        for vendor in vendors:
            self.add_vendor(vendor)
        for category in categories:
            self.add_category(category)
        for customer in customers:
            self.add_customer(customer)

    def add_product(self, product: Product) -> None:
        self._products[product.id] = copy.deepcopy(product)

    def add_vendor(self, vendor: Vendor) -> None:
        self._vendors[vendor.id] = copy.deepcopy(vendor)

    def add_category(self, category: Category) -> None:
        self._categories[category.id] = copy.deepcopy(category)

    def add_customer(self, customer: CustomerAccount) -> None:
        self._customers[customer.id] = copy.deepcopy(customer)

    async def get_product(self, product_id: str) -> Optional[Product]:
        product = self._products.get(str(product_id))
        return copy.deepcopy(product) if product else None

    async def get_vendor(self, vendor_id: str) -> Optional[Vendor]:
        vendor = self._vendors.get(str(vendor_id))
        return copy.deepcopy(vendor) if vendor else None

    async def get_category(self, category_id: str) -> Optional[Category]:
        category = self._categories.get(str(category_id))
        return copy.deepcopy(category) if category else None

    async def find_customers(
        self,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        phones: Iterable[str] = (),
    ) -> List[CustomerAccount]:
        email = (email or "").strip().lower()
        variants = set()
        for phone in phones:
            variants.update(phone_variants(phone))

        matches = []
        for customer in self._customers.values():
            if (
                (user_id and customer.id == user_id)
                or (email and (customer.email or "").strip().lower() == email)
                or (customer.phone and variants & set(phone_variants(customer.phone)))
            ):
                matches.append(copy.deepcopy(customer))
        return matches

    async def try_decrement(
        self, product_id: str, quantity: int, variation_id: Optional[str] = None
    ) -> bool:
        holder, _ = self._stock_holder(product_id, variation_id)
        if holder is None or quantity <= 0 or holder.stock < quantity:
            return False
        holder.stock -= quantity
        return True

    async def increment(
        self, product_id: str, quantity: int, variation_id: Optional[str] = None
    ) -> None:
        holder, _ = self._stock_holder(product_id, variation_id)
        if holder is None:
            logger.warning(f"Stock increment skipped, unknown product {product_id}")
            return
        holder.stock += quantity

    def stock_of(self, product_id: str, variation_id: Optional[str] = None) -> Optional[int]:
        """Current stock counter (for tests)."""
        holder, _ = self._stock_holder(product_id, variation_id)
        return holder.stock if holder is not None else None

    def _stock_holder(self, product_id: str, variation_id: Optional[str]) -> Tuple[Optional[object], Optional[Product]]:
        product = self._products.get(str(product_id))
        if product is None:
            return None, None
        if variation_id:
            for variation in product.variations:
                if variation.id == str(variation_id):
                    return variation, product
            return None, product
        return product, product
