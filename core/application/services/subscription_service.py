"""Creation of recurring subscriptions from checkout orders."""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, List

from core.domain.entities import Order, Product, ShippingAddress, Subscription
from core.domain.repositories import SubscriptionRepository
from core.domain.services import add_billing_interval
from core.domain.value_objects import SUBSCRIPTION_PREFIX, generate_reference

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "BDT"


@dataclass
class SubscriptionCreationSummary:
    created: List[Subscription] = field(default_factory=list)
    skipped: int = 0


def safe_shipping_address(address: ShippingAddress, fallback_email: str = "") -> ShippingAddress:
    """Fill blank address fields so a renewal order always has a complete snapshot."""

    def pick(value: str, default: str) -> str:
        return (value or "").strip() or default

    return ShippingAddress(
        first_name=pick(address.first_name, "Customer"),
        last_name=pick(address.last_name, "Subscription"),
        email=pick(address.email or fallback_email, "guest@example.com").lower(),
        phone=pick(address.phone, "01000000000"),
        address=pick(address.address, "N/A"),
        city=pick(address.city, "Dhaka"),
        postal_code=pick(address.postal_code, "1200"),
        district=pick(address.district, "Dhaka"),
        country=pick(address.country, "Bangladesh"),
    )


class SubscriptionService:
    """Creates at most one subscription per eligible order line."""

    def __init__(self, subscriptions: SubscriptionRepository) -> None:
        self._subscriptions = subscriptions

    async def create_from_order(
        self, order: Order, products: Dict[str, Product]
    ) -> SubscriptionCreationSummary:
        """
        Create subscriptions for the recurring lines of a new order.

        A line is eligible when its product is recurring, active and not
        TBA-priced, the order has an owner (user or email) and the line has a
        vendor. Existing ``source_item_key`` values are skipped.

        Args:
            order: Freshly placed order
            products: Catalog products used to build the order, by id

        Returns:
            SubscriptionCreationSummary
        """
        summary = SubscriptionCreationSummary()
        guest_email = (order.customer_email or "").strip().lower()

        for index, item in enumerate(order.items):
            product = products.get(item.product_id)
            if product is None or not product.is_recurring or not product.is_active or product.is_tba:
                summary.skipped += 1
                continue

            source_item_key = f"{order.number}:{index}"
            if await self._subscriptions.exists_for_source_item(source_item_key):
                summary.skipped += 1
                continue

            if not order.user_id and not guest_email:
                summary.skipped += 1
                continue

            vendor_id = item.vendor_id or product.vendor_id
            if not vendor_id:
                summary.skipped += 1
                continue

            plan = product.recurring
            starts_at = order.created_at + timedelta(days=plan.trial_days)
            subscription = Subscription(
                id=str(uuid.uuid4()),
                subscription_number=generate_reference(SUBSCRIPTION_PREFIX, max_suffix=99999),
                product_id=product.id,
                product_title=product.title,
                source_order_number=order.number,
                source_item_key=source_item_key,
                user_id=order.user_id,
                guest_email=None if order.user_id else guest_email,
                vendor_id=vendor_id,
                variation_id=item.variation_id,
                variation_label=item.variation_label,
                quantity=item.quantity,
                unit_price=item.unit_price,
                currency=DEFAULT_CURRENCY,
                interval=plan.interval,
                interval_count=plan.interval_count,
                total_cycles=plan.total_cycles,
                trial_days=plan.trial_days,
                starts_at=starts_at,
                next_billing_at=add_billing_interval(starts_at, plan.interval, plan.interval_count),
                payment_method=order.payment_method or "manual",
                shipping_address=safe_shipping_address(order.shipping_address, guest_email),
            )

            try:
                await self._subscriptions.save(subscription)
            except ValueError as e:
                # Duplicate source item key written concurrently
                logger.warning(f"Subscription for {source_item_key} not created: {e}")
                summary.skipped += 1
                continue

            logger.info(f"✅ Subscription {subscription.subscription_number} created from {source_item_key}")
            summary.created.append(subscription)

        return summary
