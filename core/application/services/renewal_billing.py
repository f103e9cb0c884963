"""
Recurring subscription billing.

One sweep bills every due subscription (up to a bounded batch), strictly
sequentially. A failure while billing one subscription is recorded on that
subscription only, which is still rescheduled forward.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from core.domain.clock import utc_now
from core.domain.entities import (
    Attribution,
    Order,
    OrderItem,
    PaymentDetails,
    Product,
    ShippingAddress,
    ShippingMeta,
    Subscription,
)
from core.domain.enums import OrderStatus, RenewalStatus
from core.domain.event_bus import EventBus
from core.domain.events import RenewalOrderCreatedEvent
from core.domain.repositories import CatalogRepository, OrderRepository, SubscriptionRepository
from core.domain.services import add_billing_interval
from core.domain.value_objects import (
    RENEWAL_PREFIX,
    CommissionRule,
    CommissionSnapshot,
    ExecutionID,
    OrderNumber,
)

from .commission_resolver import CommissionResolver
from .order_numbers import add_with_fresh_number
from .subscription_service import safe_shipping_address

logger = logging.getLogger(__name__)

RENEWAL_SKU = "RECURRING"
DEFAULT_BATCH_SIZE = 100
MAX_BATCH_SIZE = 300


def clamp_batch_size(limit) -> int:
    """Clamp a requested batch size to 1..300 (invalid values mean 100)."""
    try:
        value = int(limit)
    except (TypeError, ValueError):
        value = DEFAULT_BATCH_SIZE
    if value == 0:
        value = DEFAULT_BATCH_SIZE
    return min(max(value, 1), MAX_BATCH_SIZE)


@dataclass
class RenewalRunSummary:
    """Counters of one billing sweep."""

    processed: int = 0
    created_orders: int = 0
    completed: int = 0
    skipped: int = 0
    failed: int = 0
    order_numbers: List[str] = field(default_factory=list)


class RenewalBillingService:
    """Generates renewal orders for due subscriptions."""

    def __init__(
        self,
        subscriptions: SubscriptionRepository,
        orders: OrderRepository,
        catalog: CatalogRepository,
        commission_resolver: CommissionResolver,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._subscriptions = subscriptions
        self._orders = orders
        self._catalog = catalog
        self._commission_resolver = commission_resolver
        self._event_bus = event_bus

    async def process_due(
        self, limit: int = DEFAULT_BATCH_SIZE, now: Optional[datetime] = None
    ) -> RenewalRunSummary:
        """
        Run one billing sweep.

        Args:
            limit: Maximum subscriptions to process (clamped to 1..300)
            now: Reference time (defaults to now)

        Returns:
            RenewalRunSummary
        """
        execution_id = ExecutionID.generate()
        now = now or utc_now()
        summary = RenewalRunSummary()

        due = await self._subscriptions.find_due(now, clamp_batch_size(limit))
        if not due:
            logger.debug(f"[{execution_id}] No subscriptions due")
            return summary

        logger.info(f"[{execution_id}] Billing {len(due)} due subscription(s)")
        global_rule = await self._commission_resolver.load_global_rule()

        for subscription in due:
            summary.processed += 1
            try:
                await self._bill(subscription, global_rule, now, summary)
            except Exception as e:
                logger.error(
                    f"[{execution_id}] ❌ Renewal failed for {subscription.subscription_number}: {e}",
                    exc_info=True,
                )
                summary.failed += 1
                await self._record_failure(subscription, now, str(e) or "Failed to create renewal order")

        logger.info(
            f"[{execution_id}] Renewal sweep done: processed={summary.processed} "
            f"created={summary.created_orders} completed={summary.completed} "
            f"skipped={summary.skipped} failed={summary.failed}"
        )
        return summary

    async def _bill(
        self,
        subscription: Subscription,
        global_rule: CommissionRule,
        now: datetime,
        summary: RenewalRunSummary,
    ) -> None:
        # ================================================================
        # STEP 1: Cycle cap already met
        # ================================================================
        if subscription.cycle_cap_reached:
            subscription.complete()
            await self._subscriptions.save(subscription)
            summary.completed += 1
            return

        # ================================================================
        # STEP 2: Product still billable?
        # ================================================================
        product = await self._catalog.get_product(subscription.product_id)
        if product is None or not product.is_active or product.is_tba:
            subscription.record_renewal(
                RenewalStatus.SKIPPED, now, note="Product is inactive or not billable"
            )
            subscription.next_billing_at = add_billing_interval(
                now, subscription.interval, subscription.interval_count
            )
            await self._subscriptions.save(subscription)
            summary.skipped += 1
            return

        # ================================================================
        # STEP 3: Commission + renewal order
        # ================================================================
        vendor = await self._catalog.get_vendor(subscription.vendor_id) if subscription.vendor_id else None
        category = await self._catalog.get_category(product.category_id) if product.category_id else None
        amount = subscription.cycle_amount
        commission = self._commission_resolver.resolve(amount, product, category, vendor, global_rule)

        order = await add_with_fresh_number(
            self._orders,
            lambda: self._build_renewal_order(subscription, product, commission, utc_now()),
        )

        # ================================================================
        # STEP 4: Advance the subscription
        # ================================================================
        subscription.completed_cycles += 1
        subscription.last_billed_at = now
        subscription.record_renewal(
            RenewalStatus.CREATED,
            now,
            amount=amount,
            order_number=order.number,
            note="Renewal order generated",
        )
        if subscription.cycle_cap_reached:
            subscription.complete()
            summary.completed += 1
        else:
            subscription.next_billing_at = add_billing_interval(
                subscription.next_billing_at or now,
                subscription.interval,
                subscription.interval_count,
            )

        await self._subscriptions.save(subscription)
        summary.created_orders += 1
        summary.order_numbers.append(order.number)
        logger.info(f"✅ Renewal order {order.number} for {subscription.subscription_number}")

        if self._event_bus:
            await self._event_bus.publish(
                RenewalOrderCreatedEvent(
                    order_number=order.number,
                    subscription_id=subscription.id,
                    subscription_number=subscription.subscription_number,
                    customer_email=order.customer_email,
                    amount=amount,
                )
            )

    async def _record_failure(self, subscription: Subscription, now: datetime, message: str) -> None:
        subscription.record_renewal(RenewalStatus.FAILED, now, note=message[:500])
        subscription.next_billing_at = add_billing_interval(
            now, subscription.interval, subscription.interval_count
        )
        try:
            await self._subscriptions.save(subscription)
        except Exception as e:
            logger.error(
                f"Could not reschedule {subscription.subscription_number} after failure: {e}",
                exc_info=True,
            )

    @staticmethod
    def _build_renewal_order(
        subscription: Subscription,
        product: Product,
        commission: CommissionSnapshot,
        now: datetime,
    ) -> Order:
        method = (subscription.payment_method or "").strip() or "manual"
        address = subscription.shipping_address or ShippingAddress(
            first_name="", last_name="", email="", phone="", address="", city="", postal_code=""
        )
        amount = subscription.cycle_amount

        order = Order(
            order_number=OrderNumber.generate(RENEWAL_PREFIX, now=now, max_suffix=99999),
            user_id=subscription.user_id,
            items=[
                OrderItem(
                    product_id=product.id,
                    quantity=subscription.quantity,
                    unit_price=subscription.unit_price,
                    commission=commission,
                    title=product.title,
                    vendor_id=subscription.vendor_id,
                    category_id=product.category_id,
                    sku=RENEWAL_SKU,
                )
            ],
            shipping_address=safe_shipping_address(address, subscription.guest_email or ""),
            payment_method=method,
            payment_details=PaymentDetails(
                method=method,
                provider_type="recurring",
                transaction_id=f"AUTO-RENEWAL-{int(now.timestamp() * 1000)}",
            ),
            subtotal=amount,
            total=amount,
            shipping_meta=ShippingMeta(
                recurring_renewal=True,
                subscription_id=subscription.id,
                subscription_number=subscription.subscription_number,
            ),
            attribution=Attribution(source_channel="subscription"),
            created_at=now,
            updated_at=now,
        )
        order.record_timeline(
            OrderStatus.PENDING,
            f"Renewal order for subscription {subscription.subscription_number}",
            actor="renewal-scheduler",
            actor_role="system",
            at=now,
        )
        return order
