"""
Place Order Use Case.

Checkout for registered customers, guests and admin-entered manual orders.

Flow:
1. Validate shipping address and payment method
2. Block contacts whose account is flagged blacklisted
3. Build priced, commissioned items (Order Builder)
4. Apply coupon and shipping (Pricing Engine)
5. Persist the order
6. Reserve inventory        -> on failure: delete order
7. Count coupon usage       -> on failure: restore inventory, delete order
8. Mark inventory deducted, create subscriptions, publish events
9. Initiate payment (failure keeps the order, payment_url stays None)
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union
import logging

from core.application.interfaces import (
    ICouponValidator,
    IPaymentGateway,
    CouponValidation,
)
from core.application.services.customer_risk import CustomerRiskService
from core.application.services.inventory_ledger import InventoryLedger
from core.application.services.order_numbers import add_with_fresh_number
from core.application.services.order_builder import CheckoutLine, OrderBuilder
from core.application.services.pricing_engine import PricingEngine
from core.application.services.subscription_service import SubscriptionService
from core.domain.clock import utc_now
from core.domain.entities import (
    Attribution,
    InventoryAdjustment,
    Order,
    PaymentDetails,
    ShippingAddress,
)
from core.domain.enums import OrderStatus
from core.domain.event_bus import EventBus
from core.domain.events import OrderPlacedEvent
from core.domain.repositories import CatalogRepository, OrderRepository
from core.domain.result import ErrorKind, Outcome
from core.domain.value_objects import ExecutionID, OrderNumber, ZERO

logger = logging.getLogger(__name__)

ADMIN_MANUAL_CHANNEL = "admin_manual"


# =============================================================================
# REQUEST / RESPONSE DTOs (Application Layer)
# =============================================================================

@dataclass
class PlaceOrderRequest:
    """Input for the checkout use case."""

    items: List[CheckoutLine]
    shipping_address: ShippingAddress
    payment_method: Union[str, Dict[str, Any]] = ""
    payment_details: Dict[str, Any] = field(default_factory=dict)
    shipping_fee: Decimal = ZERO
    coupon_code: Optional[str] = None
    user_id: Optional[str] = None
    notes: str = ""
    source_channel: str = "web"
    landing_page_id: Optional[str] = None
    created_by: Optional[str] = None


@dataclass
class PlaceOrderResponse:
    """Output of the checkout use case."""

    execution_id: ExecutionID
    success: bool
    status: int = 201
    order: Optional[Order] = None

    # Payment gateway
    payment_url: Optional[str] = None
    payment_error: Optional[str] = None

    subscriptions_created: int = 0

    # Error data
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error_details: Dict[str, Any] = field(default_factory=dict)

    timestamp: datetime = field(default_factory=utc_now)

    @classmethod
    def failed(cls, execution_id: ExecutionID, outcome: Outcome) -> "PlaceOrderResponse":
        return cls(
            execution_id=execution_id,
            success=False,
            status=outcome.status,
            error=outcome.message,
            error_kind=outcome.error,
            error_details=dict(outcome.details),
        )


# =============================================================================
# USE CASE
# =============================================================================

class PlaceOrderUseCase:
    """
    Checkout orchestration with compensation.

    The order row is never left behind without its inventory effects: every
    failure after the order is persisted reverses applied stock and deletes
    the order before reporting.
    """

    def __init__(
        self,
        orders: OrderRepository,
        catalog: CatalogRepository,
        order_builder: OrderBuilder,
        pricing_engine: PricingEngine,
        inventory_ledger: InventoryLedger,
        subscription_service: SubscriptionService,
        event_bus: EventBus,
        risk_service: Optional[CustomerRiskService] = None,
        coupon_validator: Optional[ICouponValidator] = None,
        payment_gateway: Optional[IPaymentGateway] = None,
    ):
        """
        Initialize use case with dependencies.

        Args:
            orders: Order persistence
            catalog: Catalog lookups (customer account for the payment gateway)
            order_builder: Builds priced, commissioned items
            pricing_engine: Applies coupon and shipping
            inventory_ledger: Reserves and restores stock
            subscription_service: Creates subscriptions for recurring lines
            event_bus: Publishes OrderPlaced
            risk_service: Blocks flagged contacts (skipped if None)
            coupon_validator: Counts coupon usage once the order is in place
            payment_gateway: Optional payment initiator
        """
        self.orders = orders
        self.catalog = catalog
        self.order_builder = order_builder
        self.pricing_engine = pricing_engine
        self.inventory_ledger = inventory_ledger
        self.subscription_service = subscription_service
        self.event_bus = event_bus
        self.risk_service = risk_service
        self.coupon_validator = coupon_validator
        self.payment_gateway = payment_gateway

    async def execute(self, request: PlaceOrderRequest) -> PlaceOrderResponse:
        """
        Execute the checkout workflow.

        Args:
            request: PlaceOrderRequest

        Returns:
            PlaceOrderResponse (success or failure with kind and status)

        Raises:
            No exceptions - all errors are caught and returned in response
        """
        execution_id = ExecutionID.generate()
        logger.info(f"[{execution_id}] Checkout started ({request.source_channel}, {len(request.items)} line(s))")

        order: Optional[Order] = None
        finalized = False
        try:
            # ================================================================
            # STEP 1: Validate input
            # ================================================================
            missing = request.shipping_address.missing_fields()
            if missing:
                return PlaceOrderResponse.failed(
                    execution_id,
                    Outcome.failure(
                        ErrorKind.VALIDATION,
                        f"Missing shipping address fields: {', '.join(missing)}",
                        missing_fields=missing,
                    ),
                )

            payment_details = PaymentDetails.normalize(request.payment_details, request.payment_method)
            if not payment_details.method:
                return PlaceOrderResponse.failed(
                    execution_id, Outcome.failure(ErrorKind.VALIDATION, "Payment method is required")
                )

            # ================================================================
            # STEP 2: Blacklist check
            # ================================================================
            blocked = await self._check_blacklist(request)
            if blocked is not None:
                logger.warning(f"[{execution_id}] ❌ Checkout blocked: {blocked.message}")
                return PlaceOrderResponse.failed(execution_id, blocked)

            # ================================================================
            # STEP 3: Build items
            # ================================================================
            built = await self.order_builder.build(request.items)
            if not built.ok:
                return PlaceOrderResponse.failed(execution_id, built)

            # ================================================================
            # STEP 4: Pricing
            # ================================================================
            priced = await self.pricing_engine.price(
                built.value.subtotal,
                request.shipping_fee,
                built.value.items,
                coupon_code=request.coupon_code,
            )
            if not priced.ok:
                return PlaceOrderResponse.failed(execution_id, priced)
            pricing = priced.value

            # ================================================================
            # STEP 5: Persist order
            # ================================================================
            order = await add_with_fresh_number(
                self.orders,
                lambda: self._new_order(request, built.value.items, pricing, payment_details),
            )
            logger.info(f"[{execution_id}] Order {order.number} persisted (total={order.total})")

            # ================================================================
            # STEP 6: Reserve inventory
            # ================================================================
            reserved = await self.inventory_ledger.reserve(order.items)
            if not reserved.ok:
                await self._compensate(order, [], execution_id)
                order = None
                return PlaceOrderResponse.failed(
                    execution_id,
                    Outcome.failure(
                        ErrorKind.COMPENSATION,
                        reserved.message,
                        status=reserved.status,
                        cause=reserved.error.value,
                        **reserved.details,
                    ),
                )
            adjustments = reserved.value

            # ================================================================
            # STEP 7: Count coupon usage
            # ================================================================
            if pricing.coupon is not None and not await self._redeem(pricing.coupon, execution_id):
                await self._compensate(order, adjustments, execution_id)
                order = None
                return PlaceOrderResponse.failed(
                    execution_id,
                    Outcome.failure(
                        ErrorKind.COMPENSATION,
                        "Coupon is no longer valid. Please try again",
                        cause="coupon",
                    ),
                )

            # ================================================================
            # STEP 8: Finalize
            # ================================================================
            order.inventory.mark_deducted(adjustments, utc_now())
            await self.orders.save(order)
            finalized = True

            subscriptions_created = await self._create_subscriptions(
                order, built.value.products, execution_id
            )

            order.record_event(
                OrderPlacedEvent(
                    order_number=order.number,
                    customer_email=order.customer_email,
                    total=order.total,
                    source_channel=order.attribution.source_channel,
                    item_count=len(order.items),
                    execution_id=str(execution_id),
                )
            )
            await self.event_bus.publish_all(order.get_domain_events())
            order.clear_domain_events()

            # ================================================================
            # STEP 9: Payment gateway (non-fatal)
            # ================================================================
            payment_url, payment_error = await self._initiate_payment(order, request, execution_id)

            logger.info(f"[{execution_id}] ✅ Order {order.number} placed")
            return PlaceOrderResponse(
                execution_id=execution_id,
                success=True,
                order=order,
                payment_url=payment_url,
                payment_error=payment_error,
                subscriptions_created=subscriptions_created,
            )

        except Exception as e:
            logger.error(f"[{execution_id}] ❌ Checkout failed: {e}", exc_info=True)
            if order is not None and not finalized:
                await self._compensate(order, order.inventory.adjustments, execution_id)
            return PlaceOrderResponse(
                execution_id=execution_id,
                success=False,
                status=500,
                error="Order could not be placed",
                error_details={"exception": type(e).__name__, "message": str(e)},
            )

    async def _check_blacklist(self, request: PlaceOrderRequest) -> Optional[Outcome]:
        if self.risk_service is None:
            return None
        profile = await self.risk_service.profile(
            email=request.shipping_address.email,
            phone=request.shipping_address.phone,
            user_id=request.user_id,
        )
        if profile.ok and profile.value.is_blacklisted:
            return Outcome.failure(
                ErrorKind.CONFLICT,
                "This customer is not allowed to place orders",
                status=403,
                reason=profile.value.blacklist_reason,
            )
        return None

    def _new_order(
        self,
        request: PlaceOrderRequest,
        items,
        pricing,
        payment_details: PaymentDetails,
    ) -> Order:
        now = utc_now()
        is_manual = request.source_channel == ADMIN_MANUAL_CHANNEL
        order = Order(
            order_number=OrderNumber.generate(now=now),
            user_id=request.user_id,
            items=list(items),
            shipping_address=request.shipping_address,
            payment_method=payment_details.method,
            payment_details=payment_details,
            subtotal=pricing.subtotal,
            shipping_fee=pricing.shipping_fee,
            discount=pricing.discount,
            total=pricing.total,
            coupon_code=pricing.coupon_code,
            attribution=Attribution(
                source_channel=request.source_channel or "web",
                landing_page_id=request.landing_page_id,
                created_by=request.created_by,
            ),
            notes=request.notes or "",
            created_at=now,
            updated_at=now,
        )
        order.record_timeline(
            OrderStatus.PENDING,
            "Manual order created" if is_manual else "Order placed",
            actor=(request.created_by if is_manual else request.user_id) or "guest",
            actor_role="admin" if is_manual else "customer",
            at=now,
        )
        return order

    async def _redeem(self, coupon: CouponValidation, execution_id: ExecutionID) -> bool:
        if self.coupon_validator is None:
            return True
        try:
            return await self.coupon_validator.redeem(coupon)
        except Exception as e:
            logger.error(f"[{execution_id}] Coupon redemption failed: {e}", exc_info=True)
            return False

    async def _compensate(
        self, order: Order, adjustments: List[InventoryAdjustment], execution_id: ExecutionID
    ) -> None:
        """Reverse applied stock, then delete the order."""
        logger.warning(f"[{execution_id}] Compensating checkout for {order.number}")
        try:
            await self.inventory_ledger.rollback(adjustments)
        finally:
            await self.orders.delete(order.number)

    async def _create_subscriptions(self, order: Order, products, execution_id: ExecutionID) -> int:
        try:
            summary = await self.subscription_service.create_from_order(order, products)
        except Exception as e:
            logger.error(
                f"[{execution_id}] Subscriptions for {order.number} not created: {e}", exc_info=True
            )
            return 0
        return len(summary.created)

    async def _initiate_payment(self, order: Order, request: PlaceOrderRequest, execution_id: ExecutionID):
        if self.payment_gateway is None:
            return None, None

        try:
            customer = None
            if order.user_id:
                accounts = await self.catalog.find_customers(user_id=order.user_id)
                customer = accounts[0] if accounts else None

            initiation = await self.payment_gateway.initiate(order, order.payment_method, customer)
        except Exception as e:
            logger.error(
                f"[{execution_id}] ❌ Payment initiation failed for {order.number}: {e}", exc_info=True
            )
            return None, str(e) or "Payment gateway unavailable"

        details = order.payment_details
        details.provider_type = initiation.provider_type or details.provider_type
        details.gateway_payment_id = initiation.gateway_payment_id
        details.meta.update(initiation.meta or {})
        await self.orders.save(order)
        return initiation.payment_url, None
