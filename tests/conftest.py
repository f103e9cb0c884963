"""Shared fixtures: in-memory settlement graph and catalog factories."""

from decimal import Decimal

import pytest

from core.application.services import (
    CommissionResolver,
    CustomerRiskService,
    InventoryLedger,
    OrderApplicationService,
    OrderBuilder,
    OrderNotificationHandler,
    OrderStatusMachine,
    PricingEngine,
    RenewalBillingService,
    SubscriptionService,
)
from core.application.use_cases import PlaceOrderRequest, PlaceOrderUseCase
from core.domain.entities import Category, Product, ShippingAddress, Vendor
from core.domain.value_objects import CommissionRule
from core.infrastructure.adapters.coupons import InMemoryCouponValidator
from core.infrastructure.adapters.courier import CourierAdapter
from core.infrastructure.adapters.notifications import MockNotificationService
from core.infrastructure.adapters.payments import ManualPaymentGateway
from core.infrastructure.adapters.persistence import (
    InMemoryCatalogRepository,
    InMemoryOrderRepository,
    InMemorySubscriptionRepository,
)
from core.infrastructure.config_provider import StaticConfigProvider
from core.infrastructure.event_bus import InMemoryEventBus


@pytest.fixture
def shipping_address() -> ShippingAddress:
    return ShippingAddress(
        first_name="Rahim",
        last_name="Uddin",
        email="rahim@example.com",
        phone="01712345678",
        address="House 12, Road 5",
        city="Dhaka",
        postal_code="1205",
    )


@pytest.fixture
def make_product():
    """Factory for approved, active, fixed-price products."""

    def _make(product_id="p1", price="100", stock=10, vendor_id="v1", **kwargs) -> Product:
        return Product(
            id=product_id,
            title=kwargs.pop("title", f"Product {product_id}"),
            price=Decimal(price) if price is not None else None,
            stock=stock,
            vendor_id=vendor_id,
            **kwargs,
        )

    return _make


@pytest.fixture
def vendor() -> Vendor:
    return Vendor(id="v1", store_name="Green Store")


@pytest.fixture
def catalog(make_product, vendor) -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository(
        products=[
            make_product("p1", price="100", stock=10),
            make_product("p2", price="50", stock=5),
        ],
        vendors=[vendor],
        categories=[
            Category(
                id="c1",
                name="Groceries",
                commission=CommissionRule(type="percentage", value=Decimal("10")),
            )
        ],
    )


@pytest.fixture
def orders() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def subscriptions() -> InMemorySubscriptionRepository:
    return InMemorySubscriptionRepository()


@pytest.fixture
def config_provider() -> StaticConfigProvider:
    return StaticConfigProvider()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def published_events(event_bus) -> list:
    """Events seen by a recording subscriber."""
    events = []
    event_bus.subscribe(events.append)
    return events


@pytest.fixture
def notification_service(event_bus) -> MockNotificationService:
    service = MockNotificationService()
    event_bus.subscribe(OrderNotificationHandler(service).handle)
    return service


@pytest.fixture
def coupon_validator() -> InMemoryCouponValidator:
    return InMemoryCouponValidator()


@pytest.fixture
def courier(config_provider) -> CourierAdapter:
    return CourierAdapter(config_provider)


@pytest.fixture
def resolver(config_provider) -> CommissionResolver:
    return CommissionResolver(config_provider)


@pytest.fixture
def ledger(catalog) -> InventoryLedger:
    return InventoryLedger(catalog, catalog)


@pytest.fixture
def status_machine(ledger, courier) -> OrderStatusMachine:
    return OrderStatusMachine(ledger, courier)


@pytest.fixture
def risk_service(catalog, orders) -> CustomerRiskService:
    return CustomerRiskService(catalog, orders)


@pytest.fixture
def place_order(
    orders, catalog, resolver, ledger, subscriptions, event_bus, risk_service, coupon_validator
) -> PlaceOrderUseCase:
    return PlaceOrderUseCase(
        orders=orders,
        catalog=catalog,
        order_builder=OrderBuilder(catalog, resolver),
        pricing_engine=PricingEngine(coupon_validator),
        inventory_ledger=ledger,
        subscription_service=SubscriptionService(subscriptions),
        event_bus=event_bus,
        risk_service=risk_service,
        coupon_validator=coupon_validator,
        payment_gateway=ManualPaymentGateway(),
    )


@pytest.fixture
def order_service(orders, status_machine, courier, event_bus) -> OrderApplicationService:
    return OrderApplicationService(orders, status_machine, courier, event_bus)


@pytest.fixture
def renewal_billing(subscriptions, orders, catalog, resolver, event_bus) -> RenewalBillingService:
    return RenewalBillingService(subscriptions, orders, catalog, resolver, event_bus=event_bus)


@pytest.fixture
def checkout_request(shipping_address):
    """Factory for checkout requests from a registered customer."""

    def _make(lines, **kwargs) -> PlaceOrderRequest:
        kwargs.setdefault("payment_method", "cod")
        kwargs.setdefault("user_id", "u1")
        return PlaceOrderRequest(items=list(lines), shipping_address=shipping_address, **kwargs)

    return _make
