"""Integration tests for the SQLAlchemy repositories on SQLite."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.application.services import (
    CheckoutLine,
    CommissionResolver,
    CustomerRiskService,
    InventoryLedger,
    OrderBuilder,
    PricingEngine,
    SubscriptionService,
)
from core.application.use_cases import PlaceOrderRequest, PlaceOrderUseCase
from core.data.models.base import Base
from core.data.repositories import (
    SqlAlchemyCatalogRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyStockRepository,
    SqlAlchemySubscriptionRepository,
)
from core.domain.entities import (
    CustomerAccount,
    OrderItem,
    Product,
    ProductVariation,
    ShippingAddress,
    Subscription,
    Vendor,
)
from core.domain.enums import BillingInterval, OrderStatus, SubscriptionStatus
from core.domain.repositories import DuplicateOrderError
from core.domain.value_objects import CommissionSnapshot
from core.infrastructure.adapters.coupons import InMemoryCouponValidator
from core.infrastructure.adapters.payments import ManualPaymentGateway
from core.infrastructure.config_provider import StaticConfigProvider
from core.infrastructure.event_bus import InMemoryEventBus

NOW = datetime(2024, 6, 15, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def sql_orders(test_session_factory):
    return SqlAlchemyOrderRepository(test_session_factory)


@pytest.fixture
def sql_subscriptions(test_session_factory):
    return SqlAlchemySubscriptionRepository(test_session_factory)


@pytest.fixture
def sql_catalog(test_session_factory):
    return SqlAlchemyCatalogRepository(test_session_factory)


@pytest.fixture
def sql_stock(test_session_factory):
    return SqlAlchemyStockRepository(test_session_factory)


@pytest_asyncio.fixture
async def seeded(sql_catalog):
    await sql_catalog.add_vendor(Vendor(id="v1", store_name="Green Store"))
    await sql_catalog.add_product(Product(id="p1", title="Rice 5kg", price=Decimal("100"), stock=10, vendor_id="v1"))
    await sql_catalog.add_product(
        Product(
            id="shirt",
            title="Shirt",
            vendor_id="v1",
            marketplace_type="variable",
            variations=[ProductVariation(id="red", label="Red", price=Decimal("300"), stock=2)],
        )
    )
    await sql_catalog.add_customer(CustomerAccount(id="u1", email="Rahim@Example.com", phone="+8801712345678"))
    return sql_catalog


@pytest.fixture
def sql_place_order(sql_orders, sql_subscriptions, sql_catalog, sql_stock, seeded):
    resolver = CommissionResolver(StaticConfigProvider())
    coupons = InMemoryCouponValidator()
    return PlaceOrderUseCase(
        orders=sql_orders,
        catalog=sql_catalog,
        order_builder=OrderBuilder(sql_catalog, resolver),
        pricing_engine=PricingEngine(coupons),
        inventory_ledger=InventoryLedger(sql_catalog, sql_stock),
        subscription_service=SubscriptionService(sql_subscriptions),
        event_bus=InMemoryEventBus(),
        risk_service=CustomerRiskService(sql_catalog, sql_orders),
        coupon_validator=coupons,
        payment_gateway=ManualPaymentGateway(),
    )


@pytest_asyncio.fixture
async def placed(sql_place_order):
    response = await sql_place_order.execute(
        PlaceOrderRequest(
            items=[CheckoutLine(product_id="p1", quantity=2)],
            shipping_address=ShippingAddress(
                first_name="Rahim",
                email="rahim@example.com",
                phone="01712345678",
                address="House 12",
                city="Dhaka",
            ),
            payment_method="cod",
            user_id="u1",
        )
    )
    assert response.success, response.error
    return response.order


def subscription(number, due_in_hours, **kwargs) -> Subscription:
    return Subscription(
        id=number,
        subscription_number=number,
        product_id="p1",
        source_order_number="ORD-1-1",
        source_item_key=kwargs.pop("source_item_key", f"ORD-1-1:{number}"),
        unit_price=Decimal("100"),
        interval=BillingInterval.MONTHLY,
        starts_at=NOW - timedelta(days=30),
        user_id="u1",
        next_billing_at=NOW + timedelta(hours=due_in_hours),
        **kwargs,
    )


class TestOrderRepository:
    @pytest.mark.asyncio
    async def test_checkout_persists_order_and_stock(self, placed, sql_orders, sql_catalog):
        loaded = await sql_orders.get(placed.number)

        assert loaded.total == Decimal("200.00")
        assert loaded.items[0].quantity == 2
        assert loaded.items[0].commission.amount == placed.items[0].commission.amount
        assert loaded.inventory.deducted is True
        assert (await sql_catalog.get_product("p1")).stock == 8

    @pytest.mark.asyncio
    async def test_duplicate_add_rejected(self, placed, sql_orders):
        with pytest.raises(DuplicateOrderError):
            await sql_orders.add(placed)

    @pytest.mark.asyncio
    async def test_save_updates_status(self, placed, sql_orders):
        order = await sql_orders.get(placed.number)
        order.order_status = OrderStatus.CONFIRMED

        await sql_orders.save(order)

        assert (await sql_orders.get(placed.number)).order_status == OrderStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_find_for_customer_and_delete(self, placed, sql_orders):
        by_email = await sql_orders.find_for_customer(emails=["RAHIM@example.com"])
        by_user = await sql_orders.find_for_customer(user_ids=["u1"])

        assert [order.number for order in by_email] == [placed.number]
        assert len(by_user) == 1
        assert await sql_orders.find_for_customer() == []

        assert await sql_orders.delete(placed.number) is True
        assert await sql_orders.get(placed.number) is None


class TestSubscriptionRepository:
    @pytest.mark.asyncio
    async def test_source_item_key_is_unique(self, sql_subscriptions):
        await sql_subscriptions.save(subscription("SUB-1", -1, source_item_key="ORD-1-1:0"))

        with pytest.raises(ValueError):
            await sql_subscriptions.save(subscription("SUB-2", -1, source_item_key="ORD-1-1:0"))
        assert await sql_subscriptions.exists_for_source_item("ORD-1-1:0")

    @pytest.mark.asyncio
    async def test_find_due_oldest_first(self, sql_subscriptions):
        await sql_subscriptions.save(subscription("SUB-late", -1))
        await sql_subscriptions.save(subscription("SUB-early", -48))
        await sql_subscriptions.save(subscription("SUB-future", 5))
        await sql_subscriptions.save(subscription("SUB-paused", -72, status=SubscriptionStatus.PAUSED))

        due = await sql_subscriptions.find_due(NOW, limit=10)

        assert [sub.id for sub in due] == ["SUB-early", "SUB-late"]
        assert due[0].next_billing_at == NOW - timedelta(hours=48)


class TestCatalogAndStock:
    @pytest.mark.asyncio
    async def test_try_decrement_never_goes_negative(self, seeded, sql_stock):
        assert await sql_stock.try_decrement("p1", 10) is True
        assert await sql_stock.try_decrement("p1", 1) is False
        assert await sql_stock.try_decrement("missing", 1) is False
        assert (await seeded.get_product("p1")).stock == 0

    @pytest.mark.asyncio
    async def test_variation_stock(self, seeded, sql_stock):
        assert await sql_stock.try_decrement("shirt", 3, variation_id="red") is False
        assert await sql_stock.try_decrement("shirt", 2, variation_id="red") is True
        await sql_stock.increment("shirt", 1, variation_id="red")

        product = await seeded.get_product("shirt")
        assert product.variations[0].stock == 1

    @pytest.mark.asyncio
    async def test_find_customers(self, seeded):
        by_phone = await seeded.find_customers(phones=["01712345678"])
        by_email = await seeded.find_customers(email="rahim@example.com")

        assert [customer.id for customer in by_phone] == ["u1"]
        assert [customer.id for customer in by_email] == ["u1"]
        assert await seeded.find_customers() == []


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """File-backed SQLite so concurrent sessions use separate connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'stock.db'}", connect_args={"timeout": 30})
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


class TestConcurrentReservations:
    @pytest.mark.asyncio
    async def test_parallel_decrements_never_oversell(self, file_session_factory):
        catalog = SqlAlchemyCatalogRepository(file_session_factory)
        stock = SqlAlchemyStockRepository(file_session_factory)
        await catalog.add_product(Product(id="p1", title="Rice 5kg", price=Decimal("100"), stock=10))

        results = await asyncio.gather(*(stock.try_decrement("p1", 3) for _ in range(8)))

        assert results.count(True) == 10 // 3
        assert (await catalog.get_product("p1")).stock == 10 % 3

    @pytest.mark.asyncio
    async def test_parallel_ledger_reservations(self, file_session_factory):
        catalog = SqlAlchemyCatalogRepository(file_session_factory)
        ledger = InventoryLedger(catalog, SqlAlchemyStockRepository(file_session_factory))
        await catalog.add_product(Product(id="p1", title="Rice 5kg", price=Decimal("100"), stock=10))
        line = OrderItem(
            product_id="p1",
            quantity=4,
            unit_price=Decimal("100"),
            commission=CommissionSnapshot.none(Decimal("400")),
        )

        outcomes = await asyncio.gather(*(ledger.reserve([line]) for _ in range(6)))

        assert sum(1 for outcome in outcomes if outcome.ok) == 10 // 4
        stored = await catalog.get_product("p1")
        assert stored.stock == 10 % 4
        assert stored.stock >= 0
