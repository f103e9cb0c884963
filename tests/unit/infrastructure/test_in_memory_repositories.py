"""Tests for the in-memory repositories."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from core.application.services import CheckoutLine
from core.domain.entities import CustomerAccount, ProductVariation, Subscription
from core.domain.enums import BillingInterval, SubscriptionStatus
from core.domain.repositories import DuplicateOrderError

NOW = datetime(2024, 6, 15, 8, 0, tzinfo=timezone.utc)


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


@pytest_asyncio.fixture
async def stored_order(place_order, checkout_request):
    response = await place_order.execute(checkout_request([CheckoutLine(product_id="p1", quantity=1)]))
    return response.order


class TestOrderRepository:
    @pytest.mark.asyncio
    async def test_duplicate_add_rejected(self, orders, stored_order):
        with pytest.raises(DuplicateOrderError):
            await orders.add(stored_order)

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, orders, stored_order):
        loaded = await orders.get(stored_order.number)
        loaded.notes = "changed"

        assert (await orders.get(stored_order.number)).notes != "changed"

    @pytest.mark.asyncio
    async def test_stored_orders_have_no_pending_events(self, orders, stored_order):
        loaded = await orders.get(stored_order.number)

        assert loaded.get_domain_events() == []

    @pytest.mark.asyncio
    async def test_find_for_customer(self, orders, stored_order):
        by_email = await orders.find_for_customer(emails=["RAHIM@example.com "])
        by_phone = await orders.find_for_customer(phones=["01712345678"])
        nobody = await orders.find_for_customer(user_ids=["someone-else"])

        assert [order.number for order in by_email] == [stored_order.number]
        assert len(by_phone) == 1
        assert nobody == []

    @pytest.mark.asyncio
    async def test_delete(self, orders, stored_order):
        assert await orders.delete(stored_order.number) is True
        assert await orders.delete(stored_order.number) is False
        assert await orders.get(stored_order.number) is None


class TestSubscriptionRepository:
    @pytest.mark.asyncio
    async def test_source_item_key_is_unique(self, subscriptions):
        await subscriptions.save(subscription("SUB-1", -1, source_item_key="ORD-1-1:0"))

        with pytest.raises(ValueError):
            await subscriptions.save(subscription("SUB-2", -1, source_item_key="ORD-1-1:0"))
        assert await subscriptions.exists_for_source_item("ORD-1-1:0")

    @pytest.mark.asyncio
    async def test_resave_same_subscription(self, subscriptions):
        sub = subscription("SUB-1", -1)
        await subscriptions.save(sub)
        sub.completed_cycles = 1

        await subscriptions.save(sub)

        assert (await subscriptions.get("SUB-1")).completed_cycles == 1

    @pytest.mark.asyncio
    async def test_find_due_oldest_first(self, subscriptions):
        await subscriptions.save(subscription("SUB-late", -1))
        await subscriptions.save(subscription("SUB-early", -48))
        await subscriptions.save(subscription("SUB-future", 5))
        await subscriptions.save(subscription("SUB-paused", -72, status=SubscriptionStatus.PAUSED))

        due = await subscriptions.find_due(NOW, limit=10)
        limited = await subscriptions.find_due(NOW, limit=1)

        assert [sub.id for sub in due] == ["SUB-early", "SUB-late"]
        assert [sub.id for sub in limited] == ["SUB-early"]


class TestCatalogRepository:
    @pytest.mark.asyncio
    async def test_try_decrement_never_goes_negative(self, catalog):
        assert await catalog.try_decrement("p2", 5) is True
        assert await catalog.try_decrement("p2", 1) is False
        assert catalog.stock_of("p2") == 0

    @pytest.mark.asyncio
    async def test_invalid_decrements(self, catalog):
        assert await catalog.try_decrement("p1", 0) is False
        assert await catalog.try_decrement("missing", 1) is False

    @pytest.mark.asyncio
    async def test_variation_stock(self, catalog, make_product):
        catalog.add_product(
            make_product(
                "shirt",
                marketplace_type="variable",
                variations=[ProductVariation(id="red", price=Decimal("300"), stock=2)],
            )
        )

        assert await catalog.try_decrement("shirt", 2, variation_id="red") is True
        assert await catalog.try_decrement("shirt", 1, variation_id="blue") is False
        await catalog.increment("shirt", 1, variation_id="red")
        assert catalog.stock_of("shirt", "red") == 1

    @pytest.mark.asyncio
    async def test_find_customers_by_phone_variant(self, catalog):
        catalog.add_customer(CustomerAccount(id="u9", email="x@example.com", phone="+8801712345678"))

        by_phone = await catalog.find_customers(phones=["01712345678"])
        by_email = await catalog.find_customers(email=" X@Example.com")

        assert [customer.id for customer in by_phone] == ["u9"]
        assert [customer.id for customer in by_email] == ["u9"]
