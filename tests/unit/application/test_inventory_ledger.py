"""Tests for InventoryLedger reservations, rollback and restoration."""

from decimal import Decimal
import asyncio

import pytest

from core.application.services import RESERVE, RESTORE, CheckoutLine
from core.domain.entities import OrderItem, ProductVariation
from core.domain.result import ErrorKind
from core.domain.value_objects import CommissionSnapshot


def line_item(product_id, quantity, variation_id=None) -> OrderItem:
    return OrderItem(
        product_id=product_id,
        quantity=quantity,
        unit_price=Decimal("10"),
        commission=CommissionSnapshot.none(Decimal("10") * quantity),
        variation_id=variation_id,
    )


class TestReserve:
    @pytest.mark.asyncio
    async def test_reserves_every_line(self, ledger, catalog):
        outcome = await ledger.reserve([line_item("p1", 3), line_item("p2", 2)])

        assert outcome.ok
        assert [adjustment.applied for adjustment in outcome.value] == [True, True]
        assert catalog.stock_of("p1") == 7
        assert catalog.stock_of("p2") == 3

    @pytest.mark.asyncio
    async def test_third_line_failure_rolls_back_first_two(self, ledger, catalog, make_product):
        catalog.add_product(make_product("p3", stock=1))

        outcome = await ledger.reserve(
            [line_item("p1", 4), line_item("p2", 5), line_item("p3", 2)]
        )

        assert outcome.error == ErrorKind.CONFLICT
        assert outcome.details["product_id"] == "p3"
        assert catalog.stock_of("p1") == 10
        assert catalog.stock_of("p2") == 5
        assert catalog.stock_of("p3") == 1

    @pytest.mark.asyncio
    async def test_rollback_runs_last_applied_first(self, ledger, catalog):
        calls = []
        original = catalog.increment

        async def record(product_id, quantity, variation_id=None):
            calls.append(product_id)
            await original(product_id, quantity, variation_id=variation_id)

        catalog.increment = record
        await ledger.reserve([line_item("p1", 1), line_item("p2", 1), line_item("p2", 10)])

        assert calls == ["p2", "p1"]

    @pytest.mark.asyncio
    async def test_concurrent_reservations_never_oversell(self, ledger, catalog):
        original = catalog.get_product

        async def yielding_get_product(product_id):
            product = await original(product_id)
            await asyncio.sleep(0)
            return product

        catalog.get_product = yielding_get_product

        outcomes = await asyncio.gather(*(ledger.reserve([line_item("p1", 3)]) for _ in range(8)))

        assert sum(1 for outcome in outcomes if outcome.ok) == 10 // 3
        assert catalog.stock_of("p1") == 10 % 3
        assert all(outcome.error == ErrorKind.CONFLICT for outcome in outcomes if not outcome.ok)

    @pytest.mark.asyncio
    async def test_backorder_lines_are_not_deducted(self, ledger, catalog, make_product):
        catalog.add_product(make_product("bo", stock=0, allow_backorder=True))

        outcome = await ledger.reserve([line_item("bo", 5)])

        assert outcome.ok
        assert outcome.value[0].applied is False
        assert catalog.stock_of("bo") == 0

    @pytest.mark.asyncio
    async def test_exception_mid_batch_rolls_back_and_raises(self, ledger, catalog):
        original = catalog.try_decrement

        async def flaky(product_id, quantity, variation_id=None):
            if product_id == "p2":
                raise RuntimeError("db down")
            return await original(product_id, quantity, variation_id=variation_id)

        catalog.try_decrement = flaky

        with pytest.raises(RuntimeError):
            await ledger.reserve([line_item("p1", 2), line_item("p2", 1)])

        assert catalog.stock_of("p1") == 10

    @pytest.mark.asyncio
    async def test_variation_stock(self, ledger, catalog, make_product):
        catalog.add_product(
            make_product("var", marketplace_type="variable", variations=[ProductVariation(id="xl", stock=2)])
        )

        ok = await ledger.reserve([line_item("var", 2, variation_id="xl")])
        short = await ledger.reserve([line_item("var", 1, variation_id="xl")])

        assert ok.ok
        assert short.error == ErrorKind.CONFLICT
        assert catalog.stock_of("var", "xl") == 0


class TestApplyAdjustment:
    @pytest.mark.asyncio
    async def test_restore_direction_gives_stock_back(self, ledger, catalog):
        await ledger.apply_adjustment([line_item("p1", 4)], RESERVE)
        outcome = await ledger.apply_adjustment([line_item("p1", 4)], RESTORE)

        assert outcome.ok
        assert catalog.stock_of("p1") == 10

    @pytest.mark.asyncio
    async def test_invalid_direction(self, ledger):
        outcome = await ledger.apply_adjustment([line_item("p1", 1)], 0)

        assert outcome.error == ErrorKind.VALIDATION


class TestRestoreForOrder:
    @pytest.mark.asyncio
    async def test_restores_exactly_once(self, ledger, catalog, place_order, checkout_request):
        response = await place_order.execute(checkout_request([CheckoutLine(product_id="p1", quantity=3)]))
        order = response.order
        assert catalog.stock_of("p1") == 7

        first = await ledger.restore_for_order(order, reason="Order cancelled")
        second = await ledger.restore_for_order(order, reason="Order cancelled")

        assert first is True
        assert second is False
        assert catalog.stock_of("p1") == 10
        assert order.inventory.restored_reason == "Order cancelled"

    @pytest.mark.asyncio
    async def test_nothing_to_restore_when_never_deducted(self, ledger, place_order, checkout_request, orders):
        response = await place_order.execute(checkout_request([CheckoutLine(product_id="p1")]))
        order = response.order
        order.inventory.deducted = False

        assert await ledger.restore_for_order(order, reason="x") is False
