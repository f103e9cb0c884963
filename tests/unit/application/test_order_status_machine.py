"""Tests for OrderStatusMachine side effects."""

import pytest

from core.application.services import CheckoutLine
from core.domain.enums import OrderStatus, PaymentStatus
from core.domain.events import CourierConsignmentCreatedEvent, OrderStatusChangedEvent
from core.domain.result import ErrorKind


class TestTransitions:
    @pytest.mark.asyncio
    async def test_confirm_completes_payment(self, status_machine, place_order, checkout_request):
        order = (await place_order.execute(checkout_request([CheckoutLine(product_id="p1")]))).order

        outcome = await status_machine.transition(order, "confirmed", "admin-1", "admin")

        assert outcome.ok
        assert outcome.value.changed
        assert order.order_status == OrderStatus.CONFIRMED
        assert order.payment_status == PaymentStatus.COMPLETED
        assert order.status_timeline[-1].note == "Status changed from pending to confirmed"
        events = order.get_domain_events()
        assert isinstance(events[-1], OrderStatusChangedEvent)
        assert events[-1].new_status == "confirmed"

    @pytest.mark.asyncio
    async def test_cancel_restores_inventory_once(
        self, status_machine, place_order, checkout_request, catalog
    ):
        order = (await place_order.execute(checkout_request([CheckoutLine(product_id="p1", quantity=2)]))).order
        assert catalog.stock_of("p1") == 8

        cancelled = await status_machine.transition(order, OrderStatus.CANCELLED, "admin-1", "admin")
        again = await status_machine.transition(order, OrderStatus.CANCELLED, "admin-1", "admin", note="dup")

        assert cancelled.value.inventory_restored is True
        assert order.payment_status == PaymentStatus.FAILED
        assert again.ok
        assert again.value.changed is False
        assert again.value.inventory_restored is False
        assert order.status_timeline[-1].note == "dup"
        assert catalog.stock_of("p1") == 10

    @pytest.mark.asyncio
    async def test_return_after_delivery_restores(
        self, status_machine, place_order, checkout_request, catalog
    ):
        order = (await place_order.execute(checkout_request([CheckoutLine(product_id="p2", quantity=5)]))).order
        for status in ("confirmed", "processing", "shipped", "delivered"):
            assert (await status_machine.transition(order, status, "admin-1", "admin")).ok
        assert catalog.stock_of("p2") == 0

        outcome = await status_machine.transition(order, "returned", "admin-1", "admin")

        assert outcome.value.inventory_restored
        assert catalog.stock_of("p2") == 5

    @pytest.mark.asyncio
    async def test_shipping_without_consignment_generates_local_one(
        self, status_machine, place_order, checkout_request
    ):
        order = (await place_order.execute(checkout_request([CheckoutLine(product_id="p1")]))).order
        await status_machine.transition(order, "confirmed", "admin-1", "admin")
        await status_machine.transition(order, "processing", "admin-1", "admin")

        outcome = await status_machine.transition(order, "shipped", "admin-1", "admin")

        assert outcome.value.consignment_generated
        assert order.courier.consignment_id.startswith(order.number)
        assert order.courier.generated_by == "local"
        created = [e for e in order.get_domain_events() if isinstance(e, CourierConsignmentCreatedEvent)]
        assert created[0].consignment_id == order.courier.consignment_id
        assert created[0].customer_email == order.customer_email

    @pytest.mark.asyncio
    async def test_illegal_transition_leaves_order_untouched(
        self, status_machine, place_order, checkout_request
    ):
        order = (await place_order.execute(checkout_request([CheckoutLine(product_id="p1")]))).order
        timeline_length = len(order.status_timeline)

        outcome = await status_machine.transition(order, "delivered", "admin-1", "admin")

        assert outcome.error == ErrorKind.CONFLICT
        assert outcome.details["allowed_next"] == ["confirmed", "cancelled"]
        assert order.order_status == OrderStatus.PENDING
        assert len(order.status_timeline) == timeline_length

    @pytest.mark.asyncio
    async def test_unknown_status_is_validation_error(
        self, status_machine, place_order, checkout_request
    ):
        order = (await place_order.execute(checkout_request([CheckoutLine(product_id="p1")]))).order

        outcome = await status_machine.transition(order, "teleported", "admin-1", "admin")

        assert outcome.error == ErrorKind.VALIDATION
        assert outcome.status == 400
