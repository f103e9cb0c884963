"""Tests for OrderApplicationService: cancellation, consignments and courier sync."""

from typing import Optional

import pytest
import pytest_asyncio

from core.application.interfaces import (
    GENERATED_BY_API,
    ConsignmentResult,
    ICourierGateway,
    TrackingResult,
)
from core.application.services import (
    CheckoutLine,
    OrderApplicationService,
    OrderStatusMachine,
)
from core.domain.entities import Order
from core.domain.enums import OrderStatus
from core.domain.result import ErrorKind, Outcome


class FakeCourier(ICourierGateway):
    """Courier gateway returning canned API results."""

    def __init__(self):
        self.tracking_status: Optional[str] = "in_transit"
        self.tracking_error: Optional[str] = None
        self.generated = 0

    async def generate_consignment(self, order: Order) -> ConsignmentResult:
        self.generated += 1
        return ConsignmentResult(
            consignment_id=f"CN-{self.generated}",
            provider="fake",
            generated_by=GENERATED_BY_API,
            tracking_number=f"TRK-{self.generated}",
            label_url=f"https://courier.test/labels/CN-{self.generated}.pdf",
            status="created",
        )

    def build_local_consignment(self, order: Order, warning: Optional[str] = None) -> ConsignmentResult:
        return ConsignmentResult(
            consignment_id=f"{order.number}-1234", provider="local", generated_by="local", warning=warning
        )

    async def fetch_tracking(self, order: Order) -> Outcome[TrackingResult]:
        if self.tracking_error:
            return Outcome.failure(ErrorKind.EXTERNAL, self.tracking_error)
        return Outcome.success(
            TrackingResult(
                status=self.tracking_status,
                tracking_url="https://courier.test/track/CN-1",
                events=[{"status": self.tracking_status}],
            )
        )


@pytest.fixture
def fake_courier() -> FakeCourier:
    return FakeCourier()


@pytest.fixture
def service(orders, ledger, fake_courier, event_bus) -> OrderApplicationService:
    return OrderApplicationService(orders, OrderStatusMachine(ledger, fake_courier), fake_courier, event_bus)


@pytest_asyncio.fixture
async def order_number(place_order, checkout_request) -> str:
    response = await place_order.execute(checkout_request([CheckoutLine(product_id="p1", quantity=2)]))
    return response.order.number


class TestStatusUpdates:
    @pytest.mark.asyncio
    async def test_update_persists_and_publishes(self, service, order_number, orders, notification_service):
        outcome = await service.update_status(order_number, "confirmed", actor="admin-1", actor_role="admin")

        assert outcome.ok
        stored = await orders.get(order_number)
        assert stored.order_status == OrderStatus.CONFIRMED
        status_notes = [n for n in notification_service.get_notifications() if n["type"] == "order_status"]
        assert status_notes[0]["new_status"] == "confirmed"

    @pytest.mark.asyncio
    async def test_rejected_update_is_not_persisted(self, service, order_number, orders):
        outcome = await service.update_status(order_number, "shipped", actor="admin-1", actor_role="admin")

        assert outcome.error == ErrorKind.CONFLICT
        assert (await orders.get(order_number)).order_status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_unknown_order(self, service):
        outcome = await service.update_status("ORD-1-1", "confirmed", actor="a", actor_role="admin")

        assert outcome.error == ErrorKind.NOT_FOUND


class TestCancelOrder:
    @pytest.mark.asyncio
    async def test_owner_cancels_pending_order(self, service, order_number, orders, catalog):
        outcome = await service.cancel_order(order_number, "u1", reason="Changed my mind")

        assert outcome.ok
        stored = await orders.get(order_number)
        assert stored.order_status == OrderStatus.CANCELLED
        assert stored.status_timeline[-1].note == "Changed my mind"
        assert stored.inventory.restored
        assert catalog.stock_of("p1") == 10

    @pytest.mark.asyncio
    async def test_other_customer_sees_not_found(self, service, order_number):
        outcome = await service.cancel_order(order_number, "someone-else")

        assert outcome.error == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_cannot_cancel_after_processing(self, service, order_number):
        await service.update_status(order_number, "confirmed", actor="a", actor_role="admin")
        await service.update_status(order_number, "processing", actor="a", actor_role="admin")

        outcome = await service.cancel_order(order_number, "u1")

        assert outcome.error == ErrorKind.CONFLICT


class TestConsignments:
    @pytest.mark.asyncio
    async def test_generate_and_refuse_duplicate(self, service, order_number, fake_courier):
        first = await service.generate_consignment(order_number)
        duplicate = await service.generate_consignment(order_number)
        forced = await service.generate_consignment(order_number, force=True)

        assert first.value.courier.consignment_id == "CN-1"
        assert first.value.courier.synced_from_api is True
        assert duplicate.error == ErrorKind.CONFLICT
        assert duplicate.details["consignment_id"] == "CN-1"
        assert forced.value.courier.consignment_id == "CN-2"

    @pytest.mark.asyncio
    async def test_local_fallback_reports_warning(self, order_service, order_number, orders):
        outcome = await order_service.generate_consignment(order_number)

        assert outcome.ok
        assert outcome.message
        stored = await orders.get(order_number)
        assert stored.courier.generated_by == "local"
        assert stored.courier.consignment_id

    @pytest.mark.asyncio
    async def test_cancelled_order_gets_no_consignment(self, service, order_number):
        await service.cancel_order(order_number, "u1")

        outcome = await service.generate_consignment(order_number)

        assert outcome.error == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_label_lookup(self, service, order_number):
        missing = await service.get_courier_label(order_number)
        await service.generate_consignment(order_number)
        found = await service.get_courier_label(order_number)

        assert missing.error == ErrorKind.NOT_FOUND
        assert found.value == "https://courier.test/labels/CN-1.pdf"


class TestCourierSync:
    @pytest.mark.asyncio
    async def test_requires_consignment(self, service, order_number):
        outcome = await service.sync_courier_tracking(order_number)

        assert outcome.error == ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_legal_mapped_status_is_applied(self, service, order_number, orders):
        for status in ("confirmed", "processing"):
            await service.update_status(order_number, status, actor="a", actor_role="admin")
        await service.generate_consignment(order_number)

        outcome = await service.sync_courier_tracking(order_number)

        result = outcome.value
        assert result.status_applied
        assert result.mapped_status == OrderStatus.SHIPPED
        stored = await orders.get(order_number)
        assert stored.order_status == OrderStatus.SHIPPED
        assert stored.status_timeline[-1].actor == "courier-sync"
        assert stored.courier.status == "in_transit"
        assert stored.courier.last_synced_at is not None

    @pytest.mark.asyncio
    async def test_illegal_mapped_status_only_updates_metadata(
        self, service, order_number, orders, fake_courier
    ):
        await service.generate_consignment(order_number)
        fake_courier.tracking_status = "delivered"

        outcome = await service.sync_courier_tracking(order_number)

        result = outcome.value
        assert outcome.ok
        assert result.status_applied is False
        assert result.mapped_status == OrderStatus.DELIVERED
        assert "not reachable from pending" in result.reason
        stored = await orders.get(order_number)
        assert stored.order_status == OrderStatus.PENDING
        assert stored.courier.status == "delivered"
        assert stored.courier.last_unapplied_status == "delivered"
        assert stored.courier.events == [{"status": "delivered"}]

    @pytest.mark.asyncio
    async def test_unmapped_status(self, service, order_number, fake_courier):
        await service.generate_consignment(order_number)
        fake_courier.tracking_status = "hub_received"

        outcome = await service.sync_courier_tracking(order_number)

        assert outcome.value.mapped_status is None
        assert outcome.value.status_applied is False

    @pytest.mark.asyncio
    async def test_provider_error_is_external(self, service, order_number, fake_courier):
        await service.generate_consignment(order_number)
        fake_courier.tracking_error = "Courier tracking failed: HTTP 500"

        outcome = await service.sync_courier_tracking(order_number)

        assert outcome.error == ErrorKind.EXTERNAL
        assert outcome.status == 502
