"""Tests for OrderNotificationHandler."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from core.application.services import OrderNotificationHandler
from core.domain.events import CourierConsignmentCreatedEvent, OrderPlacedEvent, OrderStatusChangedEvent
from core.infrastructure.adapters.notifications import MockNotificationService


@pytest.mark.asyncio
async def test_events_are_forwarded():
    service = MockNotificationService()
    handler = OrderNotificationHandler(service)

    await handler.handle(OrderPlacedEvent(order_number="ORD-1-1", customer_email="a@example.com", total=Decimal("10")))
    await handler.handle(
        OrderStatusChangedEvent(
            order_number="ORD-1-1", customer_email="a@example.com", previous_status="pending", new_status="confirmed"
        )
    )
    await handler.handle(
        CourierConsignmentCreatedEvent(
            order_number="ORD-1-1",
            customer_email="a@example.com",
            consignment_id="C1",
            tracking_url="https://courier.test/track/C1",
        )
    )

    sent = service.get_notifications()
    assert [entry["type"] for entry in sent] == ["order_placed", "order_status", "consignment_created"]
    assert sent[0]["total"] == "10"
    assert sent[2]["consignment_id"] == "C1"
    assert sent[2]["tracking_url"] == "https://courier.test/track/C1"
    assert sent[2]["email"] == "a@example.com"


@pytest.mark.asyncio
async def test_notification_failure_is_swallowed():
    service = AsyncMock()
    service.send_order_placed.side_effect = RuntimeError("smtp down")
    handler = OrderNotificationHandler(service)

    await handler.handle(OrderPlacedEvent(order_number="ORD-1-1", customer_email="a@example.com"))

    service.send_order_placed.assert_awaited_once()
