"""Forwards domain events to the notification service."""
import logging

from core.application.interfaces import INotificationService
from core.domain.events import (
    CourierConsignmentCreatedEvent,
    DomainEvent,
    OrderPlacedEvent,
    OrderStatusChangedEvent,
    RenewalOrderCreatedEvent,
)

logger = logging.getLogger(__name__)


class OrderNotificationHandler:
    """
    Event subscriber sending customer notifications.

    Notification failures are logged and never propagate: the order operation
    that raised the event has already succeeded.
    """

    def __init__(self, notification_service: INotificationService) -> None:
        self._notification_service = notification_service

    async def handle(self, event: DomainEvent) -> None:
        try:
            if isinstance(event, OrderPlacedEvent):
                await self._notification_service.send_order_placed(
                    event.order_number, event.customer_email, event.total
                )
            elif isinstance(event, OrderStatusChangedEvent):
                await self._notification_service.send_order_status(
                    event.order_number,
                    event.customer_email,
                    event.previous_status,
                    event.new_status,
                )
            elif isinstance(event, RenewalOrderCreatedEvent):
                await self._notification_service.send_renewal_created(
                    event.subscription_number,
                    event.order_number,
                    event.customer_email,
                    event.amount,
                )
            elif isinstance(event, CourierConsignmentCreatedEvent):
                await self._notification_service.send_consignment_created(
                    event.order_number,
                    event.customer_email,
                    event.consignment_id,
                    event.tracking_url,
                )
        except Exception as e:
            logger.error(
                f"Notification for {event.event_type} ({event.aggregate_id}) failed: {e}",
                exc_info=True,
            )
