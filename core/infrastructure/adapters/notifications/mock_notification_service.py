"""
Mock Notification Service Implementation.

This simulates notifications for testing and demos.
"""
from decimal import Decimal
from typing import Optional
import logging

from core.application.interfaces import INotificationService


logger = logging.getLogger(__name__)


class MockNotificationService(INotificationService):
    """
    Mock implementation of notification service.

    Logs notifications instead of actually sending them.
    Useful for testing and demos.
    """

    def __init__(self):
        self.notifications_sent = []
        logger.info("MockNotificationService initialized (console logging)")

    async def send_order_placed(self, order_number: str, email: str, total: Decimal) -> None:
        self.notifications_sent.append(
            {"type": "order_placed", "order_number": order_number, "email": email, "total": str(total)}
        )
        logger.info(f"✅ 🔔 ORDER PLACED: {order_number} -> {email} (total {total})")

    async def send_order_status(
        self, order_number: str, email: str, previous_status: str, new_status: str
    ) -> None:
        self.notifications_sent.append(
            {
                "type": "order_status",
                "order_number": order_number,
                "email": email,
                "previous_status": previous_status,
                "new_status": new_status,
            }
        )
        logger.info(f"🔔 ORDER STATUS: {order_number} {previous_status} -> {new_status} ({email})")

    async def send_renewal_created(
        self, subscription_number: str, order_number: str, email: str, amount: Decimal
    ) -> None:
        self.notifications_sent.append(
            {
                "type": "renewal_created",
                "subscription_number": subscription_number,
                "order_number": order_number,
                "email": email,
                "amount": str(amount),
            }
        )
        logger.info(f"🔔 RENEWAL: {subscription_number} billed as {order_number} ({email}, {amount})")

    async def send_consignment_created(
        self, order_number: str, email: str, consignment_id: str, tracking_url: Optional[str] = None
    ) -> None:
        self.notifications_sent.append(
            {
                "type": "consignment_created",
                "order_number": order_number,
                "email": email,
                "consignment_id": consignment_id,
                "tracking_url": tracking_url,
            }
        )
        logger.info(f"🔔 SHIPPED: {order_number} consignment {consignment_id} ({email})")

    def get_notifications(self) -> list:
        """Get all sent notifications (for testing)."""
        return self.notifications_sent

    def clear(self) -> None:
        """Clear notifications (for testing)."""
        self.notifications_sent.clear()
        logger.info("🗑️ Notifications cleared")
