"""
Webhook Notification Service Implementation.

Posts customer notification requests as JSON to a configured webhook
(e.g. a mail relay).
"""
from decimal import Decimal
from typing import Any, Dict, Optional
import logging
import aiohttp

from core.application.interfaces import INotificationService
from core.settings.modules.notification_settings import NotificationSettings


logger = logging.getLogger(__name__)


class WebhookNotificationService(INotificationService):
    """
    Webhook implementation of notification service.

    Delivery errors are logged and never raised.
    """

    def __init__(self, settings: NotificationSettings):
        """
        Initialize webhook notification service.

        Args:
            settings: Notification settings with webhook URL
        """
        self.settings = settings
        self.webhook_url = settings.webhook_url
        self.sender_name = settings.sender_name
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)
        logger.info("WebhookNotificationService initialized")

    async def send_order_placed(self, order_number: str, email: str, total: Decimal) -> None:
        await self._post(
            {
                "template": "order_placed",
                "to": email,
                "subject": f"Order {order_number} received",
                "data": {"order_number": order_number, "total": str(total)},
            }
        )

    async def send_order_status(
        self, order_number: str, email: str, previous_status: str, new_status: str
    ) -> None:
        await self._post(
            {
                "template": "order_status",
                "to": email,
                "subject": f"Order {order_number} is now {new_status}",
                "data": {
                    "order_number": order_number,
                    "previous_status": previous_status,
                    "new_status": new_status,
                },
            }
        )

    async def send_renewal_created(
        self, subscription_number: str, order_number: str, email: str, amount: Decimal
    ) -> None:
        await self._post(
            {
                "template": "renewal_created",
                "to": email,
                "subject": f"Subscription {subscription_number} renewed",
                "data": {
                    "subscription_number": subscription_number,
                    "order_number": order_number,
                    "amount": str(amount),
                },
            }
        )

    async def send_consignment_created(
        self, order_number: str, email: str, consignment_id: str, tracking_url: Optional[str] = None
    ) -> None:
        await self._post(
            {
                "template": "consignment_created",
                "to": email,
                "subject": f"Order {order_number} has shipped",
                "data": {
                    "order_number": order_number,
                    "consignment_id": consignment_id,
                    "tracking_url": tracking_url,
                },
            }
        )

    async def _post(self, payload: Dict[str, Any]) -> None:
        """
        Send a notification request to the webhook.

        Args:
            payload: JSON body (template, recipient and data)
        """
        if not self.webhook_url:
            logger.warning("Notification webhook_url not configured, skipping notification")
            return
        if not payload.get("to"):
            logger.warning(f"Notification {payload.get('template')} has no recipient, skipping")
            return

        payload["sender"] = self.sender_name
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status >= 300:
                        error_text = await response.text()
                        logger.error(
                            f"Notification webhook error: {response.status} - {error_text}"
                        )
                    else:
                        logger.info(f"Notification {payload['template']} sent to {payload['to']}")
        except Exception as e:
            logger.error(f"Failed to send notification: {e}", exc_info=True)
