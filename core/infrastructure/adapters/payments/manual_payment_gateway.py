"""
Manual payment gateway.

Cash on delivery and offline transfers need no checkout session: the order
keeps its submitted payment details and no redirect URL is returned.
"""
import logging
from typing import Optional

from core.application.interfaces import IPaymentGateway, PaymentInitiation
from core.domain.entities import CustomerAccount, Order

logger = logging.getLogger(__name__)


class ManualPaymentGateway(IPaymentGateway):
    """Gateway for payment methods settled outside the marketplace."""

    async def initiate(
        self,
        order: Order,
        payment_method: str,
        customer: Optional[CustomerAccount],
    ) -> PaymentInitiation:
        provider_type = order.payment_details.provider_type or "manual"
        logger.debug(f"Manual payment for {order.number} ({payment_method}, {provider_type})")
        return PaymentInitiation(provider_type=provider_type)
