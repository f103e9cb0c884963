"""Customer Risk Profile: read-only aggregate over order history."""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from core.domain.entities import Order
from core.domain.enums import OrderStatus, RiskTier
from core.domain.repositories import CatalogRepository, OrderRepository
from core.domain.result import ErrorKind, Outcome
from core.domain.services import classify_risk, success_rate
from core.domain.value_objects import phone_variants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomerRiskProfile:
    """Delivery history summary for a contact."""

    total_orders: int
    delivered: int
    cancelled: int
    returned: int
    success_rate: Decimal
    risk_tier: RiskTier
    is_blacklisted: bool = False
    blacklist_reason: Optional[str] = None
    matched_user_ids: List[str] = field(default_factory=list)
    phone_variants: List[str] = field(default_factory=list)
    recent_order_numbers: List[str] = field(default_factory=list)


class CustomerRiskService:
    """
    Builds risk profiles from accounts and orders.

    Used by checkout (hard block for flagged accounts) and by manual order
    entry (preview before an admin commits to an order).
    """

    RECENT_ORDERS = 10

    def __init__(self, catalog: CatalogRepository, orders: OrderRepository) -> None:
        self._catalog = catalog
        self._orders = orders

    async def profile(
        self,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Outcome[CustomerRiskProfile]:
        """
        Compute the risk profile for a contact.

        Args:
            email: Contact email (case-insensitive)
            phone: Contact phone in any written form
            user_id: Registered account id

        Returns:
            Outcome with CustomerRiskProfile; VALIDATION if no identifier given
        """
        normalized_email = (email or "").strip().lower() or None
        variants = phone_variants(phone or "")
        user_id = (user_id or "").strip() or None

        if not normalized_email and not variants and not user_id:
            return Outcome.failure(ErrorKind.VALIDATION, "Email, phone or user id is required")

        accounts = await self._catalog.find_customers(
            user_id=user_id, email=normalized_email, phones=variants
        )
        user_ids = [account.id for account in accounts]
        if user_id and user_id not in user_ids:
            user_ids.append(user_id)

        emails = {normalized_email} if normalized_email else set()
        emails.update(account.email.lower() for account in accounts if account.email)
        for account in accounts:
            for variant in phone_variants(account.phone or ""):
                if variant not in variants:
                    variants.append(variant)

        matched = await self._orders.find_for_customer(
            user_ids=user_ids, emails=sorted(emails), phones=variants
        )
        orders = self._dedupe(matched)

        delivered = sum(1 for order in orders if order.order_status == OrderStatus.DELIVERED)
        cancelled = sum(1 for order in orders if order.order_status == OrderStatus.CANCELLED)
        returned = sum(1 for order in orders if order.order_status == OrderStatus.RETURNED)
        rate = success_rate(delivered, len(orders))

        flagged = [account for account in accounts if account.is_blacklisted]
        tier = classify_risk(len(orders), rate, bool(flagged))
        reason = None
        if flagged:
            reason = flagged[0].blacklist_reason or "Account is blacklisted"
        elif tier == RiskTier.BLACKLISTED:
            reason = f"Delivery success rate {rate}% is below 40%"

        recent = sorted(orders, key=lambda order: order.created_at, reverse=True)
        profile = CustomerRiskProfile(
            total_orders=len(orders),
            delivered=delivered,
            cancelled=cancelled,
            returned=returned,
            success_rate=rate,
            risk_tier=tier,
            is_blacklisted=bool(flagged),
            blacklist_reason=reason,
            matched_user_ids=[account.id for account in accounts],
            phone_variants=variants,
            recent_order_numbers=[order.number for order in recent[: self.RECENT_ORDERS]],
        )
        logger.debug(f"Risk profile: {len(orders)} orders, {rate}% success, tier={tier.value}")
        return Outcome.success(profile)

    @staticmethod
    def _dedupe(orders: List[Order]) -> List[Order]:
        unique: Dict[str, Order] = {}
        for order in orders:
            unique.setdefault(order.number, order)
        return list(unique.values())
