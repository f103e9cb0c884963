"""Application DTOs for customer insights and renewals."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.application.services.customer_risk import CustomerRiskProfile
from core.application.services.renewal_billing import RenewalRunSummary


class CustomerRiskDTO(BaseModel):
    """Risk profile of a contact."""

    total_orders: int = Field(..., ge=0)
    delivered: int = Field(..., ge=0)
    cancelled: int = Field(..., ge=0)
    returned: int = Field(..., ge=0)
    success_rate: Decimal
    risk_tier: str
    is_blacklisted: bool
    blacklist_reason: Optional[str] = None
    matched_user_ids: List[str] = Field(default_factory=list)
    recent_order_numbers: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @classmethod
    def from_profile(cls, profile: CustomerRiskProfile) -> "CustomerRiskDTO":
        return cls(
            total_orders=profile.total_orders,
            delivered=profile.delivered,
            cancelled=profile.cancelled,
            returned=profile.returned,
            success_rate=profile.success_rate,
            risk_tier=profile.risk_tier.value,
            is_blacklisted=profile.is_blacklisted,
            blacklist_reason=profile.blacklist_reason,
            matched_user_ids=profile.matched_user_ids,
            recent_order_numbers=profile.recent_order_numbers,
        )


class RenewalRunDTO(BaseModel):
    """Counters of one renewal sweep."""

    processed: int
    created_orders: int
    completed: int
    skipped: int
    failed: int
    order_numbers: List[str] = Field(default_factory=list)

    @classmethod
    def from_summary(cls, summary: RenewalRunSummary) -> "RenewalRunDTO":
        return cls(
            processed=summary.processed,
            created_orders=summary.created_orders,
            completed=summary.completed,
            skipped=summary.skipped,
            failed=summary.failed,
            order_numbers=summary.order_numbers,
        )
