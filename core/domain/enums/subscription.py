"""Subscription enums."""
from enum import Enum


class BillingInterval(str, Enum):
    """Billing period unit of a recurring product."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class SubscriptionStatus(str, Enum):
    """Subscription lifecycle status."""

    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    EXPIRED = "expired"


class RenewalStatus(str, Enum):
    """Outcome of a single renewal attempt."""

    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"
