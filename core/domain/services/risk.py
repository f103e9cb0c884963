"""Customer risk tier rules."""
from decimal import Decimal, ROUND_HALF_UP

from ..enums import RiskTier

TRUSTED_THRESHOLD = Decimal("80")
MEDIUM_THRESHOLD = Decimal("60")
HIGH_THRESHOLD = Decimal("40")


def success_rate(delivered: int, total: int) -> Decimal:
    """Delivered share of all orders, in percent, rounded half-up to 2 places."""
    if total <= 0:
        return Decimal("0.00")
    rate = Decimal(delivered) * Decimal("100") / Decimal(total)
    return rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def classify_risk(total_orders: int, rate: Decimal, flagged: bool) -> RiskTier:
    """
    Derive the risk tier.

    A flagged account is always blacklisted. Without history the customer
    is new. Below 40% success the contact is treated as blacklisted.
    """
    if flagged:
        return RiskTier.BLACKLISTED
    if total_orders == 0:
        return RiskTier.NEW
    if rate >= TRUSTED_THRESHOLD:
        return RiskTier.TRUSTED
    if rate >= MEDIUM_THRESHOLD:
        return RiskTier.MEDIUM
    if rate >= HIGH_THRESHOLD:
        return RiskTier.HIGH
    return RiskTier.BLACKLISTED
