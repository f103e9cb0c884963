"""Customer risk tier enum."""
from enum import Enum


class RiskTier(str, Enum):
    """Customer classification derived from delivery history."""

    BLACKLISTED = "blacklisted"
    NEW = "new"
    TRUSTED = "trusted"
    MEDIUM = "medium"
    HIGH = "high"
