"""Commission enums."""
from enum import Enum


class CommissionType(str, Enum):
    """How a commission rule is evaluated."""

    INHERIT = "inherit"
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    HYBRID = "hybrid"


class CommissionSource(str, Enum):
    """Tier at which the applied commission rule was found."""

    PRODUCT = "product"
    CATEGORY = "category"
    VENDOR = "vendor"
    GLOBAL = "global"
    NONE = "none"
