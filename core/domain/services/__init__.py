"""Pure domain rules (no I/O)."""

from .billing import add_billing_interval
from .courier_status import map_courier_status, normalize_courier_status
from .commission import (
    build_commission_snapshot,
    calculate_commission_amount,
    pick_commission_source,
)
from .order_status import (
    ALLOWED_TRANSITIONS,
    allowed_next,
    can_transition,
    is_terminal,
    payment_status_after,
)
from .risk import classify_risk, success_rate

__all__ = [
    "ALLOWED_TRANSITIONS",
    "add_billing_interval",
    "allowed_next",
    "build_commission_snapshot",
    "calculate_commission_amount",
    "can_transition",
    "classify_risk",
    "is_terminal",
    "map_courier_status",
    "normalize_courier_status",
    "payment_status_after",
    "pick_commission_source",
    "success_rate",
]
