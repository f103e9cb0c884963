"""Order status transition table."""
from typing import Dict, FrozenSet, List

from ..enums import OrderStatus, PaymentStatus

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.RETURNED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.RETURNED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.RETURNED: frozenset(),
}

# Entering one of these settles a still-pending payment.
PAYMENT_COMPLETING_STATUSES = frozenset(
    {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED}
)

# Entering one of these fails the payment and gives stock back.
RELEASING_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.RETURNED})

_ORDER = list(OrderStatus)


def allowed_next(current: OrderStatus) -> List[OrderStatus]:
    """Statuses reachable from ``current``, in lifecycle order."""
    targets = ALLOWED_TRANSITIONS[current]
    return [status for status in _ORDER if status in targets]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Same-status updates are always allowed (note-only)."""
    return target == current or target in ALLOWED_TRANSITIONS[current]


def is_terminal(status: OrderStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def payment_status_after(target: OrderStatus, current_payment: PaymentStatus) -> PaymentStatus:
    """Payment status implied by entering ``target``."""
    if target in RELEASING_STATUSES:
        return PaymentStatus.FAILED
    if target in PAYMENT_COMPLETING_STATUSES and current_payment == PaymentStatus.PENDING:
        return PaymentStatus.COMPLETED
    return current_payment
