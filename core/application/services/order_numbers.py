"""Insert freshly numbered orders, regenerating the number on collision."""
import logging
from typing import Callable

from core.domain.entities import Order
from core.domain.repositories import DuplicateOrderError, OrderRepository

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 5


async def add_with_fresh_number(
    orders: OrderRepository,
    build_order: Callable[[], Order],
    attempts: int = MAX_NUMBER_ATTEMPTS,
) -> Order:
    """
    Build and insert an order, rebuilding it when its number is taken.

    ``build_order`` is called once per attempt and must generate a new
    order number each time.

    Raises:
        DuplicateOrderError: If every attempt collided
    """
    for attempt in range(1, attempts + 1):
        order = build_order()
        try:
            await orders.add(order)
            return order
        except DuplicateOrderError:
            logger.warning(
                f"⚠️ Order number {order.number} already taken (attempt {attempt}/{attempts})"
            )
    raise DuplicateOrderError(
        f"Could not allocate a unique order number after {attempts} attempts"
    )
